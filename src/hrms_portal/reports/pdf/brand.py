"""Shared layout for every generated PDF: brand header, styles, tables."""

from __future__ import annotations

from io import BytesIO
from typing import Any, Iterable, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ...common.datetime_utils import now_local
from ...common.formatting import format_currency

PRIMARY = colors.HexColor("#D12702")
TEXT = colors.HexColor("#1f2937")
MUTED = colors.HexColor("#6b7280")
BORDER = colors.HexColor("#e5e7eb")
HEADER_BG = colors.HexColor("#f9fafb")

TAGLINE = "Professional Security Services"

_styles = getSampleStyleSheet()

STYLES = {
    "brand": ParagraphStyle("Brand", parent=_styles["Heading1"], fontSize=18, textColor=PRIMARY, spaceAfter=2),
    "tagline": ParagraphStyle("Tagline", parent=_styles["Normal"], fontSize=9, textColor=MUTED),
    "title": ParagraphStyle("Title", parent=_styles["Heading2"], fontSize=14, textColor=TEXT, alignment=2),
    "subtitle": ParagraphStyle("Subtitle", parent=_styles["Normal"], fontSize=9, textColor=MUTED, alignment=2),
    "section": ParagraphStyle("Section", parent=_styles["Heading3"], fontSize=11, textColor=PRIMARY, spaceBefore=8),
    "body": ParagraphStyle("Body", parent=_styles["Normal"], fontSize=9, textColor=TEXT),
    "footer": ParagraphStyle("Footer", parent=_styles["Normal"], fontSize=8, textColor=MUTED, alignment=1),
}


def money(amount: Any) -> str:
    # Helvetica has no rupee glyph
    return format_currency(amount, symbol="Rs. ")


def header(brand_name: str, title: str, subtitle: str = "") -> list[Flowable]:
    left = [Paragraph(escape(brand_name), STYLES["brand"]), Paragraph(TAGLINE, STYLES["tagline"])]
    right = [Paragraph(escape(title), STYLES["title"])]
    if subtitle:
        right.append(Paragraph(escape(subtitle), STYLES["subtitle"]))
    table = Table([[left, right]], colWidths=[105 * mm, 75 * mm])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
                ("LINEBELOW", (0, 0), (-1, 0), 2, PRIMARY),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return [table, Spacer(1, 6 * mm)]


def section(title: str) -> Paragraph:
    return Paragraph(escape(title), STYLES["section"])


def key_value_table(rows: Iterable[tuple[str, Any]], col_widths: Optional[Sequence] = None) -> Table:
    data = [
        [Paragraph(f"<b>{escape(label)}</b>", STYLES["body"]), Paragraph(escape(str(value)), STYLES["body"])]
        for label, value in rows
    ]
    table = Table(data or [["", ""]], colWidths=col_widths or [55 * mm, 125 * mm])
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.5, BORDER),
                ("BACKGROUND", (0, 0), (0, -1), HEADER_BG),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    return table


def data_table(
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    *,
    col_widths: Optional[Sequence] = None,
    total_row: Optional[Sequence[Any]] = None,
) -> Table:
    body = [[str(c) for c in row] for row in rows]
    data = [list(headers), *body]
    if total_row is not None:
        data.append([str(c) for c in total_row])
    table = Table(data, colWidths=col_widths, repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, BORDER),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    for idx in range(1, len(body) + 1):
        if idx % 2 == 0:
            style.append(("BACKGROUND", (0, idx), (-1, idx), HEADER_BG))
    if total_row is not None:
        style += [
            ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#f0f0f0")),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ]
    table.setStyle(TableStyle(style))
    return table


def footer(brand_name: str, note: str = "") -> list[Flowable]:
    text = escape(f"Generated on {now_local().strftime('%d/%m/%Y %H:%M')} | {brand_name}")
    flowables: list[Flowable] = [Spacer(1, 8 * mm), Paragraph(text, STYLES["footer"])]
    if note:
        flowables.append(Paragraph(escape(note), STYLES["footer"]))
    return flowables


def build_document(story: list[Flowable], *, title: str, author: str, wide: bool = False) -> bytes:
    output = BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(A4) if wide else A4,
        rightMargin=15 * mm,
        leftMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=title,
        author=author,
    )
    doc.build(story)
    return output.getvalue()
