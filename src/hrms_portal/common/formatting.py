from __future__ import annotations

from typing import Any, Optional

from .datetime_utils import DateLike, parse_api_date


def _group_indian(integer_part: str) -> str:
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_amount(amount: Any, *, decimals: int = 2) -> str:
    """Format a number with Indian digit grouping (12,34,567.00)."""
    try:
        number = float(amount or 0)
    except (TypeError, ValueError):
        number = 0.0
    sign = "-" if number < 0 else ""
    text = f"{abs(number):.{decimals}f}"
    if decimals:
        integer_part, fraction = text.split(".")
        return f"{sign}{_group_indian(integer_part)}.{fraction}"
    return f"{sign}{_group_indian(text)}"


def format_currency(amount: Any, *, decimals: int = 2, symbol: str = "₹") -> str:
    return f"{symbol}{format_amount(amount, decimals=decimals)}"


def format_date(value: DateLike, default: str = "N/A") -> str:
    """Display format DD/MM/YYYY; unparseable text is shown as-is."""
    if value is None or value == "":
        return default
    parsed = parse_api_date(value)
    if not parsed:
        return str(value)
    return parsed.strftime("%d/%m/%Y")


def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    return " ".join(p for p in (first_name or "", last_name or "") if p).strip()


def or_na(value: Any) -> str:
    if value is None or value == "":
        return "N/A"
    return str(value)


def input_date(value: DateLike) -> str:
    """YYYY-MM-DD for ``<input type="date">``; blank when unparseable."""
    parsed = parse_api_date(value)
    return parsed.isoformat() if parsed else ""
