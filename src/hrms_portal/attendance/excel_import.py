"""Read a filled-in attendance spreadsheet and check it against the active roster."""

from __future__ import annotations

import logging
import math
from typing import Any, BinaryIO, Iterable

import pandas as pd

from ..core.constants import ATTENDANCE_SHEET_HEADERS, MAX_PRESENT_DAYS
from ..core.exceptions import ValidationError
from .model import ActiveEmployee, ImportedRow, ImportResult

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 5


def _cell(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _present_days(value: Any) -> int:
    try:
        days = math.floor(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(MAX_PRESENT_DAYS, days))


def read_attendance_sheet(stream: BinaryIO) -> ImportResult:
    """Parse the first worksheet into rows with id, name and present days.

    Present days are floored and clamped to 0..31; rows missing an id or a
    name are skipped.
    """
    try:
        frame = pd.read_excel(stream, sheet_name=0, header=None, dtype=object)
    except Exception as e:  # reader errors vary by engine
        logger.warning("Could not read attendance workbook: %s", e)
        raise ValidationError("Failed to read Excel file. Please ensure it's a valid Excel file.") from e

    rows = frame.values.tolist()
    if len(rows) < 2:
        raise ValidationError("Excel file must contain a header row and at least one data row.")

    headers = [_cell(h).lower() for h in rows[0]]
    wanted = [h.lower() for h in ATTENDANCE_SHEET_HEADERS]
    missing = [ATTENDANCE_SHEET_HEADERS[i] for i, h in enumerate(wanted) if h not in headers]
    if missing:
        expected = ", ".join(f'"{h}"' for h in ATTENDANCE_SHEET_HEADERS)
        raise ValidationError(
            f"Missing required columns: {', '.join(missing)}. Please ensure columns are exactly: {expected}."
        )
    id_col, name_col, days_col = (headers.index(h) for h in wanted)

    parsed = []
    for row in rows[1:]:
        employee_id = _cell(row[id_col])
        name = _cell(row[name_col])
        if not employee_id or not name:
            continue
        parsed.append(ImportedRow(employee_id, name, _present_days(row[days_col])))

    if not parsed:
        raise ValidationError("No valid data rows found in Excel file.")
    return ImportResult(rows=tuple(parsed))


def _preview(labels: list[str]) -> str:
    shown = ", ".join(labels[:PREVIEW_LIMIT])
    if len(labels) > PREVIEW_LIMIT:
        shown += f" and {len(labels) - PREVIEW_LIMIT} more"
    return shown


def roster_mismatch(result: ImportResult, active: Iterable[ActiveEmployee]) -> list[str]:
    """Messages describing how the sheet differs from the active employees; empty when it matches."""
    active = list(active)
    sheet_ids = {r.employee_id for r in result.rows}
    active_ids = {e.id for e in active}
    extra = [f"{r.employee_name} (ID: {r.employee_id})" for r in result.rows if r.employee_id not in active_ids]
    absent = [f"{e.full_name} (ID: {e.id})" for e in active if e.id not in sheet_ids]
    if not extra and not absent and len(result.rows) == len(active):
        return []

    messages = [
        f"Employee count mismatch. Excel contains {len(result.rows)} employee(s), "
        f"but {len(active)} employee(s) are active for this company and month."
    ]
    if extra:
        messages.append(f"Extra employees in Excel (not active): {_preview(extra)}.")
    if absent:
        messages.append(f"Missing employees from Excel (active but not included): {_preview(absent)}.")
    return messages
