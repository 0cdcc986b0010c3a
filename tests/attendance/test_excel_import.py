from __future__ import annotations

from io import BytesIO

import pytest
from openpyxl import Workbook

from hrms_portal.attendance.excel_import import read_attendance_sheet, roster_mismatch
from hrms_portal.attendance.model import ActiveEmployee, ImportedRow, ImportResult
from hrms_portal.core.exceptions import ValidationError


def workbook_bytes(*rows) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(list(row))
    out = BytesIO()
    wb.save(out)
    out.seek(0)
    return out


def test_reads_rows_and_clamps_present_days():
    stream = workbook_bytes(
        ("employee id", "EMPLOYEE NAME", "Present Days Count"),
        ("e1", "Ravi Kumar", 24.7),
        ("e2", "Asha Rao", 40),
        ("e3", "Mohan Das", -2),
        ("e4", "Lata Shah", "n/a"),
        ("", "No Id", 10),
        ("e5", None, 10),
    )

    result = read_attendance_sheet(stream)

    assert [(r.employee_id, r.present_days) for r in result.rows] == [("e1", 24), ("e2", 31), ("e3", 0), ("e4", 0)]


def test_numeric_ids_are_read_without_decimal_part():
    stream = workbook_bytes(("Employee ID", "Employee Name", "Present Days Count"), (1001, "Ravi", 20))
    assert read_attendance_sheet(stream).rows[0].employee_id == "1001"


def test_missing_columns_are_reported():
    stream = workbook_bytes(("Employee ID", "Name", "Days"), ("e1", "Ravi", 20))
    with pytest.raises(ValidationError, match="Missing required columns: Employee Name, Present Days Count"):
        read_attendance_sheet(stream)


def test_header_only_sheet_is_rejected():
    with pytest.raises(ValidationError, match="at least one data row"):
        read_attendance_sheet(workbook_bytes(("Employee ID", "Employee Name", "Present Days Count")))


def test_sheet_without_valid_rows_is_rejected():
    stream = workbook_bytes(("Employee ID", "Employee Name", "Present Days Count"), ("", "", 3))
    with pytest.raises(ValidationError, match="No valid data rows"):
        read_attendance_sheet(stream)


def test_unreadable_file_is_a_validation_error():
    with pytest.raises(ValidationError, match="valid Excel file"):
        read_attendance_sheet(BytesIO(b"this is not a workbook"))


def test_roster_matches():
    result = ImportResult(rows=(ImportedRow("e1", "Ravi", 20),))
    assert roster_mismatch(result, [ActiveEmployee("e1", "Ravi", "Kumar")]) == []


def test_roster_mismatch_lists_extra_and_missing_employees():
    result = ImportResult(rows=tuple(ImportedRow(f"x{i}", f"Extra {i}", 1) for i in range(7)))
    active = [ActiveEmployee("e1", "Ravi", "Kumar")]

    messages = roster_mismatch(result, active)

    assert messages[0].startswith("Employee count mismatch. Excel contains 7 employee(s), but 1 employee(s)")
    assert messages[1].endswith("Extra 4 (ID: x4) and 2 more.")
    assert messages[2] == "Missing employees from Excel (active but not included): Ravi Kumar (ID: e1)."
