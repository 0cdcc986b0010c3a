from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Optional

import pytest
from openpyxl import Workbook

from hrms_portal.attendance.model import ActiveEmployee, ActiveEmployees, AttendanceRecord, BulkResult
from hrms_portal.attendance.service import AttendanceService
from hrms_portal.core.exceptions import ApiNoResponseError, ValidationError


@dataclass
class Upload:
    filename: str
    stream: BytesIO = field(default_factory=BytesIO)


def spreadsheet(*rows) -> Upload:
    wb = Workbook()
    ws = wb.active
    ws.append(["Employee ID", "Employee Name", "Present Days Count"])
    for row in rows:
        ws.append(list(row))
    out = BytesIO()
    wb.save(out)
    out.seek(0)
    return Upload("march.xlsx", out)


class InMemoryAttendance:
    def __init__(self, roster=("e1", "e2")):
        self.roster = roster
        self.marked: list[dict] = []
        self.bulk: list[list[dict]] = []
        self.records: list[AttendanceRecord] = []
        self.fail_lookups = False

    def mark(self, payload: dict) -> AttendanceRecord:
        self.marked.append(payload)
        return AttendanceRecord.from_api({"id": "a1", **payload})

    def bulk_mark(self, records: list[dict]) -> BulkResult:
        self.bulk.append(records)
        return BulkResult(created=len(records))

    def active_employees(self, company_id: str, month: str) -> ActiveEmployees:
        return ActiveEmployees(
            company_id, "Acme", month, tuple(ActiveEmployee(i, f"Emp {i}", "") for i in self.roster)
        )

    def records_by_company_and_month(self, company_id: str, month: str) -> list[AttendanceRecord]:
        return [r for r in self.records if r.month == month]

    def records_by_company(self, company_id: str) -> list[AttendanceRecord]:
        return self.records

    def records_by_employee(self, employee_id: str, start_month=None, end_month=None) -> list[AttendanceRecord]:
        if self.fail_lookups:
            raise ApiNoResponseError("down")
        return [r for r in self.records if r.employee_id == employee_id]


class InMemorySheets:
    def __init__(self):
        self.uploaded: list[tuple[str, str, Any]] = []

    def upload(self, company_id: str, month: str, sheet: Any):
        self.uploaded.append((company_id, month, sheet))

    def list(self, params: dict[str, Any]) -> list:
        return []

    def delete(self, sheet_id: str) -> None:
        pass


def make_service(attendance: Optional[InMemoryAttendance] = None, **kwargs) -> AttendanceService:
    return AttendanceService(attendance or InMemoryAttendance(), InMemorySheets(), **kwargs)


def test_mark_validates_and_sends_integer_count():
    repo = InMemoryAttendance()
    make_service(repo).mark({"companyId": "c1", "employeeId": "e1", "month": "2025-03", "presentCount": "26"})
    assert repo.marked == [{"employeeId": "e1", "companyId": "c1", "month": "2025-03", "presentCount": 26}]

    with pytest.raises(ValidationError) as exc:
        make_service(repo).mark({"companyId": "", "month": "03-2025", "presentCount": "32"})
    assert set(exc.value.errors) == {"companyId", "month", "employeeId", "presentCount"}


def test_bulk_mark_skips_blank_counts():
    repo = InMemoryAttendance()
    result = make_service(repo).bulk_mark("c1", "2025-03", {"e1": "20", "e2": "", "e3": "0"})
    assert result.created == 2
    assert [r["employeeId"] for r in repo.bulk[0]] == ["e1", "e3"]


def test_bulk_mark_rejects_out_of_range_count_and_empty_roster():
    service = make_service()
    with pytest.raises(ValidationError) as exc:
        service.bulk_mark("c1", "2025-03", {"e1": "20", "e2": "45"})
    assert set(exc.value.errors) == {"e2"}
    with pytest.raises(ValidationError) as exc:
        service.bulk_mark("c1", "2025-03", {"e1": ""})
    assert "records" in exc.value.errors


def test_import_excel_marks_matching_roster():
    repo = InMemoryAttendance()
    parsed, result = make_service(repo).import_excel("c1", "2025-03", spreadsheet(("e1", "Emp e1", 22), ("e2", "Emp e2", 31)))
    assert len(parsed.rows) == 2
    assert result.created == 2
    assert repo.bulk[0][1] == {"employeeId": "e2", "companyId": "c1", "month": "2025-03", "presentCount": 31}


def test_import_excel_rejects_roster_mismatch():
    repo = InMemoryAttendance()
    with pytest.raises(ValidationError, match="Missing employees from Excel"):
        make_service(repo).import_excel("c1", "2025-03", spreadsheet(("e1", "Emp e1", 22)))
    assert repo.bulk == []


def test_upload_checks_extension_and_size():
    service = make_service(max_upload_bytes=10)
    with pytest.raises(ValidationError) as exc:
        service.import_excel("c1", "2025-03", Upload("march.csv"))
    assert exc.value.errors == {"file": "Please upload a valid Excel file (.xlsx or .xls)"}
    with pytest.raises(ValidationError) as exc:
        service.import_excel("c1", "2025-03", None)
    assert exc.value.errors == {"file": "Please select a file to upload"}
    with pytest.raises(ValidationError, match="File size must be less than"):
        service.import_excel("c1", "2025-03", Upload("big.xlsx", BytesIO(b"x" * 11)))


def test_attendance_sheets_accept_any_file_type():
    sheets = InMemorySheets()
    AttendanceService(InMemoryAttendance(), sheets).upload_sheet("c1", "2025-03", Upload("scan.pdf", BytesIO(b"%PDF")))
    assert sheets.uploaded[0][:2] == ("c1", "2025-03")


def test_available_months_newest_first():
    repo = InMemoryAttendance()
    repo.records = [
        AttendanceRecord.from_api({"id": str(i), "employeeId": "e1", "month": m, "presentCount": 1})
        for i, m in enumerate(["2025-01", "2025-03", "2025-01", ""])
    ]
    assert make_service(repo).available_months("c1") == ["2025-03", "2025-01"]
    assert make_service(repo).available_months("") == []


def test_check_attendance_exists():
    repo = InMemoryAttendance()
    repo.records = [AttendanceRecord.from_api({"id": "a1", "employeeId": "e1", "month": "2025-03", "presentCount": 20})]
    service = make_service(repo)
    assert service.check_attendance_exists("e1", "2025-03")
    assert not service.check_attendance_exists("e1", "2025-04")
    repo.fail_lookups = True
    assert not service.check_attendance_exists("e1", "2025-03")


def test_report_summary():
    repo = InMemoryAttendance()
    repo.records = [
        AttendanceRecord.from_api({"id": "a1", "employeeId": "e1", "month": "2025-03", "presentCount": 20}),
        AttendanceRecord.from_api({"id": "a2", "employeeId": "e2", "month": "2025-03", "presentCount": 25}),
        AttendanceRecord.from_api({"id": "a3", "employeeId": "e1", "month": "2025-02", "presentCount": 30}),
    ]
    records, summary = make_service(repo).report("c1", "2025-03")
    assert len(records) == 2
    assert (summary.total_employees, summary.total_present, summary.average_attendance) == (2, 45, 22.5)


@pytest.mark.parametrize("count", ["nan", "inf"])
def test_mark_rejects_non_finite_count(count):
    repo = InMemoryAttendance()
    with pytest.raises(ValidationError) as exc:
        make_service(repo).mark({"companyId": "c1", "employeeId": "e1", "month": "2025-03", "presentCount": count})
    assert set(exc.value.errors) == {"presentCount"}
    assert repo.marked == []
