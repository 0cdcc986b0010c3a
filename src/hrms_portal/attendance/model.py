from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..common.forms import to_int
from ..common.formatting import full_name


def _nested_name(data: dict, key: str) -> str:
    nested = data.get(key)
    return (nested.get("name") or "") if isinstance(nested, dict) else ""


@dataclass(frozen=True)
class AttendanceRecord:
    id: str
    employee_id: str
    company_id: str
    month: str
    present_count: int
    employee_name: str = ""
    company_name: str = ""
    designation_name: str = ""
    department_name: str = ""
    attendance_sheet_url: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "AttendanceRecord":
        employee = data.get("employee") if isinstance(data.get("employee"), dict) else {}
        name = data.get("employeeName") or full_name(employee.get("firstName"), employee.get("lastName"))
        return cls(
            id=str(data.get("id", "")),
            employee_id=str(data.get("employeeId") or data.get("employeeID") or employee.get("id") or ""),
            company_id=str(data.get("companyId") or ""),
            month=data.get("month") or "",
            present_count=to_int(data.get("presentCount"), 0) or 0,
            employee_name=name or "",
            company_name=data.get("companyName") or _nested_name(data, "company"),
            designation_name=data.get("designationName") or "",
            department_name=data.get("departmentName") or "",
            attendance_sheet_url=data.get("attendanceSheetUrl") or "",
        )


@dataclass(frozen=True)
class ActiveEmployee:
    """Employee active for at least part of a company/month."""

    id: str
    first_name: str
    last_name: str
    status: str = ""
    mobile_number: str = ""
    designation: str = ""
    department: str = ""

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    @classmethod
    def from_api(cls, data: dict) -> "ActiveEmployee":
        contact = data.get("contactDetails") if isinstance(data.get("contactDetails"), dict) else {}
        histories = data.get("employmentHistories") or []
        current: dict[str, Any] = histories[0] if histories and isinstance(histories[0], dict) else {}
        return cls(
            id=str(data.get("id", "")),
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            status=data.get("status") or "",
            mobile_number=contact.get("mobileNumber") or "",
            designation=_nested_name(current, "designation"),
            department=_nested_name(current, "department"),
        )


@dataclass(frozen=True)
class ActiveEmployees:
    company_id: str
    company_name: str
    month: str
    employees: tuple[ActiveEmployee, ...] = ()

    @classmethod
    def from_api(cls, data: Optional[dict], *, company_id: str = "", month: str = "") -> "ActiveEmployees":
        data = data or {}
        return cls(
            company_id=str(data.get("companyId") or company_id),
            company_name=data.get("companyName") or "",
            month=data.get("month") or month,
            employees=tuple(ActiveEmployee.from_api(e) for e in (data.get("employees") or []) if isinstance(e, dict)),
        )


@dataclass(frozen=True)
class AttendanceSheet:
    id: str
    company_id: str
    month: str
    attendance_sheet_url: str
    company_name: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "AttendanceSheet":
        return cls(
            id=str(data.get("id", "")),
            company_id=str(data.get("companyId") or ""),
            month=data.get("month") or "",
            attendance_sheet_url=data.get("attendanceSheetUrl") or "",
            company_name=data.get("companyName") or _nested_name(data, "company"),
            created_at=data.get("createdAt"),
        )


@dataclass(frozen=True)
class BulkResult:
    """Outcome of bulk mark / sheet upload as counted by the backend."""

    created: int = 0
    updated: int = 0
    failed: int = 0
    processed: int = 0
    errors: tuple[str, ...] = ()
    message: str = ""

    @classmethod
    def from_api(cls, body: Any) -> "BulkResult":
        body = body if isinstance(body, dict) else {}
        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        return cls(
            created=to_int(data.get("created"), 0) or 0,
            updated=to_int(data.get("updated"), 0) or 0,
            failed=to_int(data.get("failed"), 0) or 0,
            processed=to_int(data.get("processed"), 0) or 0,
            errors=tuple(str(e) for e in (data.get("errors") or [])),
            message=str(body.get("message") or ""),
        )


@dataclass(frozen=True)
class AttendanceSummary:
    total_employees: int
    total_present: int
    average_attendance: float

    @classmethod
    def of(cls, records: list[AttendanceRecord]) -> "AttendanceSummary":
        if not records:
            return cls(0, 0, 0.0)
        total_present = sum(r.present_count for r in records)
        return cls(len(records), total_present, total_present / len(records))


@dataclass(frozen=True)
class ImportedRow:
    employee_id: str
    employee_name: str
    present_days: int


@dataclass(frozen=True)
class ImportResult:
    rows: tuple[ImportedRow, ...] = field(default_factory=tuple)

    def as_records(self, company_id: str, month: str) -> list[dict]:
        return [
            {"employeeId": r.employee_id, "companyId": company_id, "month": month, "presentCount": r.present_days}
            for r in self.rows
        ]
