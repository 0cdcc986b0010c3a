from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import parse_api_date
from ..common.forms import to_float, to_int
from ..common.formatting import full_name


def salary_value(salary: dict, key: str, group: Optional[str] = None) -> Any:
    """Look ``key`` up in the flat salary data, then inside the named group.

    Saved payrolls group figures under calculations/allowances/deductions/
    information; older records keep them flat.
    """
    if key in salary and salary[key] is not None:
        return salary[key]
    groups = (group,) if group else ("calculations", "allowances", "deductions", "information")
    for name in groups:
        nested = salary.get(name)
        if isinstance(nested, dict) and nested.get(key) is not None:
            return nested[key]
    return None


def salary_amount(salary: dict, key: str, group: Optional[str] = None) -> float:
    return to_float(salary_value(salary, key, group), 0.0) or 0.0


@dataclass(frozen=True)
class PayrollResult:
    """One employee's row in a calculation response."""

    employee_id: str
    employee_name: str
    present_days: int
    salary: dict = field(default_factory=dict)
    error: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.salary) and not self.error

    def amount(self, key: str) -> float:
        return salary_amount(self.salary, key)

    @classmethod
    def from_api(cls, data: dict) -> "PayrollResult":
        salary = data.get("salary")
        return cls(
            employee_id=str(data.get("employeeId") or ""),
            employee_name=data.get("employeeName") or "",
            present_days=to_int(data.get("presentDays"), 0) or 0,
            salary=salary if isinstance(salary, dict) else {},
            error=str(data.get("error") or ""),
        )

    def to_api(self) -> dict:
        out: dict[str, Any] = {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "presentDays": self.present_days,
            "salary": self.salary,
        }
        if self.error:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class PayrollSummary:
    employees: int
    errors: int
    gross_total: float
    deductions_total: float
    net_total: float


@dataclass(frozen=True)
class PayrollCalculation:
    company_id: str
    company_name: str
    payroll_month: str
    total_employees: int
    results: tuple[PayrollResult, ...] = ()

    @property
    def valid_results(self) -> list[PayrollResult]:
        return [r for r in self.results if r.is_valid]

    @property
    def summary(self) -> PayrollSummary:
        valid = self.valid_results
        return PayrollSummary(
            employees=len(self.results),
            errors=sum(1 for r in self.results if r.error),
            gross_total=sum(r.amount("grossSalary") for r in valid),
            deductions_total=sum(r.amount("totalDeductions") for r in valid),
            net_total=sum(r.amount("netSalary") for r in valid),
        )

    @classmethod
    def from_api(cls, data: Optional[dict], *, company_id: str = "") -> "PayrollCalculation":
        data = data or {}
        results = tuple(PayrollResult.from_api(r) for r in (data.get("payrollResults") or []) if isinstance(r, dict))
        return cls(
            company_id=str(data.get("companyId") or company_id),
            company_name=data.get("companyName") or "",
            payroll_month=data.get("payrollMonth") or "",
            total_employees=to_int(data.get("totalEmployees"), len(results)) or 0,
            results=results,
        )

    def to_api(self) -> dict:
        return {
            "companyId": self.company_id,
            "companyName": self.company_name,
            "payrollMonth": self.payroll_month,
            "totalEmployees": self.total_employees,
            "payrollResults": [r.to_api() for r in self.results],
        }


@dataclass(frozen=True)
class SavedPayroll:
    """A finalized payroll record as returned by past/report/employee-report."""

    id: str
    employee_id: str
    company_id: str
    month: str
    salary_data: dict = field(default_factory=dict)
    employee_name: str = ""
    company_name: str = ""
    created_at: Optional[date] = None

    def amount(self, key: str) -> float:
        return salary_amount(self.salary_data, key)

    def info(self, key: str) -> str:
        value = salary_value(self.salary_data, key, "information")
        return "" if value is None else str(value)

    @classmethod
    def from_api(cls, data: dict) -> "SavedPayroll":
        salary = data.get("salaryData") or data.get("salary")
        salary = salary if isinstance(salary, dict) else {}
        employee = data.get("employee") if isinstance(data.get("employee"), dict) else {}
        company = data.get("company") if isinstance(data.get("company"), dict) else {}
        name = data.get("employeeName") or full_name(employee.get("firstName"), employee.get("lastName"))
        if not name:
            information = salary.get("information") if isinstance(salary.get("information"), dict) else {}
            name = information.get("employeeName") or ""
        return cls(
            id=str(data.get("id", "")),
            employee_id=str(data.get("employeeId") or ""),
            company_id=str(data.get("companyId") or ""),
            month=data.get("month") or data.get("payrollMonth") or "",
            salary_data=salary,
            employee_name=name,
            company_name=data.get("companyName") or company.get("name") or "",
            created_at=parse_api_date(data.get("createdAt")),
        )


@dataclass(frozen=True)
class PayrollMonth:
    month: str
    employee_count: int
    total_net_salary: float
    records: tuple[SavedPayroll, ...] = ()

    @classmethod
    def from_api(cls, data: dict) -> "PayrollMonth":
        records = tuple(SavedPayroll.from_api(r) for r in (data.get("records") or []) if isinstance(r, dict))
        return cls(
            month=data.get("month") or "",
            employee_count=to_int(data.get("employeeCount"), len(records)) or 0,
            total_net_salary=to_float(data.get("totalNetSalary"), 0.0) or 0.0,
            records=records,
        )


@dataclass(frozen=True)
class PastPayrolls:
    company_name: str
    months: tuple[PayrollMonth, ...]
    total_pages: int = 1
    current_page: int = 1

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "PastPayrolls":
        data = data or {}
        return cls(
            company_name=data.get("companyName") or "",
            months=tuple(PayrollMonth.from_api(m) for m in (data.get("records") or []) if isinstance(m, dict)),
            total_pages=max(to_int(data.get("totalPages"), 1) or 1, 1),
            current_page=max(to_int(data.get("currentPage"), 1) or 1, 1),
        )


@dataclass(frozen=True)
class AdminInputField:
    key: str
    label: str
    type: str
    purpose: str
    description: str = ""
    default_value: str = ""
