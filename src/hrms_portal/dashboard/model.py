from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import parse_api_date
from ..common.forms import to_float, to_int
from ..common.formatting import full_name

TENURE_GROUPS = ("0-6 months", "6-12 months", "1-2 years", "2-5 years", "5+ years")


def _dict(data: Any, key: str) -> dict:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _list(data: Any, key: str) -> list:
    value = data.get(key) if isinstance(data, dict) else None
    return [v for v in value if isinstance(v, dict)] if isinstance(value, list) else []


def _counts(rows: list[dict], name_key: str) -> list[tuple[str, int]]:
    """``[{departmentName, _count: {departmentName: n}}]`` -> ``[(name, n)]``."""
    out = []
    for row in rows:
        count = row.get("_count")
        value = count.get(name_key) if isinstance(count, dict) else row.get("count")
        out.append((row.get(name_key) or "Unassigned", to_int(value, 0) or 0))
    return out


@dataclass(frozen=True)
class DashboardSummary:
    total_employees: int = 0
    new_employees_this_month: int = 0
    total_companies: int = 0
    new_companies_this_month: int = 0
    active_employees: int = 0
    inactive_employees: int = 0
    active_companies: int = 0
    inactive_companies: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "DashboardSummary":
        return cls(
            total_employees=to_int(data.get("totalEmployees"), 0) or 0,
            new_employees_this_month=to_int(data.get("newEmployeesThisMonth"), 0) or 0,
            total_companies=to_int(data.get("totalCompanies"), 0) or 0,
            new_companies_this_month=to_int(data.get("newCompaniesThisMonth"), 0) or 0,
            active_employees=to_int(data.get("activeEmployees"), 0) or 0,
            inactive_employees=to_int(data.get("inactiveEmployees"), 0) or 0,
            active_companies=to_int(data.get("activeCompanies"), 0) or 0,
            inactive_companies=to_int(data.get("inactiveCompanies"), 0) or 0,
        )


@dataclass(frozen=True)
class MonthlyGrowth:
    month: str
    count: int
    new: int


@dataclass(frozen=True)
class SpecialDate:
    id: str
    name: str
    when: Optional[date]
    kind: str


def _person_date(row: dict, date_key: str, kind: str) -> SpecialDate:
    name = full_name(row.get("firstName"), row.get("lastName"))
    return SpecialDate(str(row.get("id", "")), name, parse_api_date(row.get(date_key)), kind)


@dataclass(frozen=True)
class RecentJoinee:
    id: str
    name: str
    onboarding_date: Optional[date]
    status: str


@dataclass(frozen=True)
class RecentPayroll:
    id: str
    employee_name: str
    company_name: str
    month: str
    net_salary: float


def _growth(rows: list[dict], new_key: str) -> tuple[MonthlyGrowth, ...]:
    return tuple(
        MonthlyGrowth(r.get("month") or "", to_int(r.get("count"), 0) or 0, to_int(r.get(new_key), 0) or 0)
        for r in rows
    )


@dataclass(frozen=True)
class DashboardReport:
    summary: DashboardSummary = field(default_factory=DashboardSummary)
    by_department: tuple[tuple[str, int], ...] = ()
    by_designation: tuple[tuple[str, int], ...] = ()
    employee_growth: tuple[MonthlyGrowth, ...] = ()
    company_growth: tuple[MonthlyGrowth, ...] = ()
    tenure_distribution: tuple[tuple[str, int], ...] = ()
    average_tenure_months: float = 0.0
    special_dates: tuple[SpecialDate, ...] = ()
    recent_joinees: tuple[RecentJoinee, ...] = ()
    recent_payrolls: tuple[RecentPayroll, ...] = ()

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "DashboardReport":
        data = data or {}
        employee_stats = _dict(data, "employeeStats")
        tenure = _dict(_dict(data, "companyStats"), "tenure")
        distribution = _dict(tenure, "tenureDistribution")
        growth = _dict(data, "growthMetrics")
        special = _dict(data, "specialDates")
        recent = _dict(data, "recentActivity")

        dates = [_person_date(r, "dateOfBirth", "birthday") for r in _list(special, "birthdays")]
        dates += [
            _person_date(r, "employeeOnboardingDate", "work anniversary")
            for r in _list(special, "employeeAnniversaries")
        ]
        dates += [
            SpecialDate(
                str(r.get("id", "")), r.get("name") or "", parse_api_date(r.get("companyOnboardingDate")), "company anniversary"
            )
            for r in _list(special, "companyAnniversaries")
        ]

        payrolls = []
        for r in _list(recent, "recentPayrolls"):
            employee, company = _dict(r, "employee"), _dict(r, "company")
            salary = _dict(r, "salaryData")
            net = salary.get("netSalary", _dict(salary, "calculations").get("netSalary"))
            payrolls.append(
                RecentPayroll(
                    id=str(r.get("id", "")),
                    employee_name=(
                        full_name(employee.get("firstName"), employee.get("lastName")) or str(r.get("employeeId", ""))
                    ),
                    company_name=company.get("name") or r.get("companyName") or "",
                    month=r.get("month") or "",
                    net_salary=to_float(net, 0.0) or 0.0,
                )
            )

        return cls(
            summary=DashboardSummary.from_api(_dict(data, "summary")),
            by_department=tuple(_counts(_list(employee_stats, "byDepartment"), "departmentName")),
            by_designation=tuple(_counts(_list(employee_stats, "byDesignation"), "designationName")),
            employee_growth=_growth(_list(_dict(growth, "employees"), "monthly"), "newEmployees"),
            company_growth=_growth(_list(_dict(growth, "companies"), "monthly"), "newCompanies"),
            tenure_distribution=tuple((g, to_int(distribution.get(g), 0) or 0) for g in TENURE_GROUPS),
            average_tenure_months=to_float(tenure.get("averageTenureMonths"), 0.0) or 0.0,
            special_dates=tuple(dates),
            recent_joinees=tuple(
                RecentJoinee(
                    id=str(r.get("id", "")),
                    name=full_name(r.get("firstName"), r.get("lastName")),
                    onboarding_date=parse_api_date(r.get("employeeOnboardingDate")),
                    status=r.get("status") or "",
                )
                for r in _list(recent, "recentJoinees")
            ),
            recent_payrolls=tuple(payrolls),
        )

    def chart_series(self) -> dict[str, Any]:
        """Plain label/value series for the dashboard charts."""

        def series(pairs) -> dict[str, list]:
            pairs = list(pairs)
            return {"labels": [p[0] for p in pairs], "values": [p[1] for p in pairs]}

        return {
            "departments": series(self.by_department),
            "designations": series(self.by_designation),
            "employeeGrowth": {
                "labels": [g.month for g in self.employee_growth],
                "total": [g.count for g in self.employee_growth],
                "new": [g.new for g in self.employee_growth],
            },
            "companyGrowth": {
                "labels": [g.month for g in self.company_growth],
                "total": [g.count for g in self.company_growth],
                "new": [g.new for g in self.company_growth],
            },
            "tenure": series(self.tenure_distribution),
        }
