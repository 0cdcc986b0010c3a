from __future__ import annotations

from typing import Any, Optional

from ..common.concurrency import run_together
from ..companies.model import CompanyEmployeeCount
from ..companies.repository import CompanyRepository
from ..core.constants import DEFAULT_DASHBOARD_DAYS_AHEAD
from ..core.exceptions import ValidationError
from .model import DashboardReport
from .repository import DashboardRepository

MAX_DAYS_AHEAD = 365


class DashboardService:
    def __init__(self, dashboard: DashboardRepository, companies: CompanyRepository):
        self._dashboard = dashboard
        self._companies = companies

    def overview(self) -> dict:
        return self._dashboard.overview()

    def report(self, days_ahead: int = DEFAULT_DASHBOARD_DAYS_AHEAD) -> DashboardReport:
        if not 0 < days_ahead <= MAX_DAYS_AHEAD:
            raise ValidationError(f"Days ahead must be between 1 and {MAX_DAYS_AHEAD}")
        return self._dashboard.report(days_ahead)

    def page_data(
        self, days_ahead: int = DEFAULT_DASHBOARD_DAYS_AHEAD
    ) -> tuple[DashboardReport, list[CompanyEmployeeCount]]:
        """Report and per-company head counts, fetched together."""
        report, counts = run_together(lambda: self.report(days_ahead), self._companies.employee_counts)
        return report, counts

    def attendance_stats(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Any:
        return self._dashboard.attendance_stats({"startDate": start_date, "endDate": end_date})

    def payroll_stats(self, year: Optional[int] = None, month: Optional[int] = None) -> Any:
        if month is not None and not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        return self._dashboard.payroll_stats({"year": year, "month": month})
