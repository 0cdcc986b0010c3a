from __future__ import annotations

from typing import Any

from ..api.client import ApiClient, unwrap
from .model import DashboardReport
from .repository import DashboardRepository

BASE = "/dashboard"


class HttpDashboardRepository(DashboardRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def overview(self) -> dict:
        data = unwrap(self._client.get(BASE))
        return data if isinstance(data, dict) else {}

    def report(self, days_ahead: int) -> DashboardReport:
        data = unwrap(self._client.get(f"{BASE}/report", params={"daysAhead": days_ahead}))
        return DashboardReport.from_api(data if isinstance(data, dict) else None)

    def attendance_stats(self, params: dict[str, Any]) -> Any:
        return unwrap(self._client.get(f"{BASE}/attendance", params=params))

    def payroll_stats(self, params: dict[str, Any]) -> Any:
        return unwrap(self._client.get(f"{BASE}/payroll", params=params))
