from __future__ import annotations

from typing import Any, Protocol

from .model import DashboardReport


class DashboardRepository(Protocol):
    def overview(self) -> dict:
        raise NotImplementedError

    def report(self, days_ahead: int) -> DashboardReport:
        raise NotImplementedError

    def attendance_stats(self, params: dict[str, Any]) -> Any:
        raise NotImplementedError

    def payroll_stats(self, params: dict[str, Any]) -> Any:
        raise NotImplementedError
