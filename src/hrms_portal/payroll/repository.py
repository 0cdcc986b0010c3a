from __future__ import annotations

from typing import Any, Optional, Protocol

from ..common.pagination import Page
from .model import PastPayrolls, PayrollCalculation, SavedPayroll


class PayrollRepository(Protocol):
    def calculate(self, payload: dict) -> PayrollCalculation:
        raise NotImplementedError

    def finalize(self, payload: dict) -> dict:
        raise NotImplementedError

    def past(self, company_id: str, page: int, limit: int) -> PastPayrolls:
        raise NotImplementedError

    def by_month(self, company_id: str, month: str) -> Optional[list[SavedPayroll]]:
        raise NotImplementedError

    def stats(self, params: dict[str, Any]) -> dict:
        raise NotImplementedError

    def employee_report(self, employee_id: str, params: dict[str, Any]) -> list[SavedPayroll]:
        raise NotImplementedError

    def report(self, params: dict[str, Any]) -> Page[SavedPayroll]:
        raise NotImplementedError
