from __future__ import annotations

from typing import Any, Optional

from ..api.client import ApiClient, unwrap
from ..common.pagination import Page
from ..core.exceptions import ApiResponseError
from .model import PastPayrolls, PayrollCalculation, SavedPayroll
from .repository import PayrollRepository

BASE = "/payroll"


def _saved(data: Any) -> list[SavedPayroll]:
    if isinstance(data, dict):
        data = data.get("records") or data.get("payrolls") or []
    return [SavedPayroll.from_api(r) for r in (data or []) if isinstance(r, dict)]


class HttpPayrollRepository(PayrollRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def calculate(self, payload: dict) -> PayrollCalculation:
        data = unwrap(self._client.post(f"{BASE}/calculate-payroll", payload))
        return PayrollCalculation.from_api(data if isinstance(data, dict) else None, company_id=payload["companyId"])

    def finalize(self, payload: dict) -> dict:
        data = unwrap(self._client.post(f"{BASE}/finalize", payload))
        return data if isinstance(data, dict) else {}

    def past(self, company_id: str, page: int, limit: int) -> PastPayrolls:
        data = unwrap(self._client.get(f"{BASE}/past", params={"companyId": company_id, "page": page, "limit": limit}))
        return PastPayrolls.from_api(data if isinstance(data, dict) else None)

    def by_month(self, company_id: str, month: str) -> Optional[list[SavedPayroll]]:
        try:
            data = unwrap(self._client.get(f"{BASE}/by-month/{company_id}/{month}"))
        except ApiResponseError as e:
            if e.status_code == 404:
                return None
            raise
        return _saved(data)

    def stats(self, params: dict[str, Any]) -> dict:
        data = unwrap(self._client.get(f"{BASE}/stats", params=params))
        return data if isinstance(data, dict) else {}

    def employee_report(self, employee_id: str, params: dict[str, Any]) -> list[SavedPayroll]:
        return _saved(unwrap(self._client.get(f"{BASE}/employee-report/{employee_id}", params=params)))

    def report(self, params: dict[str, Any]) -> Page[SavedPayroll]:
        data = unwrap(self._client.get(f"{BASE}/report", params=params))
        return Page.from_api(
            data,
            SavedPayroll.from_api,
            key="records",
            page=int(params.get("page") or 1),
            limit=int(params.get("limit") or 10),
        )
