from __future__ import annotations

from typing import Any

from ..api.client import ApiClient, unwrap
from ..common.pagination import Page
from ..core.exceptions import NotFoundError
from .model import Company, CompanyEmployee, CompanyEmployeeCount
from .repository import CompanyRepository

COMPANY_ENDPOINTS = {
    "BASE": "/companies",
    "EMPLOYEE_COUNT": "/companies/employee-count",
}


class HttpCompanyRepository(CompanyRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list(self, params: dict[str, Any]) -> Page[Company]:
        data = unwrap(self._client.get(COMPANY_ENDPOINTS["BASE"], params=params))
        return Page.from_api(
            data,
            Company.from_api,
            key="companies",
            page=int(params.get("page") or 1),
            limit=int(params.get("limit") or 10),
        )

    def get(self, company_id: str) -> Company:
        data = unwrap(self._client.get(f"{COMPANY_ENDPOINTS['BASE']}/{company_id}"))
        if not data:
            raise NotFoundError(f"Company {company_id} not found")
        return Company.from_api(data)

    def create(self, payload: dict) -> Company:
        return Company.from_api(unwrap(self._client.post(COMPANY_ENDPOINTS["BASE"], payload)) or {})

    def update(self, company_id: str, payload: dict) -> Company:
        body = self._client.put(f"{COMPANY_ENDPOINTS['BASE']}/{company_id}", payload)
        return Company.from_api(unwrap(body) or {})

    def delete(self, company_id: str) -> None:
        self._client.delete(f"{COMPANY_ENDPOINTS['BASE']}/{company_id}")

    def employee_counts(self) -> list[CompanyEmployeeCount]:
        rows = unwrap(self._client.get(COMPANY_ENDPOINTS["EMPLOYEE_COUNT"])) or []
        return [CompanyEmployeeCount.from_api(r) for r in rows if isinstance(r, dict)]

    def employees(self, company_id: str) -> list[CompanyEmployee]:
        rows = unwrap(self._client.get(f"{COMPANY_ENDPOINTS['BASE']}/{company_id}/employees")) or []
        return [CompanyEmployee.from_api(r) for r in rows if isinstance(r, dict)]
