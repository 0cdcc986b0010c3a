from __future__ import annotations

from typing import Any, Protocol

from ..common.pagination import Page
from .model import Company, CompanyEmployee, CompanyEmployeeCount


class CompanyRepository(Protocol):
    def list(self, params: dict[str, Any]) -> Page[Company]:
        raise NotImplementedError

    def get(self, company_id: str) -> Company:
        raise NotImplementedError

    def create(self, payload: dict) -> Company:
        raise NotImplementedError

    def update(self, company_id: str, payload: dict) -> Company:
        raise NotImplementedError

    def delete(self, company_id: str) -> None:
        raise NotImplementedError

    def employee_counts(self) -> list[CompanyEmployeeCount]:
        raise NotImplementedError

    def employees(self, company_id: str) -> list[CompanyEmployee]:
        raise NotImplementedError
