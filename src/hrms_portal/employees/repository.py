from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ..common.pagination import Page
from .model import Employee, EmploymentHistory


class EmployeeRepository(Protocol):
    def search(self, params: dict[str, Any]) -> Page[Employee]:
        raise NotImplementedError

    def get(self, employee_id: str) -> Employee:
        raise NotImplementedError

    def create(self, fields: dict[str, str], files: Mapping[str, Any]) -> Employee:
        raise NotImplementedError

    def update(self, employee_id: str, fields: dict[str, str], files: Mapping[str, Any]) -> Employee:
        raise NotImplementedError

    def delete(self, employee_id: str) -> None:
        raise NotImplementedError

    def delete_many(self, ids: list[str]) -> None:
        raise NotImplementedError

    def get_section(self, employee_id: str, section: str) -> dict:
        raise NotImplementedError

    def update_section(self, employee_id: str, section: str, payload: dict) -> dict:
        raise NotImplementedError

    def upload_document(self, employee_id: str, document: Any, document_type: str) -> dict:
        raise NotImplementedError

    def employment_history(self, employee_id: str) -> list[EmploymentHistory]:
        raise NotImplementedError

    def create_employment_history(self, employee_id: str, payload: dict) -> EmploymentHistory:
        raise NotImplementedError

    def update_employment_history(self, history_id: str, payload: dict) -> EmploymentHistory:
        raise NotImplementedError

    def close_employment(self, employee_id: str, payload: dict) -> None:
        raise NotImplementedError

    def active_employment(self, employee_id: str) -> Optional[EmploymentHistory]:
        raise NotImplementedError
