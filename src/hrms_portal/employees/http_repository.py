from __future__ import annotations

from typing import Any, Mapping, Optional

from ..api.client import ApiClient, file_part, unwrap
from ..common.pagination import Page
from ..core.exceptions import NotFoundError
from .model import Employee, EmploymentHistory
from .repository import EmployeeRepository

BASE = "/employees"

SECTION_PATHS = {
    "contact": "contact-details",
    "bank": "bank-details",
    "additional": "additional-details",
    "reference": "reference-details",
    "documents": "document-uploads",
}


class HttpEmployeeRepository(EmployeeRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def search(self, params: dict[str, Any]) -> Page[Employee]:
        data = unwrap(self._client.get(BASE, params=params))
        return Page.from_api(
            data,
            Employee.from_api,
            key="employees",
            page=int(params.get("page") or 1),
            limit=int(params.get("limit") or 10),
        )

    def get(self, employee_id: str) -> Employee:
        data = unwrap(self._client.get(f"{BASE}/{employee_id}"))
        if not data:
            raise NotFoundError(f"Employee {employee_id} not found")
        return Employee.from_api(data)

    def create(self, fields: dict[str, str], files: Mapping[str, Any]) -> Employee:
        body = self._client.post(
            BASE,
            data=fields,
            files={k: file_part(v) for k, v in files.items()} or None,
        )
        return Employee.from_api(unwrap(body) or {})

    def update(self, employee_id: str, fields: dict[str, str], files: Mapping[str, Any]) -> Employee:
        body = self._client.patch(
            f"{BASE}/{employee_id}",
            data=fields,
            files={k: file_part(v) for k, v in files.items()} or None,
        )
        return Employee.from_api(unwrap(body) or {})

    def delete(self, employee_id: str) -> None:
        self._client.delete(f"{BASE}/{employee_id}")

    def delete_many(self, ids: list[str]) -> None:
        self._client.delete(BASE, {"ids": ids})

    def get_section(self, employee_id: str, section: str) -> dict:
        data = unwrap(self._client.get(f"{BASE}/{employee_id}/{SECTION_PATHS[section]}"))
        return data if isinstance(data, dict) else {}

    def update_section(self, employee_id: str, section: str, payload: dict) -> dict:
        data = unwrap(self._client.patch(f"{BASE}/{employee_id}/{SECTION_PATHS[section]}", payload))
        return data if isinstance(data, dict) else {}

    def upload_document(self, employee_id: str, document: Any, document_type: str) -> dict:
        body = self._client.patch(
            f"{BASE}/{employee_id}/{SECTION_PATHS['documents']}",
            data={"documentType": document_type},
            files={"document": file_part(document)},
        )
        data = unwrap(body)
        return data if isinstance(data, dict) else {}

    def employment_history(self, employee_id: str) -> list[EmploymentHistory]:
        rows = unwrap(self._client.get(f"{BASE}/{employee_id}/employment-history")) or []
        return [EmploymentHistory.from_api(r) for r in rows if isinstance(r, dict)]

    def create_employment_history(self, employee_id: str, payload: dict) -> EmploymentHistory:
        body = self._client.post(f"{BASE}/{employee_id}/employment-history", payload)
        return EmploymentHistory.from_api(unwrap(body) or {})

    def update_employment_history(self, history_id: str, payload: dict) -> EmploymentHistory:
        body = self._client.patch(f"{BASE}/employment-history/{history_id}", payload)
        return EmploymentHistory.from_api(unwrap(body) or {})

    def close_employment(self, employee_id: str, payload: dict) -> None:
        self._client.patch(f"{BASE}/{employee_id}/close-employment", payload)

    def active_employment(self, employee_id: str) -> Optional[EmploymentHistory]:
        data = unwrap(self._client.get(f"{BASE}/active/{employee_id}"))
        return EmploymentHistory.from_api(data) if isinstance(data, dict) and data else None
