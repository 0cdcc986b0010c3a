from __future__ import annotations

from ..api.client import ApiClient, unwrap
from .model import Department
from .repository import DepartmentRepository

DEPARTMENT_ENDPOINTS = {
    "USER": "/departments/user-departments",
    "EMPLOYEE": "/departments/employee-departments",
}


class HttpDepartmentRepository(DepartmentRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def _list(self, path: str) -> list[Department]:
        rows = unwrap(self._client.get(path)) or []
        return [Department.from_api(r) for r in rows if isinstance(r, dict)]

    def user_departments(self) -> list[Department]:
        return self._list(DEPARTMENT_ENDPOINTS["USER"])

    def employee_departments(self) -> list[Department]:
        return self._list(DEPARTMENT_ENDPOINTS["EMPLOYEE"])
