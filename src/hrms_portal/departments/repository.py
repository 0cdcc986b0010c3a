from __future__ import annotations

from typing import Protocol

from .model import Department


class DepartmentRepository(Protocol):
    def user_departments(self) -> list[Department]:
        raise NotImplementedError

    def employee_departments(self) -> list[Department]:
        raise NotImplementedError
