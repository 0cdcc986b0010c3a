from __future__ import annotations

from ..common.concurrency import run_together
from .model import Department
from .repository import DepartmentRepository


class DepartmentService:
    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def user_departments(self) -> list[Department]:
        return self._departments.user_departments()

    def employee_departments(self) -> list[Department]:
        return self._departments.employee_departments()

    def both(self) -> tuple[list[Department], list[Department]]:
        """Fetch user and employee departments together for the settings page."""
        users, employees = run_together(
            self._departments.user_departments,
            self._departments.employee_departments,
        )
        return users, employees
