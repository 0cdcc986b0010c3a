from __future__ import annotations

from typing import Any, Optional, Protocol

from .model import ActiveEmployees, AttendanceRecord, AttendanceSheet, BulkResult


class AttendanceRepository(Protocol):
    def mark(self, payload: dict) -> AttendanceRecord:
        raise NotImplementedError

    def bulk_mark(self, records: list[dict]) -> BulkResult:
        raise NotImplementedError

    def upload(self, company_id: str, month: str, sheet: Any) -> BulkResult:
        raise NotImplementedError

    def records_by_company_and_month(self, company_id: str, month: str) -> list[AttendanceRecord]:
        raise NotImplementedError

    def records_by_company(self, company_id: str) -> list[AttendanceRecord]:
        raise NotImplementedError

    def records_by_employee(
        self, employee_id: str, start_month: Optional[str] = None, end_month: Optional[str] = None
    ) -> list[AttendanceRecord]:
        raise NotImplementedError

    def list(self, params: dict[str, Any]) -> list[AttendanceRecord]:
        raise NotImplementedError

    def company_month(self, company_id: str, month: str) -> list[AttendanceRecord]:
        raise NotImplementedError

    def delete(self, record_id: str) -> None:
        raise NotImplementedError

    def delete_many(self, ids: list[str]) -> None:
        raise NotImplementedError

    def stats(self, params: dict[str, Any]) -> dict:
        raise NotImplementedError

    def active_employees(self, company_id: str, month: str) -> ActiveEmployees:
        raise NotImplementedError

    def reports(self, params: dict[str, Any]) -> dict:
        raise NotImplementedError


class AttendanceSheetRepository(Protocol):
    def upload(self, company_id: str, month: str, sheet: Any) -> AttendanceSheet:
        raise NotImplementedError

    def list(self, params: dict[str, Any]) -> list[AttendanceSheet]:
        raise NotImplementedError

    def delete(self, sheet_id: str) -> None:
        raise NotImplementedError
