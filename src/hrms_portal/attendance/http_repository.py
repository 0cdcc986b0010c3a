from __future__ import annotations

from typing import Any, Optional

from ..api.client import ApiClient, file_part, unwrap
from .model import ActiveEmployees, AttendanceRecord, AttendanceSheet, BulkResult
from .repository import AttendanceRepository, AttendanceSheetRepository

BASE = "/attendance"
SHEETS = f"{BASE}/attendance-sheets"


def _records(data: Any) -> list[AttendanceRecord]:
    if isinstance(data, dict):
        data = data.get("records") or data.get("data") or data.get("attendance") or []
    return [AttendanceRecord.from_api(r) for r in (data or []) if isinstance(r, dict)]


class HttpAttendanceRepository(AttendanceRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def mark(self, payload: dict) -> AttendanceRecord:
        return AttendanceRecord.from_api(unwrap(self._client.post(f"{BASE}/mark", payload)) or {})

    def bulk_mark(self, records: list[dict]) -> BulkResult:
        return BulkResult.from_api(self._client.post(f"{BASE}/bulk", {"records": records}))

    def upload(self, company_id: str, month: str, sheet: Any) -> BulkResult:
        body = self._client.post(
            f"{BASE}/upload",
            data={"companyId": company_id, "month": month},
            files={"attendanceSheet": file_part(sheet)},
        )
        return BulkResult.from_api(body)

    def records_by_company_and_month(self, company_id: str, month: str) -> list[AttendanceRecord]:
        data = unwrap(
            self._client.get(f"{BASE}/records-by-company-and-month", params={"companyId": company_id, "month": month})
        )
        return _records(data)

    def records_by_company(self, company_id: str) -> list[AttendanceRecord]:
        return _records(unwrap(self._client.get(f"{BASE}/records-by-company/{company_id}")))

    def records_by_employee(
        self, employee_id: str, start_month: Optional[str] = None, end_month: Optional[str] = None
    ) -> list[AttendanceRecord]:
        params = {"startMonth": start_month, "endMonth": end_month}
        return _records(unwrap(self._client.get(f"{BASE}/employee/{employee_id}", params=params)))

    def list(self, params: dict[str, Any]) -> list[AttendanceRecord]:
        return _records(unwrap(self._client.get(BASE, params=params)))

    def company_month(self, company_id: str, month: str) -> list[AttendanceRecord]:
        return _records(unwrap(self._client.get(f"{BASE}/{company_id}", params={"month": month})))

    def delete(self, record_id: str) -> None:
        self._client.delete(f"{BASE}/{record_id}")

    def delete_many(self, ids: list[str]) -> None:
        self._client.delete(BASE, {"ids": ids})

    def stats(self, params: dict[str, Any]) -> dict:
        data = unwrap(self._client.get(f"{BASE}/stats", params=params))
        return data if isinstance(data, dict) else {}

    def active_employees(self, company_id: str, month: str) -> ActiveEmployees:
        data = unwrap(
            self._client.get(f"{BASE}/active-employees", params={"companyId": company_id, "month": month})
        )
        return ActiveEmployees.from_api(data if isinstance(data, dict) else None, company_id=company_id, month=month)

    def reports(self, params: dict[str, Any]) -> dict:
        data = unwrap(self._client.get(f"{BASE}/reports", params=params))
        return data if isinstance(data, dict) else {"records": data or []}


class HttpAttendanceSheetRepository(AttendanceSheetRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def upload(self, company_id: str, month: str, sheet: Any) -> AttendanceSheet:
        body = self._client.post(
            SHEETS,
            data={"companyId": company_id, "month": month},
            files={"file": file_part(sheet)},
        )
        return AttendanceSheet.from_api(unwrap(body) or {})

    def list(self, params: dict[str, Any]) -> list[AttendanceSheet]:
        # either a page of sheets or one sheet when filtered by company and month
        data = unwrap(self._client.get(SHEETS, params=params))
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            data = data["data"]
        elif isinstance(data, dict):
            data = [data] if data.get("id") else []
        return [AttendanceSheet.from_api(s) for s in (data or []) if isinstance(s, dict)]

    def delete(self, sheet_id: str) -> None:
        self._client.delete(f"{SHEETS}/{sheet_id}")
