from __future__ import annotations

import logging
import os
from typing import Any, Iterable, Mapping, Optional

from ..common.validators import FormValidator
from ..core.constants import MAX_PRESENT_DAYS, MAX_UPLOAD_BYTES, SPREADSHEET_EXTENSIONS
from ..core.exceptions import ApiError, ValidationError
from . import excel_import
from .model import ActiveEmployees, AttendanceRecord, AttendanceSheet, AttendanceSummary, BulkResult, ImportResult
from .repository import AttendanceRepository, AttendanceSheetRepository

logger = logging.getLogger(__name__)


def _file_size(storage: Any) -> int:
    stream = storage.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def validate_upload(storage: Any, *, max_bytes: int = MAX_UPLOAD_BYTES, spreadsheet: bool = True) -> None:
    if storage is None or not getattr(storage, "filename", ""):
        raise ValidationError(errors={"file": "Please select a file to upload"})
    if spreadsheet and not storage.filename.lower().endswith(SPREADSHEET_EXTENSIONS):
        raise ValidationError(errors={"file": "Please upload a valid Excel file (.xlsx or .xls)"})
    if _file_size(storage) > max_bytes:
        raise ValidationError(errors={"file": f"File size must be less than {max_bytes // (1024 * 1024)}MB"})


def _validate_company_month(data: Mapping[str, Any]) -> FormValidator:
    v = FormValidator(data)
    v.required("companyId", "Please select a company")
    v.month("month", "Month must be in YYYY-MM format")
    return v


def _present_count_rule(v: FormValidator, field: str = "presentCount") -> None:
    v.number_range(field, f"Present days must be between 0 and {MAX_PRESENT_DAYS}", min_value=0, max_value=MAX_PRESENT_DAYS)


def _count_errors(employee_id: str, count: Any) -> dict[str, str]:
    v = FormValidator({employee_id: count})
    _present_count_rule(v, employee_id)
    return v.errors


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        sheets: AttendanceSheetRepository,
        *,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self._attendance = attendance
        self._sheets = sheets
        self._max_upload_bytes = max_upload_bytes

    def mark(self, data: Mapping[str, Any]) -> AttendanceRecord:
        v = _validate_company_month(data)
        v.required("employeeId", "Please select an employee")
        _present_count_rule(v)
        v.raise_if_errors()
        payload = {
            "employeeId": data["employeeId"],
            "companyId": data["companyId"],
            "month": data["month"],
            "presentCount": int(float(data["presentCount"])),
        }
        return self._attendance.mark(payload)

    def bulk_mark(self, company_id: str, month: str, counts: Mapping[str, Any]) -> BulkResult:
        """Mark a whole roster; ``counts`` maps employee id to present days. Blank counts are skipped."""
        v = _validate_company_month({"companyId": company_id, "month": month})
        records = []
        for employee_id, count in counts.items():
            if count is None or str(count).strip() == "":
                continue
            before = len(v.errors)
            v.errors.update(_count_errors(employee_id, count))
            if len(v.errors) == before:
                records.append(
                    {"employeeId": employee_id, "companyId": company_id, "month": month, "presentCount": int(float(count))}
                )
        v.raise_if_errors()
        return self._bulk(records)

    def _bulk(self, records: list[dict]) -> BulkResult:
        if not records:
            raise ValidationError(errors={"records": "Add attendance for at least one employee"})
        result = self._attendance.bulk_mark(records)
        logger.info("Bulk attendance: %s created, %s failed", result.created, result.failed)
        return result

    def import_excel(self, company_id: str, month: str, storage: Any) -> tuple[ImportResult, BulkResult]:
        """Read a filled-in template, check it against the active roster and bulk mark it."""
        _validate_company_month({"companyId": company_id, "month": month}).raise_if_errors()
        validate_upload(storage, max_bytes=self._max_upload_bytes)
        storage.stream.seek(0)
        parsed = excel_import.read_attendance_sheet(storage.stream)
        active = self._attendance.active_employees(company_id, month)
        mismatch = excel_import.roster_mismatch(parsed, active.employees)
        if mismatch:
            raise ValidationError(" ".join(mismatch))
        return parsed, self._bulk(parsed.as_records(company_id, month))

    def upload(self, company_id: str, month: str, storage: Any) -> BulkResult:
        _validate_company_month({"companyId": company_id, "month": month}).raise_if_errors()
        validate_upload(storage, max_bytes=self._max_upload_bytes)
        result = self._attendance.upload(company_id, month, storage)
        logger.info("Attendance upload for %s %s: %s processed", company_id, month, result.processed)
        return result

    def records_for(self, company_id: str, month: str) -> list[AttendanceRecord]:
        _validate_company_month({"companyId": company_id, "month": month}).raise_if_errors()
        return self._attendance.records_by_company_and_month(company_id, month)

    def report(self, company_id: str, month: str) -> tuple[list[AttendanceRecord], AttendanceSummary]:
        records = self.records_for(company_id, month)
        return records, AttendanceSummary.of(records)

    def available_months(self, company_id: str) -> list[str]:
        """Months with attendance for the company, newest first."""
        if not company_id:
            return []
        records = self.company_records(company_id)
        return sorted({r.month for r in records if r.month}, reverse=True)

    def company_records(self, company_id: str) -> list[AttendanceRecord]:
        return self._attendance.records_by_company(company_id)

    def employee_records(
        self, employee_id: str, start_month: Optional[str] = None, end_month: Optional[str] = None
    ) -> list[AttendanceRecord]:
        return self._attendance.records_by_employee(employee_id, start_month or None, end_month or None)

    def list(self, filters: Mapping[str, Any]) -> list[AttendanceRecord]:
        params = {k: filters.get(k) for k in ("companyId", "employeeId", "month", "page", "limit") if filters.get(k)}
        return self._attendance.list(params)

    def company_month(self, company_id: str, month: str) -> list[AttendanceRecord]:
        _validate_company_month({"companyId": company_id, "month": month}).raise_if_errors()
        return self._attendance.company_month(company_id, month)

    def check_attendance_exists(self, employee_id: str, month: str) -> bool:
        try:
            records = self._attendance.records_by_employee(employee_id, None, None)
        except ApiError as e:
            logger.warning("Could not check attendance for %s in %s: %s", employee_id, month, e)
            return False
        return any(r.month == month for r in records)

    def delete(self, record_id: str) -> None:
        self._attendance.delete(record_id)

    def delete_many(self, ids: Iterable[str]) -> int:
        ids = [i for i in dict.fromkeys(ids) if i]
        if not ids:
            raise ValidationError("Select at least one record to delete")
        self._attendance.delete_many(ids)
        return len(ids)

    def stats(self, filters: Mapping[str, Any]) -> dict:
        params = {k: filters.get(k) for k in ("companyId", "month", "startMonth", "endMonth") if filters.get(k)}
        return self._attendance.stats(params)

    def reports(self, filters: Mapping[str, Any]) -> dict:
        params = {k: filters.get(k) for k in ("companyId", "employeeId", "startMonth", "endMonth") if filters.get(k)}
        return self._attendance.reports(params)

    def active_employees(self, company_id: str, month: str) -> ActiveEmployees:
        _validate_company_month({"companyId": company_id, "month": month}).raise_if_errors()
        return self._attendance.active_employees(company_id, month)

    def upload_sheet(self, company_id: str, month: str, storage: Any) -> AttendanceSheet:
        _validate_company_month({"companyId": company_id, "month": month}).raise_if_errors()
        validate_upload(storage, max_bytes=self._max_upload_bytes, spreadsheet=False)
        return self._sheets.upload(company_id, month, storage)

    def sheets(self, company_id: Optional[str] = None, month: Optional[str] = None) -> list[AttendanceSheet]:
        return self._sheets.list({"companyId": company_id, "month": month})

    def delete_sheet(self, sheet_id: str) -> None:
        self._sheets.delete(sheet_id)
