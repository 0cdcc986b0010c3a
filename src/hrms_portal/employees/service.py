from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..common.datetime_utils import to_ddmmyyyy
from ..common.forms import drop_empty, to_bool, to_float, to_int
from ..common.pagination import Page
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import EmployeeStatus, SalaryCategory
from ..core.exceptions import ValidationError
from . import forms
from .model import Employee, EmploymentHistory
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

SEARCH_PARAMS = (
    "searchText",
    "designationId",
    "employeeDepartmentId",
    "companyId",
    "gender",
    "category",
    "highestEducationQualification",
    "minAge",
    "maxAge",
    "sortBy",
    "sortOrder",
    "startDate",
    "endDate",
)


def _pick(data: Mapping[str, Any], keys) -> dict[str, Any]:
    return {k: data.get(k) for k in keys if k in data}


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def search(self, filters: Mapping[str, Any], *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Page[Employee]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        for key in SEARCH_PARAMS:
            value = filters.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            params[key] = value.strip() if isinstance(value, str) else value
        for key in ("minAge", "maxAge"):
            if key in params:
                age = to_int(params[key])
                if age is None or age < 0:
                    raise ValidationError(errors={key: "Age must be a positive number"})
                params[key] = age
        if params.get("sortOrder") not in (None, "asc", "desc"):
            params.pop("sortOrder")
        return self._employees.search(params)

    def get(self, employee_id: str) -> Employee:
        return self._employees.get(employee_id)

    def create(self, data: Mapping[str, Any], files: Optional[Mapping[str, Any]] = None) -> Employee:
        values = dict(_pick(data, forms.CREATE_FIELDS))
        values.setdefault("status", EmployeeStatus.ACTIVE.value)
        forms.validate_create_form(values)
        if values.get("salaryCategory"):
            values["pfEnabled"] = to_bool(values.get("pfEnabled"))
            values["esicEnabled"] = to_bool(values.get("esicEnabled"))
        employee = self._employees.create(forms.to_multipart_fields(values), forms.non_empty_files(files or {}))
        logger.info("Employee created: %s", employee.employee_id or employee.id)
        return employee

    def update_basic_info(self, employee_id: str, data: Mapping[str, Any]) -> Employee:
        values = _pick(data, forms.BASIC_FIELDS)
        forms.validate_basic_info(values)
        return self._employees.update(employee_id, forms.to_multipart_fields(values), {})

    def update_salary_info(self, employee_id: str, data: Mapping[str, Any]) -> Employee:
        values = _pick(data, forms.SALARY_FIELDS)
        forms.validate_salary_info(values)
        category = values.get("salaryCategory") or None
        payload: dict[str, Any] = {
            "salaryCategory": category,
            "pfEnabled": to_bool(values.get("pfEnabled")),
            "esicEnabled": to_bool(values.get("esicEnabled")),
        }
        if category in (SalaryCategory.CENTRAL.value, SalaryCategory.STATE.value):
            payload["salarySubCategory"] = values.get("salarySubCategory")
            payload["salaryPerDay"] = to_float(values.get("salaryPerDay"))
        elif category == SalaryCategory.SPECIALIZED.value:
            payload["monthlySalary"] = to_float(values.get("monthlySalary"))
        return self._employees.update(employee_id, forms.to_multipart_fields(payload), {})

    def get_section(self, employee_id: str, section: str) -> dict:
        return self._employees.get_section(employee_id, section)

    def update_section(self, employee_id: str, section: str, data: Mapping[str, Any]) -> dict:
        if section not in forms.SECTION_VALIDATORS:
            raise ValidationError(f"Unknown section: {section}")
        values = {k: (v.strip() if isinstance(v, str) else v) for k, v in _pick(data, forms.SECTION_FIELDS[section]).items()}
        forms.SECTION_VALIDATORS[section](values)
        if "pincode" in values:
            values["pincode"] = to_int(values["pincode"])
        for key in forms.DATE_FIELDS & values.keys():
            values[key] = to_ddmmyyyy(values[key])
        return self._employees.update_section(employee_id, section, drop_empty(values))

    def documents(self, employee_id: str) -> dict:
        return self.get_section(employee_id, "documents")

    def upload_document(self, employee_id: str, document: Any, document_type: str) -> dict:
        forms.validate_document_upload(document, document_type)
        return self._employees.upload_document(employee_id, document, document_type)

    def employment_history(self, employee_id: str) -> list[EmploymentHistory]:
        return self._employees.employment_history(employee_id)

    def active_employment(self, employee_id: str) -> Optional[EmploymentHistory]:
        return self._employees.active_employment(employee_id)

    def add_employment_history(self, employee_id: str, data: Mapping[str, Any]) -> EmploymentHistory:
        forms.validate_employment_history(data)
        payload = {
            "companyId": data.get("companyId"),
            "departmentId": data.get("departmentId"),
            "designationId": data.get("designationId"),
            "salary": to_float(data.get("salary"), 0.0),
            "joiningDate": to_ddmmyyyy(data.get("joiningDate")),
            "status": EmployeeStatus.ACTIVE.value if to_bool(data.get("isActive")) else EmployeeStatus.INACTIVE.value,
        }
        return self._employees.create_employment_history(employee_id, payload)

    def update_employment_history(self, history_id: str, data: Mapping[str, Any]) -> EmploymentHistory:
        forms.validate_employment_history(data, joining_required=False)
        payload = {
            "companyId": data.get("companyId"),
            "departmentId": data.get("departmentId"),
            "designationId": data.get("designationId"),
            "salary": to_float(data.get("salary"), 0.0),
            "leavingDate": to_ddmmyyyy(data.get("leavingDate")),
            "status": EmployeeStatus.ACTIVE.value if to_bool(data.get("isActive")) else EmployeeStatus.INACTIVE.value,
        }
        return self._employees.update_employment_history(history_id, drop_empty(payload))

    def close_employment(self, employee_id: str, data: Mapping[str, Any], joining_date=None) -> None:
        forms.validate_termination(data, joining_date)
        self._employees.close_employment(
            employee_id,
            {"endDate": to_ddmmyyyy(data.get("endDate")), "reason": str(data.get("reason") or "").strip()},
        )
        logger.info("Employment closed for employee %s", employee_id)

    def delete(self, employee_id: str) -> None:
        self._employees.delete(employee_id)

    def delete_many(self, ids: list[str]) -> int:
        ids = [i for i in dict.fromkeys(ids) if i]
        if not ids:
            raise ValidationError("Select at least one employee to delete")
        self._employees.delete_many(ids)
        return len(ids)
