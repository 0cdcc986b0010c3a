from __future__ import annotations

import json
import logging
import math
from typing import Any, Iterable, Mapping, Optional

from ..common.pagination import Page
from ..common.validators import FormValidator
from ..companies.salary_template import SalaryTemplateConfig
from ..core.constants import DEFAULT_PAGE_SIZE, MONTH_PATTERN
from ..core.exceptions import ValidationError
from .model import AdminInputField, PastPayrolls, PayrollCalculation, SavedPayroll
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

ADMIN_INPUT_PREFIX = "admin__"


def admin_input_name(employee_id: str, key: str) -> str:
    return f"{ADMIN_INPUT_PREFIX}{employee_id}__{key}"


def extract_admin_input_fields(config: Optional[SalaryTemplateConfig]) -> list[AdminInputField]:
    """Template fields the admin has to fill per employee before calculating."""
    if config is None:
        return []
    return [
        AdminInputField(
            key=f.key,
            label=f.label,
            type=f.type.value,
            purpose=f.purpose.value,
            description=f.description or "",
            default_value=f.default_value or "",
        )
        for f in config.all_fields()
        if f.requires_admin_input
    ]


def collect_admin_inputs(
    form: Mapping[str, Any], employee_ids: Iterable[str], fields: Iterable[AdminInputField]
) -> dict[str, dict[str, float]]:
    """Read ``admin__<employeeId>__<fieldKey>`` inputs into ``{employeeId: {fieldKey: number}}``.

    Blank inputs are left out; negative or non-numeric values are rejected.
    """
    fields = list(fields)
    inputs: dict[str, dict[str, float]] = {}
    errors: dict[str, str] = {}
    for employee_id in employee_ids:
        for f in fields:
            name = admin_input_name(employee_id, f.key)
            raw = form.get(name)
            if raw is None or str(raw).strip() == "":
                continue
            try:
                value = float(raw)
            except (TypeError, ValueError):
                value = math.nan
            if not math.isfinite(value):
                errors[name] = f"Employee {employee_id}: {f.label} must be a number"
                continue
            if value < 0:
                errors[name] = f"Employee {employee_id}: {f.label} cannot be negative"
                continue
            inputs.setdefault(employee_id, {})[f.key] = value
    if errors:
        raise ValidationError(errors=errors)
    return inputs


def _month_params(company_id: Optional[str], start_month: Optional[str], end_month: Optional[str]) -> dict[str, Any]:
    v = FormValidator({"startMonth": start_month, "endMonth": end_month})
    v.pattern("startMonth", MONTH_PATTERN, "Start month must be in YYYY-MM format", optional=True)
    v.pattern("endMonth", MONTH_PATTERN, "End month must be in YYYY-MM format", optional=True)
    if start_month and end_month:
        v.check(start_month <= end_month, "endMonth", "End month cannot be before start month")
    v.raise_if_errors()
    return {"companyId": company_id or None, "startMonth": start_month or None, "endMonth": end_month or None}


class PayrollService:
    def __init__(self, payroll: PayrollRepository):
        self._payroll = payroll

    def calculate(
        self,
        company_id: str,
        payroll_month: str,
        admin_inputs: Optional[dict[str, dict[str, float]]] = None,
    ) -> PayrollCalculation:
        v = FormValidator({"companyId": company_id, "payrollMonth": payroll_month})
        v.required("companyId", "Please select a company")
        v.month("payrollMonth", "Payroll month must be in YYYY-MM format")
        v.raise_if_errors()
        payload: dict[str, Any] = {"companyId": company_id, "payrollMonth": payroll_month}
        if admin_inputs:
            payload["adminInputs"] = admin_inputs
        calculation = self._payroll.calculate(payload)
        logger.info(
            "Payroll calculated for %s %s: %s employees", company_id, payroll_month, calculation.total_employees
        )
        return calculation

    def finalize(self, calculation: PayrollCalculation) -> int:
        """Save the valid rows of a calculation; returns how many were sent."""
        records = [{"employeeId": r.employee_id, "salary": r.salary} for r in calculation.valid_results]
        if not records:
            raise ValidationError("There are no valid payroll records to finalize")
        self._payroll.finalize(
            {"companyId": calculation.company_id, "payrollMonth": calculation.payroll_month, "payrollRecords": records}
        )
        logger.info("Payroll finalized for %s %s", calculation.company_id, calculation.payroll_month)
        return len(records)

    @staticmethod
    def dump_calculation(calculation: PayrollCalculation) -> str:
        return json.dumps(calculation.to_api())

    @staticmethod
    def load_calculation(raw: Optional[str]) -> PayrollCalculation:
        try:
            data = json.loads(raw or "")
        except ValueError as e:
            raise ValidationError("The calculation has expired. Please calculate the payroll again.") from e
        if not isinstance(data, dict) or not data.get("companyId"):
            raise ValidationError("The calculation has expired. Please calculate the payroll again.")
        return PayrollCalculation.from_api(data)

    def past(self, company_id: str, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> PastPayrolls:
        if not company_id:
            raise ValidationError(errors={"companyId": "Please select a company"})
        return self._payroll.past(company_id, page, limit)

    def by_month(self, company_id: str, month: str) -> Optional[list[SavedPayroll]]:
        """Saved payroll for a company and month, or None when nothing was finalized."""
        return self._payroll.by_month(company_id, month)

    def stats(self, company_id: str, start_month: Optional[str] = None, end_month: Optional[str] = None) -> dict:
        return self._payroll.stats(_month_params(company_id, start_month, end_month))

    def employee_report(
        self,
        employee_id: str,
        company_id: Optional[str] = None,
        start_month: Optional[str] = None,
        end_month: Optional[str] = None,
    ) -> list[SavedPayroll]:
        if not employee_id:
            raise ValidationError(errors={"employeeId": "Please select an employee"})
        records = self._payroll.employee_report(employee_id, _month_params(company_id, start_month, end_month))
        return sorted(records, key=lambda r: r.month)

    def report(
        self, filters: Mapping[str, Any], *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> Page[SavedPayroll]:
        params = _month_params(filters.get("companyId"), filters.get("startMonth"), filters.get("endMonth"))
        params.update(
            employeeId=filters.get("employeeId") or None,
            sortBy=filters.get("sortBy") or None,
            sortOrder=filters.get("sortOrder") if filters.get("sortOrder") in ("asc", "desc") else None,
            page=page,
            limit=limit,
        )
        return self._payroll.report(params)
