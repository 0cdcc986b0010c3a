from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import DateLike, to_ddmmyyyy
from ..common.pagination import Page
from ..common.validators import FormValidator
from ..core.constants import DEFAULT_PAGE_SIZE, MOBILE_NUMBER_PATTERN
from ..core.enums import CompanyStatus, enum_values
from ..core.exceptions import ValidationError
from .model import Company, CompanyEmployee, CompanyEmployeeCount
from .repository import CompanyRepository
from .salary_template import (
    SalaryTemplateConfig,
    build_custom_field,
    default_salary_template_config,
    validate_mandatory_fields,
    with_custom_field,
    with_toggles,
    without_custom_field,
)

logger = logging.getLogger(__name__)

COMPANY_FIELDS = (
    "name",
    "address",
    "contactPersonName",
    "contactPersonNumber",
    "status",
    "companyOnboardingDate",
)


def validate_company_form(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    v.min_length("name", 2, "Company name must be at least 2 characters")
    v.min_length("address", 5, "Address must be at least 5 characters")
    v.min_length("contactPersonName", 2, "Contact person name must be at least 2 characters")
    v.pattern("contactPersonNumber", MOBILE_NUMBER_PATTERN, "Contact number must be 10 digits")
    v.one_of("status", enum_values(CompanyStatus), "Status must be ACTIVE or INACTIVE")
    v.date_value("companyOnboardingDate", "Onboarding date is required")
    v.raise_if_errors()


def _company_payload(data: Mapping[str, Any]) -> dict:
    payload = {k: (str(data.get(k) or "").strip()) for k in COMPANY_FIELDS}
    # backend expects DD-MM-YYYY for company dates
    payload["companyOnboardingDate"] = to_ddmmyyyy(data.get("companyOnboardingDate"))
    return payload


class CompanyService:
    def __init__(self, companies: CompanyRepository):
        self._companies = companies

    def search(
        self,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        search_text: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Page[Company]:
        params = {
            "page": page,
            "limit": limit,
            "searchText": search_text,
            "status": status,
            "sortBy": sort_by,
            "sortOrder": sort_order if sort_order in ("asc", "desc") else None,
        }
        return self._companies.list(params)

    def all_companies(self) -> list[Company]:
        """Companies for dropdowns (backend default page)."""
        return self._companies.list({}).items

    def get(self, company_id: str) -> Company:
        return self._companies.get(company_id)

    def create(self, data: Mapping[str, Any], template: Optional[SalaryTemplateConfig] = None) -> Company:
        validate_company_form(data)
        payload = _company_payload(data)
        payload["salaryTemplateConfig"] = (template or default_salary_template_config()).to_api()
        company = self._companies.create(payload)
        logger.info("Company created: %s", company.name or payload["name"])
        return company

    def update(self, company_id: str, data: Mapping[str, Any]) -> Company:
        validate_company_form(data)
        return self._companies.update(company_id, _company_payload(data))

    def delete(self, company_id: str) -> None:
        self._companies.delete(company_id)

    def terminate(self, company_id: str, termination_date: DateLike = None, reason: str = "") -> Company:
        """Terminating a company only flips its status to INACTIVE."""
        v = FormValidator({"terminationDate": termination_date})
        v.date_value("terminationDate", "Termination date is required")
        v.raise_if_errors()
        company = self._companies.update(company_id, {"status": CompanyStatus.INACTIVE.value})
        logger.info("Company %s terminated on %s. Reason: %s", company_id, to_ddmmyyyy(termination_date), reason or "-")
        return company

    def employee_counts(self) -> list[CompanyEmployeeCount]:
        return self._companies.employee_counts()

    def employees(self, company_id: str) -> list[CompanyEmployee]:
        return self._companies.employees(company_id)

    # salary template -------------------------------------------------

    def template_config(self, company: Company) -> SalaryTemplateConfig:
        return company.salary_template_config or default_salary_template_config()

    def save_template(self, company_id: str, config: SalaryTemplateConfig) -> Company:
        errors = validate_mandatory_fields(config)
        if errors:
            raise ValidationError(errors[0])
        return self._companies.update(company_id, {"salaryTemplateConfig": config.to_api()})

    def update_template_toggles(
        self,
        company_id: str,
        enabled_keys: Iterable[str],
        basic_duty: Optional[str] = None,
    ) -> Company:
        company = self.get(company_id)
        config = with_toggles(self.template_config(company), enabled_keys, basic_duty)
        return self.save_template(company_id, config)

    def add_custom_field(self, company_id: str, data: Mapping[str, Any], *, editing_key: Optional[str] = None) -> Company:
        company = self.get(company_id)
        config = self.template_config(company)
        existing = [f.key for f in config.all_fields()]
        new_field = build_custom_field(dict(data), existing, editing_key=editing_key)
        return self.save_template(company_id, with_custom_field(config, new_field, replacing=editing_key))

    def remove_custom_field(self, company_id: str, key: str) -> Company:
        company = self.get(company_id)
        return self.save_template(company_id, without_custom_field(self.template_config(company), key))
