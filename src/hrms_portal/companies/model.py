from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_api_date
from ..common.forms import to_float, to_int
from ..core.enums import CompanyStatus
from .salary_template import SalaryTemplateConfig, convert_salary_templates_to_config


def _template_config(data: dict) -> Optional[SalaryTemplateConfig]:
    templates = data.get("salaryTemplates")
    if isinstance(templates, list):
        return convert_salary_templates_to_config(templates)
    if isinstance(templates, dict):
        return SalaryTemplateConfig.from_api(templates)
    if isinstance(data.get("salaryTemplateConfig"), dict):
        return SalaryTemplateConfig.from_api(data["salaryTemplateConfig"])
    return None


@dataclass(frozen=True)
class Company:
    id: str
    name: str
    address: str
    contact_person_name: str
    contact_person_number: str
    status: CompanyStatus
    company_onboarding_date: Optional[date]
    salary_template_config: Optional[SalaryTemplateConfig] = None

    @property
    def is_active(self) -> bool:
        return self.status == CompanyStatus.ACTIVE

    @classmethod
    def from_api(cls, data: dict) -> "Company":
        try:
            status = CompanyStatus(data.get("status") or CompanyStatus.ACTIVE.value)
        except ValueError:
            status = CompanyStatus.ACTIVE
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            address=data.get("address") or "",
            contact_person_name=data.get("contactPersonName") or "",
            contact_person_number=data.get("contactPersonNumber") or "",
            status=status,
            company_onboarding_date=parse_api_date(data.get("companyOnboardingDate")),
            salary_template_config=_template_config(data),
        )


@dataclass(frozen=True)
class CompanyEmployeeCount:
    name: str
    employee_count: int
    company_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "CompanyEmployeeCount":
        return cls(
            name=data.get("name") or data.get("companyName") or "",
            employee_count=to_int(data.get("employeeCount"), 0) or 0,
            company_id=data.get("id") or data.get("companyId"),
        )


@dataclass(frozen=True)
class CompanyEmployee:
    """Employee currently assigned to a company, with the salary snapshot of that assignment."""

    id: str
    employee_id: str
    title: str
    status: str
    first_name: str
    last_name: str
    designation: str
    department: str
    salary: float
    joining_date: Optional[date]
    leaving_date: Optional[date]
    salary_per_day: Optional[float] = None
    salary_type: Optional[str] = None
    salary_category: Optional[str] = None
    salary_sub_category: Optional[str] = None
    monthly_salary: Optional[float] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api(cls, data: dict) -> "CompanyEmployee":
        return cls(
            id=str(data.get("id", "")),
            employee_id=str(data.get("employeeId") or data.get("id") or ""),
            title=data.get("title") or "",
            status=data.get("status") or "",
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            designation=data.get("designation") or data.get("designationName") or "",
            department=data.get("department") or data.get("departmentName") or "",
            salary=to_float(data.get("salary"), 0.0) or 0.0,
            joining_date=parse_api_date(data.get("joiningDate")),
            leaving_date=parse_api_date(data.get("leavingDate")),
            salary_per_day=to_float(data.get("salaryPerDay")),
            salary_type=data.get("salaryType"),
            salary_category=data.get("salaryCategory"),
            salary_sub_category=data.get("salarySubCategory"),
            monthly_salary=to_float(data.get("monthlySalary")),
        )
