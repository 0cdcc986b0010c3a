from __future__ import annotations

from typing import Optional

from reportlab.platypus import Flowable

from ...common.formatting import format_date, or_na
from ...companies.model import Company
from .brand import build_document, data_table, footer, header, key_value_table, section


def build_company_profile_pdf(company: Company, *, brand_name: str, employee_count: Optional[int] = None) -> bytes:
    story: list[Flowable] = header(brand_name, "Company Profile", company.name)
    details = [
        ("Company Name", or_na(company.name)),
        ("Address", or_na(company.address)),
        ("Contact Person", or_na(company.contact_person_name)),
        ("Contact Number", or_na(company.contact_person_number)),
        ("Status", company.status.value),
        ("Onboarding Date", format_date(company.company_onboarding_date)),
    ]
    if employee_count is not None:
        details.append(("Employees", str(employee_count)))
    story += [section("Company Details"), key_value_table(details)]

    config = company.salary_template_config
    if config is not None:
        rows = [
            [f.label, f.key, f.type.value, f.purpose.value, "Yes" if f.enabled else "No"]
            for f in config.all_fields()
        ]
        story += [
            section("Salary Template"),
            data_table(["Field", "Key", "Type", "Purpose", "Enabled"], rows),
        ]
    story += footer(brand_name)
    return build_document(story, title=f"{company.name} - Company Profile", author=brand_name)
