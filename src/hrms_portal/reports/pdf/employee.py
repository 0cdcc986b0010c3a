from __future__ import annotations

from reportlab.platypus import Flowable

from ...common.formatting import format_date, or_na
from ...employees.model import Employee
from .brand import build_document, data_table, footer, header, key_value_table, money, section


def _certificate(number: str, issued) -> str:
    return f"{or_na(number)} ({format_date(issued)})"


def build_employee_profile_pdf(employee: Employee, *, brand_name: str) -> bytes:
    story: list[Flowable] = header(brand_name, "Employee Profile", employee.display_name)
    story += [
        section("Basic Information"),
        key_value_table(
            [
                ("Employee ID", or_na(employee.employee_id)),
                ("Name", or_na(employee.display_name)),
                ("Status", or_na(employee.status)),
                ("Gender", or_na(employee.gender)),
                ("Date of Birth", format_date(employee.date_of_birth)),
                ("Father's Name", or_na(employee.father_name)),
                ("Mother's Name", or_na(employee.mother_name)),
                ("Blood Group", or_na(employee.blood_group)),
                ("Category", or_na(employee.category)),
                ("Qualification", or_na(employee.highest_education_qualification)),
                ("Onboarding Date", format_date(employee.employee_onboarding_date)),
                ("Recruited By", or_na(employee.recruited_by)),
            ]
        ),
    ]
    c = employee.contact
    story += [
        section("Contact Details"),
        key_value_table(
            [
                ("Mobile Number", or_na(c.mobile_number or employee.mobile_number)),
                ("Aadhaar Number", or_na(c.aadhaar_number)),
                ("Permanent Address", or_na(c.permanent_address)),
                ("Present Address", or_na(c.present_address)),
                ("City / District", or_na(", ".join(p for p in (c.city, c.district) if p))),
                ("State / Pincode", or_na(" - ".join(str(p) for p in (c.state, c.pincode) if p))),
            ]
        ),
    ]
    b = employee.bank
    story += [
        section("Bank Details"),
        key_value_table(
            [
                ("Account Number", or_na(b.bank_account_number)),
                ("IFSC Code", or_na(b.ifsc_code)),
                ("Bank Name", or_na(b.bank_name)),
                ("Bank City", or_na(b.bank_city)),
            ]
        ),
    ]
    a = employee.additional
    story += [
        section("Additional Details"),
        key_value_table(
            [
                ("PF UAN Number", or_na(a.pf_uan_number)),
                ("ESIC Number", or_na(a.esic_number)),
                ("Police Verification", _certificate(a.police_verification_number, a.police_verification_date)),
                ("Training Certificate", _certificate(a.training_certificate_number, a.training_certificate_date)),
                ("Medical Certificate", _certificate(a.medical_certificate_number, a.medical_certificate_date)),
            ]
        ),
    ]
    story += [
        section("Salary"),
        key_value_table(
            [
                ("Salary Category", or_na(employee.salary_category)),
                ("Sub Category", or_na(employee.salary_sub_category)),
                ("Rate per Day", money(employee.salary_per_day) if employee.salary_per_day else "N/A"),
                ("Monthly Salary", money(employee.monthly_salary) if employee.monthly_salary else "N/A"),
                ("PF / ESIC", f"{'Yes' if employee.pf_enabled else 'No'} / {'Yes' if employee.esic_enabled else 'No'}"),
            ]
        ),
    ]
    if employee.employment_histories:
        rows = [
            [
                or_na(h.company_name),
                or_na(h.designation_name),
                or_na(h.department_name),
                money(h.salary),
                format_date(h.joining_date),
                format_date(h.leaving_date, "Present"),
                h.status,
            ]
            for h in employee.employment_histories
        ]
        story += [
            section("Employment History"),
            data_table(["Company", "Designation", "Department", "Salary", "Joined", "Left", "Status"], rows),
        ]
    story += footer(brand_name)
    return build_document(story, title=f"{employee.full_name} - Employee Profile", author=brand_name)
