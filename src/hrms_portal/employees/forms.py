"""Shallow validation for the employee forms (create page and per-section edits)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

from ..common.datetime_utils import parse_api_date, to_api_date
from ..common.validators import FormValidator
from ..core.constants import AADHAAR_NUMBER_PATTERN, MOBILE_NUMBER_PATTERN
from ..core.enums import (
    Category,
    DocumentType,
    EducationQualification,
    EmployeeTitle,
    Gender,
    SalaryCategory,
    SalarySubCategory,
    enum_values,
)

BASIC_FIELDS = (
    "title",
    "firstName",
    "lastName",
    "dateOfBirth",
    "gender",
    "fatherName",
    "motherName",
    "husbandName",
    "bloodGroup",
    "employeeOnboardingDate",
    "status",
    "category",
    "recruitedBy",
    "highestEducationQualification",
)
CONTACT_FIELDS = (
    "mobileNumber",
    "aadhaarNumber",
    "permanentAddress",
    "presentAddress",
    "city",
    "district",
    "state",
    "pincode",
)
BANK_FIELDS = ("bankAccountNumber", "ifscCode", "bankName", "bankCity")
ADDITIONAL_FIELDS = (
    "pfUanNumber",
    "esicNumber",
    "policeVerificationNumber",
    "policeVerificationDate",
    "trainingCertificateNumber",
    "trainingCertificateDate",
    "medicalCertificateNumber",
    "medicalCertificateDate",
)
REFERENCE_FIELDS = ("referenceName", "referenceAddress", "referenceNumber")
EMPLOYMENT_FIELDS = (
    "currentCompanyId",
    "currentCompanyDesignationId",
    "currentCompanyDepartmentId",
    "currentCompanySalary",
    "currentCompanyJoiningDate",
)
SALARY_FIELDS = ("salaryCategory", "salarySubCategory", "salaryPerDay", "monthlySalary", "pfEnabled", "esicEnabled")
DATE_FIELDS = frozenset(
    {
        "dateOfBirth",
        "employeeOnboardingDate",
        "currentCompanyJoiningDate",
        "policeVerificationDate",
        "trainingCertificateDate",
        "medicalCertificateDate",
    }
)
CREATE_FIELDS = (
    BASIC_FIELDS + CONTACT_FIELDS + BANK_FIELDS + ADDITIONAL_FIELDS + REFERENCE_FIELDS + EMPLOYMENT_FIELDS
    + SALARY_FIELDS + ("otherDocumentRemarks",)
)

SECTION_FIELDS = {
    "contact": CONTACT_FIELDS,
    "bank": BANK_FIELDS,
    "additional": ADDITIONAL_FIELDS,
    "reference": REFERENCE_FIELDS,
}


def _contact_rules(v: FormValidator) -> None:
    v.pattern("mobileNumber", MOBILE_NUMBER_PATTERN, "Invalid mobile number")
    v.required_all(
        {
            "permanentAddress": "Permanent address is required",
            "presentAddress": "Present address is required",
            "city": "City is required",
            "district": "District is required",
            "state": "State is required",
        }
    )
    v.number_range("pincode", "Pincode is required", min_value=1)


def _bank_rules(v: FormValidator) -> None:
    v.required_all(
        {
            "bankAccountNumber": "Bank account number is required",
            "ifscCode": "IFSC code is required",
            "bankName": "Bank name is required",
            "bankCity": "Bank city is required",
        }
    )


def _additional_rules(v: FormValidator, *, dates_required: bool) -> None:
    v.required_all(
        {
            "pfUanNumber": "PF UAN number is required",
            "esicNumber": "ESIC number is required",
            "policeVerificationNumber": "Police verification number is required",
            "trainingCertificateNumber": "Training certificate number is required",
            "medicalCertificateNumber": "Medical certificate number is required",
        }
    )
    for key, label in (
        ("policeVerificationDate", "Police verification date"),
        ("trainingCertificateDate", "Training certificate date"),
        ("medicalCertificateDate", "Medical certificate date"),
    ):
        v.date_value(key, f"{label} is required", optional=not dates_required)


def _reference_rules(v: FormValidator) -> None:
    v.required_all(
        {
            "referenceName": "Reference name is required",
            "referenceAddress": "Reference address is required",
            "referenceNumber": "Reference number is required",
        }
    )


def validate_create_form(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    v.one_of("title", enum_values(EmployeeTitle), "Title is required")
    v.required_all(
        {
            "firstName": "First name is required",
            "lastName": "Last name is required",
            "currentCompanyDesignationId": "Designation is required",
            "currentCompanyDepartmentId": "Department is required",
            "currentCompanyId": "Company is required",
            "recruitedBy": "Recruiter name is required",
            "fatherName": "Father's name is required",
            "motherName": "Mother's name is required",
            "bloodGroup": "Blood group is required",
        }
    )
    v.date_value("currentCompanyJoiningDate", "Joining date is required")
    v.one_of("gender", enum_values(Gender), "Gender is required")
    v.one_of("category", enum_values(Category), "Category is required")
    v.date_value("dateOfBirth", "Date of birth is required")
    v.date_value("employeeOnboardingDate", "Onboarding date is required")
    v.one_of("highestEducationQualification", enum_values(EducationQualification), "Education qualification is required")
    _contact_rules(v)
    v.pattern("aadhaarNumber", AADHAAR_NUMBER_PATTERN, "Invalid Aadhaar number", optional=True)
    _reference_rules(v)
    _bank_rules(v)
    _additional_rules(v, dates_required=True)
    _salary_rules(v)
    v.raise_if_errors()


def validate_basic_info(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    v.one_of("title", enum_values(EmployeeTitle), "Invalid title", optional=True)
    v.required_all(
        {
            "firstName": "First name is required",
            "lastName": "Last name is required",
            "gender": "Gender is required",
            "fatherName": "Father's name is required",
            "motherName": "Mother's name is required",
            "bloodGroup": "Blood group is required",
            "status": "Status is required",
            "category": "Category is required",
            "recruitedBy": "Recruiter name is required",
        }
    )
    v.date_value("dateOfBirth", "Invalid date of birth", optional=True)
    v.date_value("employeeOnboardingDate", "Invalid onboarding date", optional=True)
    v.raise_if_errors()


def validate_contact_info(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    _contact_rules(v)
    v.pattern("aadhaarNumber", AADHAAR_NUMBER_PATTERN, "Invalid Aadhaar number")
    v.raise_if_errors()


def validate_bank_info(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    _bank_rules(v)
    v.raise_if_errors()


def validate_additional_details(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    _additional_rules(v, dates_required=False)
    v.raise_if_errors()


def validate_reference_details(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    _reference_rules(v)
    v.raise_if_errors()


SECTION_VALIDATORS = {
    "contact": validate_contact_info,
    "bank": validate_bank_info,
    "additional": validate_additional_details,
    "reference": validate_reference_details,
}


def validate_employment_history(data: Mapping[str, Any], *, joining_required: bool = True) -> None:
    v = FormValidator(data)
    v.required_all(
        {
            "companyId": "Company is required",
            "departmentId": "Department is required",
            "designationId": "Designation is required",
        }
    )
    v.date_value("joiningDate", "Joining date is required", optional=not joining_required)
    v.date_value("leavingDate", "Invalid leaving date", optional=True)
    v.number_range("salary", "Salary must be a positive number", min_value=0)
    v.raise_if_errors()


def _salary_rules(v: FormValidator) -> None:
    category = v.value("salaryCategory")
    v.one_of("salaryCategory", enum_values(SalaryCategory), "Invalid salary category", optional=True)
    if category in (SalaryCategory.CENTRAL.value, SalaryCategory.STATE.value):
        v.one_of("salarySubCategory", enum_values(SalarySubCategory), "Subcategory is required for CENTRAL and STATE categories")
        v.number_range(
            "salaryPerDay",
            "Rate per day is required for CENTRAL and STATE categories",
            min_value=0,
            exclusive_min=True,
        )
    elif category == SalaryCategory.SPECIALIZED.value:
        v.number_range(
            "monthlySalary",
            "Monthly salary is required for SPECIALIZED category",
            min_value=0,
            exclusive_min=True,
        )


def validate_salary_info(data: Mapping[str, Any]) -> None:
    v = FormValidator(data)
    _salary_rules(v)
    v.raise_if_errors()


def validate_document_upload(document: Any, document_type: str) -> None:
    v = FormValidator({"document": getattr(document, "filename", None), "documentType": document_type})
    v.required("document", "Please choose a file to upload")
    v.one_of("documentType", enum_values(DocumentType), "Invalid document type")
    v.raise_if_errors()


def validate_termination(data: Mapping[str, Any], joining_date: date | None = None) -> None:
    v = FormValidator(data)
    v.date_value("endDate", "Termination date is required")
    v.required("reason", "Reason is required")
    end = parse_api_date(data.get("endDate"))
    if end and joining_date:
        v.check(end >= joining_date, "endDate", "Termination date cannot be before the joining date.")
    v.raise_if_errors()


def to_multipart_fields(data: Mapping[str, Any]) -> dict[str, str]:
    """Flatten form values for a multipart body.

    Dates go out as YYYY-MM-DD, booleans as true/false, None and blank
    values are left out.
    """
    out: dict[str, str] = {}
    for key, value in data.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if isinstance(value, (date, datetime)) or key in DATE_FIELDS:
            formatted = to_api_date(value)
            if formatted:
                out[key] = formatted
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
            continue
        out[key] = value.strip() if isinstance(value, str) else str(value)
    return out


def non_empty_files(files: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only uploads where a file was actually chosen."""
    allowed = set(enum_values(DocumentType))
    return {k: f for k, f in files.items() if k in allowed and f is not None and getattr(f, "filename", "")}
