from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import parse_api_date
from ..common.forms import to_bool, to_float, to_int
from ..common.formatting import full_name
from ..core.enums import DocumentType


def _s(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _section(data: dict, key: str) -> dict:
    """Nested section if the API sent one, else the flat employee record."""
    nested = data.get(key)
    return nested if isinstance(nested, dict) else data


@dataclass(frozen=True)
class ContactDetails:
    mobile_number: str = ""
    aadhaar_number: str = ""
    permanent_address: str = ""
    present_address: str = ""
    city: str = ""
    district: str = ""
    state: str = ""
    pincode: Optional[int] = None

    @classmethod
    def from_api(cls, data: dict) -> "ContactDetails":
        return cls(
            mobile_number=_s(data, "mobileNumber"),
            aadhaar_number=_s(data, "aadhaarNumber"),
            permanent_address=_s(data, "permanentAddress"),
            present_address=_s(data, "presentAddress"),
            city=_s(data, "city"),
            district=_s(data, "district"),
            state=_s(data, "state"),
            pincode=to_int(data.get("pincode")),
        )


@dataclass(frozen=True)
class BankDetails:
    bank_account_number: str = ""
    ifsc_code: str = ""
    bank_name: str = ""
    bank_city: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "BankDetails":
        return cls(
            bank_account_number=_s(data, "bankAccountNumber"),
            ifsc_code=_s(data, "ifscCode"),
            bank_name=_s(data, "bankName"),
            bank_city=_s(data, "bankCity"),
        )


@dataclass(frozen=True)
class AdditionalDetails:
    pf_uan_number: str = ""
    esic_number: str = ""
    police_verification_number: str = ""
    police_verification_date: Optional[date] = None
    training_certificate_number: str = ""
    training_certificate_date: Optional[date] = None
    medical_certificate_number: str = ""
    medical_certificate_date: Optional[date] = None

    @classmethod
    def from_api(cls, data: dict) -> "AdditionalDetails":
        return cls(
            pf_uan_number=_s(data, "pfUanNumber"),
            esic_number=_s(data, "esicNumber"),
            police_verification_number=_s(data, "policeVerificationNumber"),
            police_verification_date=parse_api_date(data.get("policeVerificationDate")),
            training_certificate_number=_s(data, "trainingCertificateNumber"),
            training_certificate_date=parse_api_date(data.get("trainingCertificateDate")),
            medical_certificate_number=_s(data, "medicalCertificateNumber"),
            medical_certificate_date=parse_api_date(data.get("medicalCertificateDate")),
        )


@dataclass(frozen=True)
class ReferenceDetails:
    reference_name: str = ""
    reference_address: str = ""
    reference_number: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "ReferenceDetails":
        return cls(
            reference_name=_s(data, "referenceName"),
            reference_address=_s(data, "referenceAddress"),
            reference_number=_s(data, "referenceNumber"),
        )


@dataclass(frozen=True)
class DocumentUploads:
    """URLs of uploaded documents keyed by document type value."""

    urls: dict[str, str] = field(default_factory=dict)
    other_document_remarks: str = ""

    def url(self, document_type: DocumentType) -> Optional[str]:
        return self.urls.get(document_type.value)

    @classmethod
    def from_api(cls, data: dict) -> "DocumentUploads":
        urls = {t.value: str(data[t.value]) for t in DocumentType if isinstance(data.get(t.value), str) and data[t.value]}
        return cls(urls=urls, other_document_remarks=_s(data, "otherDocumentRemarks"))


@dataclass(frozen=True)
class EmploymentHistory:
    id: str
    company_id: str
    company_name: str
    designation_id: str
    designation_name: str
    department_id: str
    department_name: str
    salary: float
    joining_date: Optional[date]
    leaving_date: Optional[date]
    status: str
    reason: str = ""
    salary_type: Optional[str] = None
    salary_category: Optional[str] = None
    salary_sub_category: Optional[str] = None
    salary_per_day: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE" and self.leaving_date is None

    @classmethod
    def from_api(cls, data: dict) -> "EmploymentHistory":
        return cls(
            id=str(data.get("id", "")),
            company_id=_s(data, "companyId"),
            company_name=_s(data, "companyName"),
            designation_id=_s(data, "designationId"),
            designation_name=_s(data, "designationName"),
            department_id=_s(data, "departmentId"),
            department_name=_s(data, "departmentName"),
            salary=to_float(data.get("salary"), 0.0) or 0.0,
            joining_date=parse_api_date(data.get("joiningDate")),
            leaving_date=parse_api_date(data.get("leavingDate") or data.get("endDate")),
            status=_s(data, "status") or ("ACTIVE" if data.get("isActive") else "INACTIVE"),
            reason=_s(data, "reason"),
            salary_type=data.get("salaryType"),
            salary_category=data.get("salaryCategory"),
            salary_sub_category=data.get("salarySubCategory"),
            salary_per_day=to_float(data.get("salaryPerDay")),
        )


@dataclass(frozen=True)
class Employee:
    id: str
    employee_id: str
    title: str
    first_name: str
    last_name: str
    status: str
    mobile_number: str = ""
    avatar: Optional[str] = None
    company_id: str = ""
    company_name: str = ""
    designation_id: str = ""
    designation_name: str = ""
    department_id: str = ""
    department_name: str = ""
    recruited_by: str = ""
    gender: str = ""
    father_name: str = ""
    mother_name: str = ""
    husband_name: str = ""
    category: str = ""
    date_of_birth: Optional[date] = None
    age: Optional[int] = None
    employee_onboarding_date: Optional[date] = None
    date_of_joining: Optional[date] = None
    highest_education_qualification: str = ""
    blood_group: str = ""
    salary: Optional[float] = None
    salary_category: Optional[str] = None
    salary_sub_category: Optional[str] = None
    salary_per_day: Optional[float] = None
    monthly_salary: Optional[float] = None
    pf_enabled: bool = False
    esic_enabled: bool = False
    contact: ContactDetails = field(default_factory=ContactDetails)
    bank: BankDetails = field(default_factory=BankDetails)
    additional: AdditionalDetails = field(default_factory=AdditionalDetails)
    reference: ReferenceDetails = field(default_factory=ReferenceDetails)
    documents: DocumentUploads = field(default_factory=DocumentUploads)
    employment_histories: tuple[EmploymentHistory, ...] = ()

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    @property
    def display_name(self) -> str:
        return f"{self.title} {self.full_name}".strip() if self.title else self.full_name

    @property
    def current_employment(self) -> Optional[EmploymentHistory]:
        return next((h for h in self.employment_histories if h.is_active), None)

    @classmethod
    def from_api(cls, data: dict) -> "Employee":
        histories: Any = data.get("employmentHistories") or []
        if isinstance(histories, dict):
            histories = [histories]
        return cls(
            id=str(data.get("id", "")),
            employee_id=_s(data, "employeeId") or str(data.get("id", "")),
            title=_s(data, "title"),
            first_name=_s(data, "firstName"),
            last_name=_s(data, "lastName"),
            status=_s(data, "status"),
            mobile_number=_s(data, "mobileNumber") or _s(_section(data, "contactDetails"), "mobileNumber"),
            avatar=data.get("avatar") or data.get("photo"),
            company_id=_s(data, "companyId"),
            company_name=_s(data, "companyName"),
            designation_id=_s(data, "designationId"),
            designation_name=_s(data, "designationName"),
            department_id=_s(data, "employeeDepartmentId"),
            department_name=_s(data, "employeeDepartmentName"),
            recruited_by=_s(data, "recruitedBy"),
            gender=_s(data, "gender"),
            father_name=_s(data, "fatherName"),
            mother_name=_s(data, "motherName"),
            husband_name=_s(data, "husbandName"),
            category=_s(data, "category"),
            date_of_birth=parse_api_date(data.get("dateOfBirth")),
            age=to_int(data.get("age")),
            employee_onboarding_date=parse_api_date(data.get("employeeOnboardingDate")),
            date_of_joining=parse_api_date(data.get("dateOfJoining")),
            highest_education_qualification=_s(data, "highestEducationQualification"),
            blood_group=_s(data, "bloodGroup"),
            salary=to_float(data.get("salary")),
            salary_category=data.get("salaryCategory"),
            salary_sub_category=data.get("salarySubCategory"),
            salary_per_day=to_float(data.get("salaryPerDay")),
            monthly_salary=to_float(data.get("monthlySalary")),
            pf_enabled=to_bool(data.get("pfEnabled")),
            esic_enabled=to_bool(data.get("esicEnabled")),
            contact=ContactDetails.from_api(_section(data, "contactDetails")),
            bank=BankDetails.from_api(_section(data, "bankDetails")),
            additional=AdditionalDetails.from_api(_section(data, "additionalDetails")),
            reference=ReferenceDetails.from_api(_section(data, "referenceDetails")),
            documents=DocumentUploads.from_api(_section(data, "documentUploads")),
            employment_histories=tuple(EmploymentHistory.from_api(h) for h in histories if isinstance(h, dict)),
        )
