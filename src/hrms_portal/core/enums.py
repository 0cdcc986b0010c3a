from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Portal user roles, as issued by the backend."""

    HR = "HR"
    OPERATIONS = "OPERATIONS"
    ACCOUNTS = "ACCOUNTS"
    FIELD = "FIELD"
    ADMIN = "ADMIN"
    USER = "USER"


class EmployeeTitle(str, Enum):
    MR = "MR"
    MRS = "MRS"
    MS = "MS"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class Category(str, Enum):
    """Social category recorded on the employee profile."""

    GENERAL = "GENERAL"
    OBC = "OBC"
    SC = "SC"
    ST = "ST"


class EducationQualification(str, Enum):
    UNDER_8 = "UNDER_8"
    EIGHTH = "EIGHTH"
    TENTH = "TENTH"
    TWELFTH = "TWELFTH"
    GRADUATE = "GRADUATE"
    POST_GRADUATE = "POST_GRADUATE"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class CompanyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class DocumentType(str, Enum):
    PHOTO = "photo"
    AADHAAR = "aadhaar"
    PAN_CARD = "panCard"
    BANK_PASSBOOK = "bankPassbook"
    MARK_SHEET = "markSheet"
    OTHER_DOCUMENT = "otherDocument"


class SalaryCategory(str, Enum):
    """How the backend computes wages for an employee."""

    CENTRAL = "CENTRAL"
    STATE = "STATE"
    SPECIALIZED = "SPECIALIZED"


class SalarySubCategory(str, Enum):
    SKILLED = "SKILLED"
    UNSKILLED = "UNSKILLED"
    HIGHSKILLED = "HIGHSKILLED"
    SEMISKILLED = "SEMISKILLED"


class SalaryFieldCategory(str, Enum):
    MANDATORY_NO_RULES = "MANDATORY_NO_RULES"
    MANDATORY_WITH_RULES = "MANDATORY_WITH_RULES"
    OPTIONAL_NO_RULES = "OPTIONAL_NO_RULES"
    OPTIONAL_WITH_RULES = "OPTIONAL_WITH_RULES"
    CUSTOM = "CUSTOM"


class SalaryFieldType(str, Enum):
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    BOOLEAN = "BOOLEAN"
    SELECT = "SELECT"


class SalaryFieldPurpose(str, Enum):
    ALLOWANCE = "ALLOWANCE"
    DEDUCTION = "DEDUCTION"
    INFORMATION = "INFORMATION"
    CALCULATION = "CALCULATION"


def enum_values(enum_cls) -> list[str]:
    return [m.value for m in enum_cls]
