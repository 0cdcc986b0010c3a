"""Company salary template: which columns a payroll sheet shows.

The backend performs every calculation; the portal only edits the field
list and reads it back to know which values need admin input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional

from ..core.enums import SalaryFieldCategory, SalaryFieldPurpose, SalaryFieldType
from ..core.exceptions import ValidationError

CUSTOM_FIELD_KEY_PATTERN = r"^[a-z][a-zA-Z0-9]*$"
BASIC_DUTY_FIELD = "basicDuty"


def basic_duty_options() -> list[str]:
    return [str(day) for day in range(26, 32)]


def _enum(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class SalaryFieldRule:
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    default_value: Any = None
    allowed_values: tuple[str, ...] = ()
    require_remarks: bool = False

    @classmethod
    def from_api(cls, data: Optional[dict]) -> Optional["SalaryFieldRule"]:
        if not isinstance(data, dict) or not data:
            return None
        return cls(
            min_value=data.get("minValue"),
            max_value=data.get("maxValue"),
            default_value=data.get("defaultValue"),
            allowed_values=tuple(data.get("allowedValues") or ()),
            require_remarks=bool(data.get("requireRemarks", False)),
        )

    def to_api(self) -> dict:
        out: dict[str, Any] = {}
        if self.min_value is not None:
            out["minValue"] = self.min_value
        if self.max_value is not None:
            out["maxValue"] = self.max_value
        if self.default_value is not None:
            out["defaultValue"] = self.default_value
        if self.allowed_values:
            out["allowedValues"] = list(self.allowed_values)
        if self.require_remarks:
            out["requireRemarks"] = True
        return out


@dataclass(frozen=True)
class SalaryTemplateField:
    key: str
    label: str
    type: SalaryFieldType
    category: SalaryFieldCategory
    purpose: SalaryFieldPurpose
    enabled: bool = True
    rules: Optional[SalaryFieldRule] = None
    default_value: Optional[str] = None
    description: Optional[str] = None
    options: tuple[str, ...] = ()
    requires_admin_input: bool = False

    @property
    def is_mandatory(self) -> bool:
        return self.category in (SalaryFieldCategory.MANDATORY_NO_RULES, SalaryFieldCategory.MANDATORY_WITH_RULES)

    @classmethod
    def from_api(cls, data: dict) -> "SalaryTemplateField":
        default_value = data.get("defaultValue")
        return cls(
            key=data.get("key") or "",
            label=data.get("label") or data.get("key") or "",
            type=_enum(SalaryFieldType, data.get("type"), SalaryFieldType.TEXT),
            category=_enum(SalaryFieldCategory, data.get("category"), SalaryFieldCategory.CUSTOM),
            purpose=_enum(SalaryFieldPurpose, data.get("purpose"), SalaryFieldPurpose.INFORMATION),
            enabled=bool(data.get("enabled", True)),
            rules=SalaryFieldRule.from_api(data.get("rules")),
            default_value=None if default_value is None else str(default_value),
            description=data.get("description"),
            options=tuple(data.get("options") or ()),
            requires_admin_input=bool(data.get("requiresAdminInput", False)),
        )

    def to_api(self) -> dict:
        # only template keys; record metadata (id, companyId, timestamps) is never sent back
        out: dict[str, Any] = {
            "key": self.key,
            "label": self.label,
            "type": self.type.value,
            "category": self.category.value,
            "purpose": self.purpose.value,
            "enabled": self.enabled,
        }
        if self.rules is not None:
            out["rules"] = self.rules.to_api()
        if self.default_value is not None:
            out["defaultValue"] = self.default_value
        if self.description:
            out["description"] = self.description
        if self.options:
            out["options"] = list(self.options)
        if self.requires_admin_input:
            out["requiresAdminInput"] = True
        return out


@dataclass(frozen=True)
class SalaryTemplateConfig:
    mandatory_fields: tuple[SalaryTemplateField, ...] = ()
    optional_fields: tuple[SalaryTemplateField, ...] = ()
    custom_fields: tuple[SalaryTemplateField, ...] = ()

    def all_fields(self) -> list[SalaryTemplateField]:
        return [*self.mandatory_fields, *self.optional_fields, *self.custom_fields]

    def enabled_fields(self) -> list[SalaryTemplateField]:
        return [f for f in self.all_fields() if f.enabled]

    def field(self, key: str) -> Optional[SalaryTemplateField]:
        return next((f for f in self.all_fields() if f.key == key), None)

    @property
    def basic_duty(self) -> str:
        duty = self.field(BASIC_DUTY_FIELD)
        if duty is None:
            return "30"
        if duty.default_value:
            return duty.default_value
        if duty.rules is not None and duty.rules.default_value is not None:
            return str(duty.rules.default_value)
        return "30"

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "SalaryTemplateConfig":
        data = data or {}

        def fields(key: str) -> tuple[SalaryTemplateField, ...]:
            return tuple(SalaryTemplateField.from_api(f) for f in (data.get(key) or []) if isinstance(f, dict))

        return cls(
            mandatory_fields=fields("mandatoryFields"),
            optional_fields=fields("optionalFields"),
            custom_fields=fields("customFields"),
        )

    def to_api(self) -> dict:
        return {
            "mandatoryFields": [f.to_api() for f in self.mandatory_fields],
            "optionalFields": [f.to_api() for f in self.optional_fields],
            "customFields": [f.to_api() for f in self.custom_fields],
        }


def convert_salary_templates_to_config(salary_templates: Any) -> Optional[SalaryTemplateConfig]:
    """The API returns ``salaryTemplates`` as an array; the first entry is the config."""
    if not isinstance(salary_templates, list) or not salary_templates:
        return None
    first = salary_templates[0]
    return SalaryTemplateConfig.from_api(first if isinstance(first, dict) else {})


def _f(key, label, type_, category, purpose, **kwargs) -> SalaryTemplateField:
    return SalaryTemplateField(key=key, label=label, type=type_, category=category, purpose=purpose, **kwargs)


def default_salary_template_config() -> SalaryTemplateConfig:
    T, C, P = SalaryFieldType, SalaryFieldCategory, SalaryFieldPurpose
    return SalaryTemplateConfig(
        mandatory_fields=(
            _f("serialNumber", "S.No", T.NUMBER, C.MANDATORY_NO_RULES, P.INFORMATION),
            _f("companyName", "Company Name", T.TEXT, C.MANDATORY_NO_RULES, P.INFORMATION),
            _f("employeeName", "Employee Name", T.TEXT, C.MANDATORY_NO_RULES, P.INFORMATION),
            _f("designation", "Designation", T.TEXT, C.MANDATORY_NO_RULES, P.INFORMATION),
            _f("monthlyPay", "Monthly Pay", T.NUMBER, C.MANDATORY_NO_RULES, P.CALCULATION),
            _f(
                BASIC_DUTY_FIELD,
                "Basic Duty",
                T.SELECT,
                C.MANDATORY_WITH_RULES,
                P.CALCULATION,
                default_value="30",
                rules=SalaryFieldRule(default_value=30),
            ),
            _f("grossSalary", "Gross Salary", T.NUMBER, C.MANDATORY_NO_RULES, P.CALCULATION),
            _f("totalDeduction", "Total Deduction", T.NUMBER, C.MANDATORY_NO_RULES, P.CALCULATION),
            _f("netSalary", "Net Salary", T.NUMBER, C.MANDATORY_NO_RULES, P.CALCULATION),
        ),
        optional_fields=(
            _f("pf", "PF (12%)", T.NUMBER, C.OPTIONAL_NO_RULES, P.DEDUCTION),
            _f("esic", "ESIC (0.75%)", T.NUMBER, C.OPTIONAL_NO_RULES, P.DEDUCTION),
            _f("fatherName", "Father Name", T.TEXT, C.OPTIONAL_NO_RULES, P.INFORMATION),
            _f("uanNumber", "UAN No.", T.TEXT, C.OPTIONAL_NO_RULES, P.INFORMATION),
            _f("wagesPerDay", "Wages Per Day", T.NUMBER, C.OPTIONAL_NO_RULES, P.CALCULATION),
            _f("lwf", "LWF", T.NUMBER, C.OPTIONAL_WITH_RULES, P.DEDUCTION, rules=SalaryFieldRule(default_value=10)),
        ),
        custom_fields=(
            _f(
                "bonus",
                "Bonus",
                T.NUMBER,
                C.CUSTOM,
                P.ALLOWANCE,
                requires_admin_input=True,
                default_value="0",
                description=(
                    "Monthly bonus amount that varies based on performance, attendance, or company policy. "
                    "Admin must specify the amount for each employee every month."
                ),
            ),
            _f(
                "advanceTaken",
                "Advance Taken",
                T.NUMBER,
                C.CUSTOM,
                P.DEDUCTION,
                requires_admin_input=True,
                default_value="0",
                description=(
                    "Amount of salary advance taken by the employee that needs to be deducted from their "
                    "monthly salary. Admin must enter the advance amount for each employee."
                ),
            ),
        ),
    )


def validate_mandatory_fields(config: SalaryTemplateConfig) -> list[str]:
    errors: list[str] = []
    if not config.mandatory_fields:
        errors.append("Mandatory fields configuration is missing")
        return errors
    disabled = [f.label for f in config.mandatory_fields if not f.enabled]
    if disabled:
        errors.append(f"The following mandatory fields must be enabled: {', '.join(disabled)}")
    return errors


def build_custom_field(
    data: dict,
    existing_keys: Iterable[str],
    *,
    editing_key: Optional[str] = None,
) -> SalaryTemplateField:
    """Validate a custom field form and build the field; raises ValidationError."""
    errors: dict[str, str] = {}
    key = (data.get("key") or "").strip()
    label = (data.get("label") or "").strip()
    description = (data.get("description") or "").strip()

    if not key:
        errors["key"] = "Field key is required"
    elif not re.match(CUSTOM_FIELD_KEY_PATTERN, key):
        errors["key"] = "Key must be in camelCase (start with lowercase, no spaces or special characters)"
    elif key != editing_key and key in set(existing_keys):
        errors["key"] = f"A field with key '{key}' already exists"
    if not label:
        errors["label"] = "Field label is required"
    if not description:
        errors["description"] = "Description is required"

    field_type = _enum(SalaryFieldType, data.get("type"), None)
    if field_type is None:
        errors["type"] = "Invalid field type"
    purpose = _enum(SalaryFieldPurpose, data.get("purpose"), None)
    if purpose is None:
        errors["purpose"] = "Invalid field purpose"

    options = tuple(o for o in dict.fromkeys(x.strip() for x in (data.get("options") or []) if x and x.strip()))
    if field_type == SalaryFieldType.SELECT and not options:
        errors["options"] = "Select fields need at least one option"
    if errors:
        raise ValidationError(errors=errors)

    require_remarks = bool(data.get("requireRemarks"))
    rules = SalaryFieldRule(allowed_values=options, require_remarks=require_remarks) if (options or require_remarks) else None
    return SalaryTemplateField(
        key=key,
        label=label,
        type=field_type,
        category=SalaryFieldCategory.CUSTOM,
        purpose=purpose,
        enabled=True,
        rules=rules,
        default_value=(data.get("defaultValue") or "").strip() or None,
        description=description,
        options=options,
        requires_admin_input=bool(data.get("requiresAdminInput")),
    )


def with_custom_field(
    config: SalaryTemplateConfig, new_field: SalaryTemplateField, *, replacing: Optional[str] = None
) -> SalaryTemplateConfig:
    """Add a custom field, or put it in place of the field keyed ``replacing`` (default: its own key)."""
    target = replacing or new_field.key
    fields = list(config.custom_fields)
    for idx, f in enumerate(fields):
        if f.key == target:
            fields[idx] = new_field
            break
    else:
        fields.append(new_field)
    return replace(config, custom_fields=tuple(fields))


def without_custom_field(config: SalaryTemplateConfig, key: str) -> SalaryTemplateConfig:
    return replace(config, custom_fields=tuple(f for f in config.custom_fields if f.key != key))


def with_toggles(config: SalaryTemplateConfig, enabled_keys: Iterable[str], basic_duty: Optional[str] = None) -> SalaryTemplateConfig:
    """Apply the enabled checkboxes of the configuration page.

    Mandatory fields stay enabled whatever was posted.
    """
    enabled = set(enabled_keys)

    def toggle(fields: tuple[SalaryTemplateField, ...]) -> tuple[SalaryTemplateField, ...]:
        return tuple(replace(f, enabled=True if f.is_mandatory else f.key in enabled) for f in fields)

    config = replace(
        config,
        mandatory_fields=toggle(config.mandatory_fields),
        optional_fields=toggle(config.optional_fields),
        custom_fields=toggle(config.custom_fields),
    )
    if basic_duty:
        if basic_duty not in basic_duty_options():
            raise ValidationError(errors={BASIC_DUTY_FIELD: "Basic duty must be between 26 and 31 days"})
        config = replace(
            config,
            mandatory_fields=tuple(
                replace(f, default_value=basic_duty, rules=replace(f.rules or SalaryFieldRule(), default_value=int(basic_duty)))
                if f.key == BASIC_DUTY_FIELD
                else f
                for f in config.mandatory_fields
            ),
        )
    return config
