from __future__ import annotations

from typing import Any

import pytest

from hrms_portal.common.pagination import Page
from hrms_portal.companies.model import Company
from hrms_portal.companies.salary_template import SalaryTemplateConfig, default_salary_template_config
from hrms_portal.companies.service import CompanyService
from hrms_portal.core.enums import CompanyStatus
from hrms_portal.core.exceptions import ValidationError


class InMemoryCompanies:
    def __init__(self, template: SalaryTemplateConfig | None = None):
        self.template = template
        self.listed: list[dict] = []
        self.created: list[dict] = []
        self.updated: list[tuple[str, dict]] = []

    def list(self, params: dict[str, Any]) -> Page[Company]:
        self.listed.append(params)
        return Page(items=[self.get("c1")], total=1)

    def get(self, company_id: str) -> Company:
        data: dict[str, Any] = {"id": company_id, "name": "Acme Security", "status": "ACTIVE"}
        if self.template is not None:
            data["salaryTemplates"] = [self.template.to_api()]
        return Company.from_api(data)

    def create(self, payload: dict) -> Company:
        self.created.append(payload)
        return Company.from_api({"id": "c9", **payload})

    def update(self, company_id: str, payload: dict) -> Company:
        self.updated.append((company_id, payload))
        if "salaryTemplateConfig" in payload:
            self.template = SalaryTemplateConfig.from_api(payload["salaryTemplateConfig"])
        return Company.from_api({"id": company_id, "name": "Acme Security", **payload})


def company_form(**overrides) -> dict:
    form = {
        "name": "Acme Security",
        "address": "14 Park Street, Kolkata",
        "contactPersonName": "Ravi",
        "contactPersonNumber": "9876543210",
        "status": "ACTIVE",
        "companyOnboardingDate": "2024-04-01",
    }
    form.update(overrides)
    return form


def test_search_drops_invalid_sort_order():
    repo = InMemoryCompanies()
    CompanyService(repo).search(page=3, search_text="acme", sort_order="up")
    assert repo.listed[0]["page"] == 3
    assert repo.listed[0]["searchText"] == "acme"
    assert repo.listed[0]["sortOrder"] is None


def test_create_sends_ddmmyyyy_date_and_default_template():
    repo = InMemoryCompanies()
    CompanyService(repo).create(company_form())

    payload = repo.created[0]
    assert payload["companyOnboardingDate"] == "01-04-2024"
    keys = [f["key"] for f in payload["salaryTemplateConfig"]["mandatoryFields"]]
    assert "basicDuty" in keys and "netSalary" in keys


def test_company_form_validation():
    with pytest.raises(ValidationError) as exc:
        CompanyService(InMemoryCompanies()).create(
            company_form(name="A", address="x", contactPersonNumber="12", status="CLOSED", companyOnboardingDate="")
        )
    assert set(exc.value.errors) == {"name", "address", "contactPersonNumber", "status", "companyOnboardingDate"}


def test_terminate_flips_status_only():
    repo = InMemoryCompanies()
    company = CompanyService(repo).terminate("c1", "2024-12-31", "Contract ended")
    assert repo.updated == [("c1", {"status": "INACTIVE"})]
    assert company.status == CompanyStatus.INACTIVE
    with pytest.raises(ValidationError):
        CompanyService(repo).terminate("c1", "", "")


def test_template_config_falls_back_to_default():
    service = CompanyService(InMemoryCompanies())
    config = service.template_config(service.get("c1"))
    assert config.basic_duty == "30"
    assert {f.key for f in config.custom_fields} == {"bonus", "advanceTaken"}


def test_update_template_toggles_keeps_mandatory_fields_enabled():
    repo = InMemoryCompanies(default_salary_template_config())
    CompanyService(repo).update_template_toggles("c1", ["pf", "bonus"], basic_duty="26")

    config = repo.template
    assert all(f.enabled for f in config.mandatory_fields)
    assert config.field("pf").enabled
    assert not config.field("esic").enabled
    assert config.field("bonus").enabled and not config.field("advanceTaken").enabled
    assert config.basic_duty == "26"


def test_basic_duty_out_of_range():
    repo = InMemoryCompanies(default_salary_template_config())
    with pytest.raises(ValidationError) as exc:
        CompanyService(repo).update_template_toggles("c1", [], basic_duty="35")
    assert "basicDuty" in exc.value.errors


def test_add_custom_field_and_rename_it():
    repo = InMemoryCompanies(default_salary_template_config())
    service = CompanyService(repo)
    form = {
        "key": "nightAllowance",
        "label": "Night Allowance",
        "type": "SELECT",
        "purpose": "ALLOWANCE",
        "options": ["100", " 200 ", "100", ""],
        "description": "Paid per night shift",
        "requiresAdminInput": "on",
    }

    service.add_custom_field("c1", form)
    field = repo.template.field("nightAllowance")
    assert field.options == ("100", "200")
    assert field.rules.allowed_values == ("100", "200")
    assert field.requires_admin_input

    service.add_custom_field("c1", {**form, "key": "nightShiftAllowance"}, editing_key="nightAllowance")
    keys = [f.key for f in repo.template.custom_fields]
    assert "nightAllowance" not in keys
    assert keys[-1] == "nightShiftAllowance"


def test_custom_field_validation():
    repo = InMemoryCompanies(default_salary_template_config())
    with pytest.raises(ValidationError) as exc:
        CompanyService(repo).add_custom_field("c1", {"key": "Bonus Amount", "type": "SELECT", "purpose": "NOPE"})
    assert set(exc.value.errors) == {"key", "label", "description", "purpose", "options"}

    with pytest.raises(ValidationError) as exc:
        CompanyService(repo).add_custom_field(
            "c1", {"key": "bonus", "label": "Bonus", "type": "NUMBER", "purpose": "ALLOWANCE", "description": "d"}
        )
    assert exc.value.errors == {"key": "A field with key 'bonus' already exists"}


def test_remove_custom_field():
    repo = InMemoryCompanies(default_salary_template_config())
    CompanyService(repo).remove_custom_field("c1", "bonus")
    assert repo.template.field("bonus") is None


def test_save_template_rejects_disabled_mandatory_field():
    from dataclasses import replace

    config = default_salary_template_config()
    broken = replace(config, mandatory_fields=(replace(config.mandatory_fields[0], enabled=False),) + config.mandatory_fields[1:])
    with pytest.raises(ValidationError, match="S.No"):
        CompanyService(InMemoryCompanies()).save_template("c1", broken)


def test_edited_custom_field_keeps_its_position():
    repo = InMemoryCompanies(default_salary_template_config())
    service = CompanyService(repo)
    form = {
        "key": "bonus",
        "label": "Festival Bonus",
        "type": "NUMBER",
        "purpose": "ALLOWANCE",
        "description": "Paid once a year",
        "requiresAdminInput": "on",
    }

    service.add_custom_field("c1", form, editing_key="bonus")
    assert [f.key for f in repo.template.custom_fields] == ["bonus", "advanceTaken"]
    assert repo.template.field("bonus").label == "Festival Bonus"

    service.add_custom_field("c1", {**form, "key": "festivalBonus"}, editing_key="bonus")
    assert [f.key for f in repo.template.custom_fields] == ["festivalBonus", "advanceTaken"]
