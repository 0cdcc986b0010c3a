from __future__ import annotations

from typing import Any, Optional

import pytest

from hrms_portal.common.pagination import Page
from hrms_portal.companies.salary_template import default_salary_template_config
from hrms_portal.core.exceptions import ValidationError
from hrms_portal.payroll.model import PastPayrolls, PayrollCalculation, SavedPayroll
from hrms_portal.payroll.service import (
    PayrollService,
    admin_input_name,
    collect_admin_inputs,
    extract_admin_input_fields,
)

CALCULATION = {
    "companyId": "c1",
    "companyName": "Acme Security",
    "payrollMonth": "2025-03",
    "totalEmployees": 3,
    "payrollResults": [
        {"employeeId": "e1", "employeeName": "Ravi", "presentDays": 26, "salary": {"grossSalary": 18000, "totalDeductions": 2000, "netSalary": 16000}},
        {"employeeId": "e2", "employeeName": "Asha", "presentDays": 30, "salary": {"grossSalary": 20000, "totalDeductions": 2500, "netSalary": 17500}},
        {"employeeId": "e3", "employeeName": "Mohan", "presentDays": 0, "salary": {}, "error": "No attendance found"},
    ],
}


class InMemoryPayroll:
    def __init__(self):
        self.calculated: list[dict] = []
        self.finalized: list[dict] = []
        self.reports: list[dict] = []
        self.saved: dict[tuple[str, str], list[SavedPayroll]] = {}

    def calculate(self, payload: dict) -> PayrollCalculation:
        self.calculated.append(payload)
        return PayrollCalculation.from_api(CALCULATION)

    def finalize(self, payload: dict) -> dict:
        self.finalized.append(payload)
        return {}

    def past(self, company_id: str, page: int, limit: int) -> PastPayrolls:
        return PastPayrolls.from_api({"companyName": "Acme Security", "records": [], "totalPages": 2, "currentPage": page})

    def by_month(self, company_id: str, month: str) -> Optional[list[SavedPayroll]]:
        return self.saved.get((company_id, month))

    def stats(self, params: dict[str, Any]) -> dict:
        return {"params": params}

    def employee_report(self, employee_id: str, params: dict[str, Any]) -> list[SavedPayroll]:
        return [
            SavedPayroll.from_api({"id": "p2", "employeeId": employee_id, "month": "2025-03"}),
            SavedPayroll.from_api({"id": "p1", "employeeId": employee_id, "month": "2025-01"}),
        ]

    def report(self, params: dict[str, Any]) -> Page[SavedPayroll]:
        self.reports.append(params)
        return Page()


def test_admin_input_fields_come_from_template():
    fields = extract_admin_input_fields(default_salary_template_config())
    assert [f.key for f in fields] == ["bonus", "advanceTaken"]
    assert fields[0].purpose == "ALLOWANCE"
    assert extract_admin_input_fields(None) == []


def test_collect_admin_inputs():
    fields = extract_admin_input_fields(default_salary_template_config())
    form = {
        admin_input_name("e1", "bonus"): "500",
        admin_input_name("e1", "advanceTaken"): "",
        admin_input_name("e2", "advanceTaken"): "1000.5",
    }
    assert collect_admin_inputs(form, ["e1", "e2", "e3"], fields) == {"e1": {"bonus": 500.0}, "e2": {"advanceTaken": 1000.5}}


def test_collect_admin_inputs_rejects_negative_and_text():
    fields = extract_admin_input_fields(default_salary_template_config())
    form = {admin_input_name("e1", "bonus"): "-5", admin_input_name("e2", "bonus"): "lots"}
    with pytest.raises(ValidationError) as exc:
        collect_admin_inputs(form, ["e1", "e2"], fields)
    assert exc.value.errors == {
        admin_input_name("e1", "bonus"): "Employee e1: Bonus cannot be negative",
        admin_input_name("e2", "bonus"): "Employee e2: Bonus must be a number",
    }


def test_calculate_sends_admin_inputs_only_when_present():
    repo = InMemoryPayroll()
    service = PayrollService(repo)
    service.calculate("c1", "2025-03")
    service.calculate("c1", "2025-03", {"e1": {"bonus": 500.0}})
    assert repo.calculated[0] == {"companyId": "c1", "payrollMonth": "2025-03"}
    assert repo.calculated[1]["adminInputs"] == {"e1": {"bonus": 500.0}}
    with pytest.raises(ValidationError) as exc:
        service.calculate("", "March")
    assert set(exc.value.errors) == {"companyId", "payrollMonth"}


def test_calculation_summary_counts_only_valid_rows():
    summary = PayrollCalculation.from_api(CALCULATION).summary
    assert (summary.employees, summary.errors) == (3, 1)
    assert (summary.gross_total, summary.deductions_total, summary.net_total) == (38000, 4500, 33500)


def test_finalize_sends_valid_records_only():
    repo = InMemoryPayroll()
    count = PayrollService(repo).finalize(PayrollCalculation.from_api(CALCULATION))
    assert count == 2
    payload = repo.finalized[0]
    assert payload["companyId"] == "c1" and payload["payrollMonth"] == "2025-03"
    assert [r["employeeId"] for r in payload["payrollRecords"]] == ["e1", "e2"]


def test_finalize_without_valid_rows():
    empty = PayrollCalculation.from_api({**CALCULATION, "payrollResults": [CALCULATION["payrollResults"][2]]})
    with pytest.raises(ValidationError):
        PayrollService(InMemoryPayroll()).finalize(empty)


def test_calculation_survives_the_review_form():
    calculation = PayrollCalculation.from_api(CALCULATION)
    restored = PayrollService.load_calculation(PayrollService.dump_calculation(calculation))
    assert restored == calculation
    for raw in (None, "", "{not json", "[]", '{"companyId": ""}'):
        with pytest.raises(ValidationError, match="expired"):
            PayrollService.load_calculation(raw)


def test_by_month_none_when_nothing_saved():
    repo = InMemoryPayroll()
    assert PayrollService(repo).by_month("c1", "2025-03") is None
    repo.saved[("c1", "2025-03")] = [SavedPayroll.from_api({"id": "p1", "employeeId": "e1", "month": "2025-03"})]
    assert len(PayrollService(repo).by_month("c1", "2025-03")) == 1


def test_employee_report_sorted_by_month_and_checks_range():
    service = PayrollService(InMemoryPayroll())
    assert [r.month for r in service.employee_report("e1")] == ["2025-01", "2025-03"]
    with pytest.raises(ValidationError):
        service.employee_report("")
    with pytest.raises(ValidationError) as exc:
        service.employee_report("e1", start_month="2025-05", end_month="2025-01")
    assert "endMonth" in exc.value.errors


def test_report_params():
    repo = InMemoryPayroll()
    PayrollService(repo).report({"companyId": "c1", "sortOrder": "random", "employeeId": ""}, page=2, limit=25)
    assert repo.reports[0] == {
        "companyId": "c1",
        "startMonth": None,
        "endMonth": None,
        "employeeId": None,
        "sortBy": None,
        "sortOrder": None,
        "page": 2,
        "limit": 25,
    }


def test_past_requires_company():
    service = PayrollService(InMemoryPayroll())
    with pytest.raises(ValidationError):
        service.past("")
    past = service.past("c1", page=2)
    assert past.has_prev and not past.has_next


def test_saved_payroll_reads_grouped_salary_data():
    record = SavedPayroll.from_api(
        {
            "id": "p1",
            "employeeId": "e1",
            "payrollMonth": "2025-03",
            "salaryData": {
                "calculations": {"grossSalary": "21000", "netSalary": 19000},
                "deductions": {"pf": 1800},
                "information": {"employeeName": "Ravi Kumar", "uanNumber": 1001},
            },
        }
    )
    assert record.month == "2025-03"
    assert record.employee_name == "Ravi Kumar"
    assert record.amount("grossSalary") == 21000
    assert record.amount("pf") == 1800
    assert record.amount("bonus") == 0
    assert record.info("uanNumber") == "1001"


def test_collect_admin_inputs_rejects_non_finite():
    fields = extract_admin_input_fields(default_salary_template_config())
    form = {admin_input_name("e1", "bonus"): "nan", admin_input_name("e1", "advanceTaken"): "inf"}
    with pytest.raises(ValidationError) as exc:
        collect_admin_inputs(form, ["e1"], fields)
    assert exc.value.errors == {
        admin_input_name("e1", "bonus"): "Employee e1: Bonus must be a number",
        admin_input_name("e1", "advanceTaken"): "Employee e1: Advance Taken must be a number",
    }
