"""Salary slips: a preview rendered from a company template, and real slips from saved payroll."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from typing import Any, Optional

from reportlab.lib.units import mm
from reportlab.platypus import Flowable, PageBreak, Spacer

from ...common.datetime_utils import now_local
from ...common.forms import to_float
from ...companies.salary_template import SalaryTemplateConfig, SalaryTemplateField
from ...core.enums import SalaryFieldPurpose, SalaryFieldType
from ...payroll.model import SavedPayroll, salary_amount, salary_value
from .brand import build_document, data_table, footer, header, key_value_table, money, section

SLIP_NOTE = "This is a computer-generated salary slip and does not require a signature."


def _short_month(month: str) -> str:
    """'2025-07' -> 'Jul-25'."""
    try:
        year, number = month.split("-")
        return f"{calendar.month_abbr[int(number)]}-{year[-2:]}"
    except (ValueError, IndexError):
        return month


def _pay_period(month: str) -> str:
    try:
        year, number = (int(p) for p in month.split("-"))
    except ValueError:
        return month
    last = calendar.monthrange(year, number)[1]
    return f"01-{number:02d}-{year} to {last}-{number:02d}-{year}"


def _fields(config: SalaryTemplateConfig, purpose: SalaryFieldPurpose) -> list[SalaryTemplateField]:
    return [f for f in config.enabled_fields() if f.purpose == purpose]


def _numeric(f: SalaryTemplateField) -> float:
    if f.type != SalaryFieldType.NUMBER:
        return 0.0
    rule_default = f.rules.default_value if f.rules is not None else None
    return to_float(rule_default or f.default_value, 0.0) or 0.0


def _display(f: SalaryTemplateField, employee_name: str, month: str, year: str) -> str:
    if f.key == "employeeName":
        return employee_name
    if f.key == "month":
        return month
    if f.key == "year":
        return year
    if f.key == "basicDuty":
        return f"{f.default_value or '30'} days"
    if f.type == SalaryFieldType.NUMBER:
        return money(_numeric(f))
    if f.type == SalaryFieldType.SELECT:
        return f.default_value or "-"
    return f.default_value or "N/A"


def build_salary_slip_preview_pdf(
    config: SalaryTemplateConfig,
    *,
    brand_name: str,
    company_name: str = "",
    employee_name: str = "Sample Employee",
) -> bytes:
    """Slip layout for a template, filled with the fields' default values."""
    now = now_local()
    month, year = now.strftime("%B"), now.strftime("%Y")
    story: list[Flowable] = header(brand_name, "Salary Slip", f"{company_name} - {month} {year}".strip(" -"))

    info = _fields(config, SalaryFieldPurpose.INFORMATION)
    story += [section("Employee Information")]
    story.append(
        key_value_table(
            [("Employee Name", employee_name)] + [(f.label, _display(f, employee_name, month, year)) for f in info]
        )
    )

    calculations = _fields(config, SalaryFieldPurpose.CALCULATION)
    if calculations:
        rows = [(f.label, _display(f, employee_name, month, year)) for f in calculations]
        story += [section("Salary Calculation"), key_value_table(rows)]

    allowances = _fields(config, SalaryFieldPurpose.ALLOWANCE)
    total_allowances = sum(_numeric(f) for f in allowances)
    if allowances:
        rows = [(f.label, _display(f, employee_name, month, year)) for f in allowances]
        story += [section("Allowances"), key_value_table(rows + [("Total Allowances", money(total_allowances))])]

    deductions = _fields(config, SalaryFieldPurpose.DEDUCTION)
    total_deductions = sum(_numeric(f) for f in deductions)
    if deductions:
        rows = [(f.label, _display(f, employee_name, month, year)) for f in deductions]
        story += [section("Deductions"), key_value_table(rows + [("Total Deductions", money(total_deductions))])]

    fallback = calculations[0] if calculations else None
    basic_field = next((f for f in calculations if f.key in ("basicSalary", "basic")), fallback)
    basic = _numeric(basic_field) if basic_field else 0.0
    gross = basic + total_allowances
    story += [
        section("Salary Summary"),
        key_value_table(
            [
                ("Basic Salary", money(basic)),
                ("Total Allowances", money(total_allowances)),
                ("Gross Salary", money(gross)),
                ("Total Deductions", money(total_deductions)),
                ("Net Salary", money(gross - total_deductions)),
            ]
        ),
    ]
    story += footer(brand_name, SLIP_NOTE)
    return build_document(story, title="Salary Slip Preview", author=brand_name)


@dataclass(frozen=True)
class SalarySlip:
    company: str
    month: str
    pay_period: str
    employee_name: str
    employee_id: str
    category: str
    department: str
    location: str
    working_days: float
    account_no: str
    esic_no: str
    uan_no: str
    basic: float
    allowance: float
    other_allowance: float
    other: float
    gross_earning: float
    epf: float
    esic: float
    advance: float
    gross_deduction: float
    net_pay: float

    @classmethod
    def from_payroll(cls, record: SavedPayroll, company_name: str = "") -> "SalarySlip":
        s = record.salary_data

        def first(keys: tuple[str, ...], group: Optional[str] = None) -> Any:
            for key in keys:
                value = salary_value(s, key, group)
                if value is not None:
                    return value
            return None

        def amount(keys: tuple[str, ...], group: Optional[str] = None) -> float:
            return to_float(first(keys, group), 0.0) or 0.0

        epf = amount(("pf", "epfContribution12Percent"), "deductions")
        esic = amount(("esic", "esic075Percent"), "deductions")
        advance = amount(("advance", "advanceTaken"), "deductions")
        gross_deduction = first(("totalDeductions",), "deductions")
        return cls(
            company=str(first(("companyName",), "information") or record.company_name or company_name or "N/A"),
            month=_short_month(record.month),
            pay_period=_pay_period(record.month),
            employee_name=str(first(("employeeName",), "information") or record.employee_name or record.employee_id),
            employee_id=record.employee_id,
            category=str(first(("salaryCategory", "category")) or "N/A"),
            department=str(first(("department",), "information") or "N/A"),
            location=str(first(("location",), "information") or "N/A"),
            working_days=amount(("dutyDone", "workingDays"), "calculations"),
            account_no=str(first(("bankAccountNumber",), "information") or ""),
            esic_no=str(first(("esicNumber",), "information") or ""),
            uan_no=str(first(("uanNumber", "pfUanNumber"), "information") or ""),
            basic=salary_amount(s, "basicPay", "calculations"),
            allowance=amount(("allowance", "hra", "transportAllowance"), "allowances"),
            other_allowance=amount(("otherAllowance", "bonus"), "allowances"),
            other=amount(("other",), "allowances"),
            gross_earning=salary_amount(s, "grossSalary", "calculations"),
            epf=epf,
            esic=esic,
            advance=advance,
            gross_deduction=to_float(gross_deduction, 0.0) if gross_deduction is not None else epf + esic + advance,
            net_pay=salary_amount(s, "netSalary", "calculations"),
        )


def salary_slip_story(slip: SalarySlip, brand_name: str) -> list[Flowable]:
    story: list[Flowable] = header(brand_name, "Salary Slip", f"{slip.month} ({slip.pay_period})")
    story += [
        section("Employee Details"),
        key_value_table(
            [
                ("Company", slip.company),
                ("Employee Name", slip.employee_name),
                ("Employee ID", slip.employee_id),
                ("Category", slip.category),
                ("Department", slip.department),
                ("Location", slip.location),
                ("Working Days", f"{slip.working_days:g}"),
                ("Account No.", slip.account_no or "-"),
                ("ESIC No.", slip.esic_no or "-"),
                ("UAN No.", slip.uan_no or "-"),
            ]
        ),
        Spacer(1, 4 * mm),
        data_table(
            ["Earnings", "Amount", "Deductions", "Amount"],
            [
                ["Basic", money(slip.basic), "EPF 12%", money(slip.epf)],
                ["Allowance", money(slip.allowance), "ESIC 0.75%", money(slip.esic)],
                ["Other Allowance", money(slip.other_allowance), "Advance", money(slip.advance)],
                ["Other", money(slip.other), "", ""],
            ],
            total_row=["Gross Earning", money(slip.gross_earning), "Gross Deduction", money(slip.gross_deduction)],
            col_widths=[50 * mm, 40 * mm, 50 * mm, 40 * mm],
        ),
        Spacer(1, 4 * mm),
        key_value_table([("Net Pay", money(slip.net_pay))]),
    ]
    story += footer(brand_name, SLIP_NOTE)
    return story


def build_salary_slips_pdf(
    records: list[SavedPayroll], *, brand_name: str, title: str, company_name: str = ""
) -> bytes:
    """One slip per record, oldest month first."""
    story: list[Flowable] = []
    for idx, record in enumerate(sorted(records, key=lambda r: r.month)):
        if idx:
            story.append(PageBreak())
        story += salary_slip_story(SalarySlip.from_payroll(record, company_name), brand_name)
    if not story:
        story = header(brand_name, title) + footer(brand_name)
    return build_document(story, title=title, author=brand_name)
