"""Payroll PDFs: company history by month, per-employee slips, the filtered report."""

from __future__ import annotations

from typing import Iterable

from reportlab.lib.units import mm
from reportlab.platypus import Flowable, Spacer

from ...common.datetime_utils import month_label
from ...common.formatting import format_date
from ...payroll.model import PayrollMonth, SavedPayroll
from .brand import build_document, data_table, footer, header, key_value_table, money, section
from .salary_slip import build_salary_slips_pdf

RECORD_HEADERS = ["Employee ID", "Name", "Duty Done", "Basic Pay", "Gross", "PF", "ESIC", "Deductions", "Net"]


def _record_row(r: SavedPayroll) -> list[str]:
    return [
        r.employee_id,
        r.employee_name or "N/A",
        f"{r.amount('dutyDone'):g}",
        money(r.amount("basicPay")),
        money(r.amount("grossSalary")),
        money(r.amount("pf")),
        money(r.amount("esic")),
        money(r.amount("totalDeductions")),
        money(r.amount("netSalary")),
    ]


def build_company_payroll_pdf(months: Iterable[PayrollMonth], *, brand_name: str, company_name: str) -> bytes:
    months = list(months)
    story: list[Flowable] = header(brand_name, "Company Payroll Report", company_name)
    story += [
        section("Summary"),
        key_value_table(
            [
                ("Months", str(len(months))),
                ("Payroll Records", str(sum(m.employee_count for m in months))),
                ("Total Net Salary", money(sum(m.total_net_salary for m in months))),
            ]
        ),
    ]
    for month in months:
        story += [
            section(f"{month_label(month.month)} - {month.employee_count} employee(s)"),
            data_table(
                RECORD_HEADERS,
                [_record_row(r) for r in month.records],
                total_row=["", "Total", "", "", "", "", "", "", money(month.total_net_salary)],
            ),
            Spacer(1, 4 * mm),
        ]
    story += footer(brand_name)
    return build_document(story, title=f"{company_name} - Payroll", author=brand_name, wide=True)


def build_employee_payroll_pdf(records: list[SavedPayroll], *, brand_name: str, employee_id: str) -> bytes:
    return build_salary_slips_pdf(records, brand_name=brand_name, title=f"Employee {employee_id} - Payroll Report")


def build_payroll_report_pdf(records: Iterable[SavedPayroll], *, brand_name: str, subtitle: str = "") -> bytes:
    records = list(records)
    story: list[Flowable] = header(brand_name, "Payroll Report", subtitle)
    rows = [
        [
            r.employee_id,
            r.company_name or "N/A",
            r.month,
            money(r.amount("basicPay")),
            money(r.amount("grossSalary")),
            money(r.amount("totalDeductions")),
            money(r.amount("netSalary")),
            format_date(r.created_at),
        ]
        for r in records
    ]
    story.append(
        data_table(
            ["Employee ID", "Company", "Month", "Basic Pay", "Gross", "Deductions", "Net", "Created At"],
            rows,
            total_row=[
                "",
                "Total",
                "",
                "",
                money(sum(r.amount("grossSalary") for r in records)),
                money(sum(r.amount("totalDeductions") for r in records)),
                money(sum(r.amount("netSalary") for r in records)),
                "",
            ],
        )
    )
    story += footer(brand_name)
    return build_document(story, title="Payroll Report", author=brand_name, wide=True)
