"""Excel workbooks built from server data with pandas + openpyxl."""

from __future__ import annotations

from io import BytesIO
from typing import Iterable, Optional

import pandas as pd

from ..attendance.model import ActiveEmployee, AttendanceRecord
from ..common.datetime_utils import timestamp_for_filename
from ..common.formatting import format_date
from ..core.constants import ATTENDANCE_SHEET_HEADERS
from ..payroll.model import PayrollMonth, SavedPayroll

PAYROLL_AMOUNT_COLUMNS = (
    ("Basic Pay", "basicPay"),
    ("Monthly Pay", "monthlyPay"),
    ("Gross Salary", "grossSalary"),
    ("Net Salary", "netSalary"),
    ("PF", "pf"),
    ("ESIC", "esic"),
    ("LWF", "lwf"),
    ("Bonus", "bonus"),
    ("Attendance Bonus", "attendanceBonus"),
    ("Total Deductions", "totalDeductions"),
    ("Duty Done", "dutyDone"),
    ("Basic Duty", "basicDuty"),
)


def export_filename(name: str) -> str:
    return f"{name}_{timestamp_for_filename()}.xlsx"


def _workbook(frame: pd.DataFrame, sheet_name: str, widths: Optional[dict[str, int]] = None) -> bytes:
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=sheet_name)
        sheet = writer.sheets[sheet_name]
        for idx, column in enumerate(frame.columns):
            letter = sheet.cell(row=1, column=idx + 1).column_letter
            sheet.column_dimensions[letter].width = (widths or {}).get(column, max(12, len(str(column)) + 2))
    return output.getvalue()


def _amounts(record: SavedPayroll) -> dict:
    return {label: record.amount(key) for label, key in PAYROLL_AMOUNT_COLUMNS}


def payroll_report_workbook(records: Iterable[SavedPayroll]) -> bytes:
    rows = []
    for r in records:
        rows.append(
            {
                "Employee ID": r.employee_id,
                "Company": r.company_name or "N/A",
                "Month": r.month,
                **_amounts(r),
                "Created At": format_date(r.created_at),
            }
        )
    columns = ["Employee ID", "Company", "Month", *(label for label, _ in PAYROLL_AMOUNT_COLUMNS), "Created At"]
    return _workbook(pd.DataFrame(rows, columns=columns), "Payroll Report", {"Company": 20, "Employee ID": 15})


def company_payroll_workbook(months: Iterable[PayrollMonth], company_name: str) -> bytes:
    """Every record of every month on one sheet."""
    rows = []
    for month in months:
        for r in month.records:
            rows.append(
                {
                    "Month": month.month,
                    "Employee ID": r.employee_id,
                    "Employee Name": r.employee_name or r.employee_id,
                    "Company": company_name or "N/A",
                    **_amounts(r),
                    "Created At": format_date(r.created_at),
                }
            )
    columns = [
        "Month",
        "Employee ID",
        "Employee Name",
        "Company",
        *(label for label, _ in PAYROLL_AMOUNT_COLUMNS),
        "Created At",
    ]
    return _workbook(
        pd.DataFrame(rows, columns=columns), "Company Payroll", {"Employee Name": 20, "Company": 20}
    )


def attendance_report_workbook(records: Iterable[AttendanceRecord], company_name: str, month: str) -> bytes:
    rows = [
        {
            "Employee ID": r.employee_id,
            "Employee Name": r.employee_name or "N/A",
            "Designation": r.designation_name or "N/A",
            "Department": r.department_name or "N/A",
            "Company": r.company_name or company_name or "N/A",
            "Month": r.month or month,
            "Present Days": r.present_count,
        }
        for r in records
    ]
    columns = ["Employee ID", "Employee Name", "Designation", "Department", "Company", "Month", "Present Days"]
    return _workbook(pd.DataFrame(rows, columns=columns), "Attendance Report", {"Employee Name": 25})


def attendance_template_workbook(employees: Iterable[ActiveEmployee]) -> bytes:
    """Blank attendance sheet listing the active roster with a count of 0."""
    rows = [(e.id, e.full_name, 0) for e in employees]
    frame = pd.DataFrame(rows, columns=list(ATTENDANCE_SHEET_HEADERS))
    return _workbook(frame, "Attendance", {"Employee ID": 40, "Employee Name": 30, "Present Days Count": 20})


def attendance_template_filename(company_name: str, month: str) -> str:
    safe = "_".join(company_name.split()) or "Company"
    return f"Attendance_Template_{safe}_{month}.xlsx"
