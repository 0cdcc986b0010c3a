from __future__ import annotations

from typing import Iterable

from reportlab.platypus import Flowable

from ...attendance.model import AttendanceRecord, AttendanceSummary
from ...common.datetime_utils import month_label
from .brand import build_document, data_table, footer, header, key_value_table, section


def build_attendance_report_pdf(
    records: Iterable[AttendanceRecord],
    *,
    brand_name: str,
    company_name: str,
    month: str,
) -> bytes:
    records = list(records)
    summary = AttendanceSummary.of(records)
    story: list[Flowable] = header(brand_name, "Attendance Report", f"{company_name} - {month_label(month)}")
    story += [
        section("Summary"),
        key_value_table(
            [
                ("Total Employees", str(summary.total_employees)),
                ("Total Present Days", str(summary.total_present)),
                ("Average Attendance", f"{summary.average_attendance:.1f} days"),
            ]
        ),
        section("Employees"),
        data_table(
            ["#", "Employee ID", "Employee Name", "Designation", "Department", "Present Days"],
            [
                [
                    idx,
                    r.employee_id,
                    r.employee_name or "N/A",
                    r.designation_name or "N/A",
                    r.department_name or "N/A",
                    r.present_count,
                ]
                for idx, r in enumerate(records, start=1)
            ],
        ),
    ]
    story += footer(brand_name)
    return build_document(story, title=f"Attendance Report {month}", author=brand_name)
