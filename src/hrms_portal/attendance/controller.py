from __future__ import annotations

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import month_key, now_local, timestamp_for_filename
from ..common.guards import login_required
from ..common.views import error_message, flash_error, form_errors, send_pdf, send_xlsx, uploaded_file
from ..container import Container
from ..core.exceptions import ApiError, ValidationError
from ..reports import excel
from ..reports.pdf.attendance import build_attendance_report_pdf

COUNT_PREFIX = "count__"


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def companies() -> list:
        try:
            return container.company_service.all_companies()
        except ApiError as e:
            flash_error(e, "warning", status_aware=True)
            return []

    def company_name(company_list: list, company_id: str) -> str:
        return next((c.name for c in company_list if c.id == company_id), "")

    def selection() -> tuple[str, str]:
        company_id = request.values.get("companyId", "").strip()
        month = request.values.get("month", "").strip() or month_key(now_local().date())
        return company_id, month

    def back_to_marking(company_id: str, month: str):
        return redirect(url_for("attendance", companyId=company_id or None, month=month))

    @app.route("/attendance", endpoint="attendance")
    @login_required
    def attendance():
        company_id, month = selection()
        active = None
        if company_id:
            try:
                active = service.active_employees(company_id, month)
            except (ValidationError, ApiError) as e:
                flash_error(e)
        return render_template(
            "attendance/mark.html",
            companies=companies(),
            company_id=company_id,
            month=month,
            active=active,
            count_prefix=COUNT_PREFIX,
            active_page="attendance",
        )

    @app.route("/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        company_id, month = selection()
        try:
            service.mark(request.form)
            flash("Attendance marked successfully", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return back_to_marking(company_id, month)

    @app.route("/attendance/bulk", methods=["POST"], endpoint="bulk_attendance")
    @login_required
    def bulk_attendance():
        company_id, month = selection()
        counts = {
            key[len(COUNT_PREFIX):]: value for key, value in request.form.items() if key.startswith(COUNT_PREFIX)
        }
        try:
            result = service.bulk_mark(company_id, month, counts)
            flash(f"Attendance saved: {result.created} created, {result.failed} failed", "success")
            for error in result.errors:
                flash(error, "warning")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return back_to_marking(company_id, month)

    @app.route("/attendance/import", methods=["POST"], endpoint="import_attendance")
    @login_required
    def import_attendance():
        company_id, month = selection()
        try:
            parsed, result = service.import_excel(company_id, month, uploaded_file("file"))
            flash(
                f"Imported {len(parsed.rows)} row(s): {result.created} created, {result.failed} failed",
                "success",
            )
            for error in result.errors:
                flash(error, "warning")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return back_to_marking(company_id, month)

    @app.route("/attendance/template.xlsx", endpoint="attendance_template")
    @login_required
    def attendance_template():
        company_id, month = selection()
        try:
            active = service.active_employees(company_id, month)
        except (ValidationError, ApiError) as e:
            flash_error(e)
            return back_to_marking(company_id, month)
        if not active.employees:
            flash("No active employees found for this company and month", "warning")
            return back_to_marking(company_id, month)
        name = active.company_name or company_name(companies(), company_id)
        return send_xlsx(
            excel.attendance_template_workbook(active.employees),
            excel.attendance_template_filename(name, month),
        )

    @app.route("/attendance/upload", methods=["GET", "POST"], endpoint="upload_attendance")
    @login_required
    def upload_attendance():
        company_id, month = selection()
        errors: dict[str, str] = {}
        result = None
        if request.method == "POST":
            try:
                result = service.upload(company_id, month, uploaded_file("file"))
                flash(result.message or "Attendance sheet processed", "success")
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)
        return render_template(
            "attendance/upload.html",
            companies=companies(),
            company_id=company_id,
            month=month,
            result=result,
            errors=errors,
            active_page="attendance",
        )

    @app.route("/attendance/records", endpoint="attendance_records")
    @login_required
    def attendance_records():
        company_id, month = selection()
        records = []
        if company_id:
            try:
                records = service.records_for(company_id, month)
            except (ValidationError, ApiError) as e:
                flash_error(e)
        return render_template(
            "attendance/records.html",
            companies=companies(),
            company_id=company_id,
            month=month,
            records=records,
            active_page="attendance",
        )

    @app.route("/attendance/records/<record_id>/delete", methods=["POST"], endpoint="delete_attendance")
    @login_required
    def delete_attendance(record_id: str):
        company_id, month = selection()
        try:
            service.delete(record_id)
            flash("Attendance record deleted", "success")
        except ApiError as e:
            flash_error(e)
        return redirect(url_for("attendance_records", companyId=company_id or None, month=month))

    @app.route("/attendance/records/bulk-delete", methods=["POST"], endpoint="bulk_delete_attendance")
    @login_required
    def bulk_delete_attendance():
        company_id, month = selection()
        try:
            count = service.delete_many(request.form.getlist("ids"))
            flash(f"{count} attendance record(s) deleted", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return redirect(url_for("attendance_records", companyId=company_id or None, month=month))

    def report_data():
        company_id = request.args.get("companyId", "").strip()
        month = request.args.get("month", "").strip()
        company_list = companies()
        months: list[str] = []
        records = []
        summary = None
        if company_id:
            try:
                months = service.available_months(company_id)
                month = month or (months[0] if months else "")
                if month:
                    records, summary = service.report(company_id, month)
            except (ValidationError, ApiError) as e:
                flash_error(e)
        return company_list, company_id, month, months, records, summary

    @app.route("/attendance/reports", endpoint="attendance_reports")
    @login_required
    def attendance_reports():
        company_list, company_id, month, months, records, summary = report_data()
        return render_template(
            "attendance/reports.html",
            companies=company_list,
            company_id=company_id,
            company_name=company_name(company_list, company_id),
            month=month,
            months=months,
            records=records,
            summary=summary,
            active_page="attendance",
        )

    @app.route("/attendance/reports/export.<fmt>", endpoint="export_attendance_report")
    @login_required
    def export_attendance_report(fmt: str):
        company_list, company_id, month, _months, records, _summary = report_data()
        if not records:
            flash("No attendance records to export", "warning")
            return redirect(url_for("attendance_reports", companyId=company_id or None, month=month or None))
        name = company_name(company_list, company_id)
        if fmt == "pdf":
            content = build_attendance_report_pdf(
                records, brand_name=app.config.get("COMPANY_BRAND_NAME", ""), company_name=name, month=month
            )
            return send_pdf(content, f"Attendance_Report_{timestamp_for_filename()}.pdf")
        return send_xlsx(
            excel.attendance_report_workbook(records, name, month), excel.export_filename("Attendance_Report")
        )

    @app.route("/attendance/sheets", methods=["GET", "POST"], endpoint="attendance_sheets")
    @login_required
    def attendance_sheets():
        company_id = request.values.get("companyId", "").strip()
        month = request.values.get("month", "").strip()
        errors: dict[str, str] = {}
        if request.method == "POST":
            try:
                service.upload_sheet(company_id, month, uploaded_file("file"))
                flash("Attendance sheet uploaded successfully", "success")
                return redirect(url_for("attendance_sheets", companyId=company_id, month=month))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)
        sheets = []
        try:
            sheets = service.sheets(company_id or None, month or None)
        except ApiError as e:
            flash_error(e)
        return render_template(
            "attendance/sheets.html",
            companies=companies(),
            company_id=company_id,
            month=month,
            sheets=sheets,
            errors=errors,
            active_page="attendance",
        )

    @app.route("/attendance/sheets/<sheet_id>/delete", methods=["POST"], endpoint="delete_attendance_sheet")
    @login_required
    def delete_attendance_sheet(sheet_id: str):
        try:
            service.delete_sheet(sheet_id)
            flash("Attendance sheet deleted", "success")
        except ApiError as e:
            flash_error(e)
        return redirect(url_for("attendance_sheets"))

    @app.route("/api/attendance/exists", endpoint="attendance_exists")
    @login_required
    def attendance_exists():
        employee_id = request.args.get("employeeId", "")
        month = request.args.get("month", "")
        return jsonify({"exists": service.check_attendance_exists(employee_id, month)})

    def record_rows(records: list) -> list[dict]:
        return [
            {
                "id": r.id,
                "employeeId": r.employee_id,
                "employeeName": r.employee_name,
                "companyId": r.company_id,
                "month": r.month,
                "presentCount": r.present_count,
            }
            for r in records
        ]

    @app.route("/api/attendance", endpoint="attendance_list")
    @login_required
    def attendance_list():
        try:
            return jsonify(record_rows(service.list(request.args)))
        except ApiError as e:
            return jsonify({"error": error_message(e)}), 502

    @app.route("/api/attendance/company/<company_id>", endpoint="attendance_company_month")
    @login_required
    def attendance_company_month(company_id: str):
        try:
            return jsonify(record_rows(service.company_month(company_id, request.args.get("month", ""))))
        except ValidationError as e:
            return jsonify({"error": error_message(e), "errors": form_errors(e)}), 400
        except ApiError as e:
            return jsonify({"error": error_message(e)}), 502

    @app.route("/api/attendance/stats", endpoint="attendance_stats")
    @login_required
    def attendance_stats():
        try:
            return jsonify(service.stats(request.args))
        except ApiError as e:
            return jsonify({"error": error_message(e)}), 502

    @app.route("/api/attendance/reports", endpoint="attendance_report_data")
    @login_required
    def attendance_report_data():
        try:
            return jsonify(service.reports(request.args))
        except ApiError as e:
            return jsonify({"error": error_message(e)}), 502
