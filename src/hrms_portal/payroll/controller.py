from __future__ import annotations

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.concurrency import run_together
from ..common.datetime_utils import month_key, now_local, timestamp_for_filename
from ..common.guards import login_required
from ..common.pagination import Page
from ..common.views import error_message, flash_error, page_args, send_pdf, send_xlsx
from ..container import Container
from ..core.exceptions import ApiError, ValidationError
from ..reports import excel
from ..reports.pdf.payroll import build_company_payroll_pdf, build_employee_payroll_pdf, build_payroll_report_pdf
from .service import admin_input_name, collect_admin_inputs, extract_admin_input_fields

REPORT_TABS = ("company", "employee", "general")
EXPORT_LIMIT = 1000


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    def brand() -> str:
        return app.config.get("COMPANY_BRAND_NAME", "")

    def companies() -> list:
        try:
            return container.company_service.all_companies()
        except ApiError as e:
            flash_error(e, "warning", status_aware=True)
            return []

    def payroll_setup(company_id: str):
        """Company, the fields needing admin input and the employees to fill them for."""
        company, employees = run_together(
            lambda: container.company_service.get(company_id),
            lambda: container.company_service.employees(company_id),
        )
        fields = extract_admin_input_fields(container.company_service.template_config(company))
        return company, fields, employees

    @app.route("/payroll", endpoint="payroll")
    @login_required
    def payroll():
        company_id = request.args.get("companyId", "").strip()
        month = request.args.get("month", "").strip() or month_key(now_local().date())
        company, fields, employees, existing = None, [], [], None
        if company_id:
            try:
                company, fields, employees = payroll_setup(company_id)
                existing = service.by_month(company_id, month)
            except ApiError as e:
                flash_error(e, status_aware=True)
        return render_template(
            "payroll/calculate.html",
            companies=companies(),
            company_id=company_id,
            month=month,
            company=company,
            fields=fields,
            employees=employees,
            existing=existing,
            input_name=admin_input_name,
            active_page="payroll",
        )

    @app.route("/payroll/calculate", methods=["POST"], endpoint="calculate_payroll")
    @login_required
    def calculate_payroll():
        company_id = request.form.get("companyId", "").strip()
        month = request.form.get("month", "").strip()
        try:
            admin_inputs = {}
            if company_id:
                _company, fields, employees = payroll_setup(company_id)
                admin_inputs = collect_admin_inputs(request.form, [e.id for e in employees], fields)
            calculation = service.calculate(company_id, month, admin_inputs)
        except (ValidationError, ApiError) as e:
            flash_error(e, status_aware=isinstance(e, ApiError))
            return redirect(url_for("payroll", companyId=company_id or None, month=month or None))
        return render_template(
            "payroll/review.html",
            calculation=calculation,
            summary=calculation.summary,
            calculation_json=service.dump_calculation(calculation),
            active_page="payroll",
        )

    @app.route("/payroll/finalize", methods=["POST"], endpoint="finalize_payroll")
    @login_required
    def finalize_payroll():
        try:
            calculation = service.load_calculation(request.form.get("calculation"))
            count = service.finalize(calculation)
            flash(f"Payroll finalized for {count} employee(s)", "success")
            return redirect(url_for("payroll_reports", tab="company", companyId=calculation.company_id))
        except (ValidationError, ApiError) as e:
            flash_error(e, status_aware=isinstance(e, ApiError))
        return redirect(url_for("payroll"))

    def company_report():
        company_id = request.args.get("companyId", "").strip()
        page, limit = page_args()
        if not company_id:
            return None
        return service.past(company_id, page=page, limit=limit)

    def employee_report():
        employee_id = request.args.get("employeeId", "").strip()
        if not employee_id:
            return []
        return service.employee_report(
            employee_id,
            request.args.get("companyId") or None,
            request.args.get("startMonth") or None,
            request.args.get("endMonth") or None,
        )

    @app.route("/payroll/reports", endpoint="payroll_reports")
    @login_required
    def payroll_reports():
        tab = request.args.get("tab", "company")
        if tab not in REPORT_TABS:
            tab = "company"
        past, employee_records, report = None, [], Page()
        try:
            if tab == "company":
                past = company_report()
            elif tab == "employee":
                employee_records = employee_report()
            else:
                page, limit = page_args()
                report = service.report(request.args, page=page, limit=limit)
        except (ValidationError, ApiError) as e:
            flash_error(e, status_aware=isinstance(e, ApiError))
        return render_template(
            "payroll/reports.html",
            tab=tab,
            tabs=REPORT_TABS,
            companies=companies(),
            filters=request.args,
            past=past,
            employee_records=employee_records,
            report=report,
            active_page="payroll",
        )

    @app.route("/payroll/reports/<tab>/export.<fmt>", endpoint="export_payroll_report")
    @login_required
    def export_payroll_report(tab: str, fmt: str):
        back = redirect(url_for("payroll_reports", **{**request.args.to_dict(), "tab": tab}))
        try:
            if tab == "company":
                past = company_report()
                if past is None or not past.months:
                    flash("No payroll records to export", "warning")
                    return back
                name = past.company_name or "Company"
                if fmt == "pdf":
                    content = build_company_payroll_pdf(past.months, brand_name=brand(), company_name=name)
                    return send_pdf(content, f"{name.replace(' ', '_')}_Payroll_{timestamp_for_filename()}.pdf")
                return send_xlsx(
                    excel.company_payroll_workbook(past.months, name),
                    excel.export_filename(f"{name.replace(' ', '_')}_Payroll"),
                )
            if tab == "employee":
                records = employee_report()
                employee_id = request.args.get("employeeId", "")
            else:
                records = service.report(request.args, page=1, limit=EXPORT_LIMIT).items
                employee_id = ""
        except (ValidationError, ApiError) as e:
            flash_error(e, status_aware=isinstance(e, ApiError))
            return back
        if not records:
            flash("No payroll records to export", "warning")
            return back
        if fmt == "pdf":
            if tab == "employee":
                content = build_employee_payroll_pdf(records, brand_name=brand(), employee_id=employee_id)
                return send_pdf(content, f"Employee_{employee_id}_Payroll_{timestamp_for_filename()}.pdf")
            content = build_payroll_report_pdf(records, brand_name=brand())
            return send_pdf(content, f"Payroll_Report_{timestamp_for_filename()}.pdf")
        return send_xlsx(excel.payroll_report_workbook(records), excel.export_filename("Payroll_Report"))

    @app.route("/api/payroll/stats", endpoint="payroll_stats")
    @login_required
    def payroll_stats():
        try:
            stats = service.stats(
                request.args.get("companyId", ""),
                request.args.get("startMonth") or None,
                request.args.get("endMonth") or None,
            )
        except (ValidationError, ApiError) as e:
            return jsonify({"error": error_message(e, status_aware=True)}), 400
        return jsonify(stats)
