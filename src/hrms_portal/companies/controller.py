from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import now_local, timestamp_for_filename
from ..common.guards import login_required
from ..common.pagination import Page
from ..common.views import flash_error, form_errors, page_args, send_pdf
from ..container import Container
from ..core.enums import CompanyStatus, SalaryFieldPurpose, SalaryFieldType
from ..core.exceptions import ApiError, ValidationError
from ..reports.pdf.company import build_company_profile_pdf
from ..reports.pdf.salary_slip import build_salary_slip_preview_pdf
from .salary_template import basic_duty_options

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def brand() -> str:
        return app.config.get("COMPANY_BRAND_NAME", "")

    def company_or_redirect(company_id: str):
        try:
            return container.company_service.get(company_id)
        except ApiError as e:
            flash_error(e, status_aware=True)
            return None

    @app.route("/companies", endpoint="companies")
    @login_required
    def companies():
        page, limit = page_args()
        result = Page()
        try:
            result = container.company_service.search(
                page=page,
                limit=limit,
                search_text=request.args.get("searchText") or None,
                status=request.args.get("status") or None,
                sort_by=request.args.get("sortBy") or None,
                sort_order=request.args.get("sortOrder") or None,
            )
        except ApiError as e:
            flash_error(e, status_aware=True)
        return render_template(
            "companies/list.html",
            companies=result,
            statuses=[s.value for s in CompanyStatus],
            filters=request.args,
            active_page="companies",
        )

    @app.route("/companies/add", methods=["GET", "POST"], endpoint="add_company")
    @login_required
    def add_company():
        errors: dict[str, str] = {}
        if request.method == "POST":
            try:
                company = container.company_service.create(request.form)
                flash("Company created successfully", "success")
                if company.id:
                    return redirect(url_for("company_template", company_id=company.id))
                return redirect(url_for("companies"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e, status_aware=True)
        form = request.form if request.method == "POST" else {
            "status": CompanyStatus.ACTIVE.value,
            "companyOnboardingDate": now_local().date().isoformat(),
        }
        return render_template(
            "companies/form.html",
            form=form,
            errors=errors,
            statuses=[s.value for s in CompanyStatus],
            company=None,
            active_page="companies",
        )

    @app.route("/companies/<company_id>", endpoint="view_company")
    @login_required
    def view_company(company_id: str):
        company = company_or_redirect(company_id)
        if company is None:
            return redirect(url_for("companies"))
        employees = []
        try:
            employees = container.company_service.employees(company_id)
        except ApiError as e:
            flash_error(e, "warning", status_aware=True)
        return render_template(
            "companies/view.html",
            company=company,
            employees=employees,
            config=container.company_service.template_config(company),
            active_page="companies",
        )

    @app.route("/companies/<company_id>/edit", methods=["GET", "POST"], endpoint="edit_company")
    @login_required
    def edit_company(company_id: str):
        errors: dict[str, str] = {}
        company = company_or_redirect(company_id)
        if company is None:
            return redirect(url_for("companies"))
        if request.method == "POST":
            try:
                container.company_service.update(company_id, request.form)
                flash("Company updated successfully", "success")
                return redirect(url_for("view_company", company_id=company_id))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e, status_aware=True)
            form = request.form
        else:
            form = {
                "name": company.name,
                "address": company.address,
                "contactPersonName": company.contact_person_name,
                "contactPersonNumber": company.contact_person_number,
                "status": company.status.value,
                "companyOnboardingDate": company.company_onboarding_date.isoformat() if company.company_onboarding_date else "",
            }
        return render_template(
            "companies/form.html",
            form=form,
            errors=errors,
            statuses=[s.value for s in CompanyStatus],
            company=company,
            active_page="companies",
        )

    @app.route("/companies/<company_id>/delete", methods=["POST"], endpoint="delete_company")
    @login_required
    def delete_company(company_id: str):
        try:
            container.company_service.delete(company_id)
            flash("Company deleted successfully", "success")
        except ApiError as e:
            flash_error(e, status_aware=True)
        return redirect(url_for("companies"))

    @app.route("/companies/<company_id>/terminate", methods=["POST"], endpoint="terminate_company")
    @login_required
    def terminate_company(company_id: str):
        try:
            company = container.company_service.terminate(
                company_id,
                request.form.get("terminationDate"),
                request.form.get("reason", ""),
            )
            flash(f"{company.name or 'Company'} has been terminated successfully.", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, status_aware=True)
        return redirect(url_for("view_company", company_id=company_id))

    @app.route("/companies/<company_id>/template", methods=["GET", "POST"], endpoint="company_template")
    @login_required
    def company_template(company_id: str):
        errors: dict[str, str] = {}
        if request.method == "POST":
            action = request.form.get("action", "save")
            try:
                if action == "add_field":
                    container.company_service.add_custom_field(
                        company_id,
                        {
                            "key": request.form.get("key", ""),
                            "label": request.form.get("label", ""),
                            "type": request.form.get("type", ""),
                            "purpose": request.form.get("purpose", ""),
                            "description": request.form.get("description", ""),
                            "defaultValue": request.form.get("defaultValue", ""),
                            "requiresAdminInput": bool(request.form.get("requiresAdminInput")),
                            "requireRemarks": bool(request.form.get("requireRemarks")),
                            "options": request.form.get("options", "").split(","),
                        },
                        editing_key=request.form.get("editingKey") or None,
                    )
                    flash("Custom field saved", "success")
                elif action == "remove_field":
                    container.company_service.remove_custom_field(company_id, request.form.get("key", ""))
                    flash("Custom field removed", "success")
                else:
                    container.company_service.update_template_toggles(
                        company_id,
                        request.form.getlist("enabled"),
                        request.form.get("basicDuty") or None,
                    )
                    flash("Salary template configuration has been saved successfully", "success")
                return redirect(url_for("company_template", company_id=company_id))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e, status_aware=True)

        company = company_or_redirect(company_id)
        if company is None:
            return redirect(url_for("companies"))
        return render_template(
            "companies/template.html",
            company=company,
            config=container.company_service.template_config(company),
            basic_duty_options=basic_duty_options(),
            field_types=[t.value for t in SalaryFieldType],
            field_purposes=[p.value for p in SalaryFieldPurpose],
            errors=errors,
            form=request.form,
            active_page="companies",
        )

    @app.route("/companies/<company_id>/template/preview.pdf", endpoint="salary_slip_preview")
    @login_required
    def salary_slip_preview(company_id: str):
        company = company_or_redirect(company_id)
        if company is None:
            return redirect(url_for("companies"))
        content = build_salary_slip_preview_pdf(
            container.company_service.template_config(company),
            brand_name=brand(),
            company_name=company.name,
        )
        return send_pdf(content, f"Salary_Slip_Preview_{timestamp_for_filename()}.pdf", inline=True)

    @app.route("/companies/<company_id>/profile.pdf", endpoint="company_profile_pdf")
    @login_required
    def company_profile_pdf(company_id: str):
        company = company_or_redirect(company_id)
        if company is None:
            return redirect(url_for("companies"))
        employee_count = None
        try:
            employee_count = len(container.company_service.employees(company_id))
        except ApiError as e:
            logger.warning("Employee count unavailable for company %s: %s", company_id, e)
        content = build_company_profile_pdf(company, brand_name=brand(), employee_count=employee_count)
        filename = f"{company.name.replace(' ', '_') or 'Company'}_{timestamp_for_filename()}.pdf"
        return send_pdf(content, filename)
