from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.concurrency import run_together
from ..common.datetime_utils import timestamp_for_filename
from ..common.guards import login_required
from ..common.pagination import Page
from ..common.views import flash_error, form_errors, page_args, send_pdf
from ..container import Container
from ..core.enums import (
    Category,
    DocumentType,
    EducationQualification,
    EmployeeStatus,
    EmployeeTitle,
    Gender,
    SalaryCategory,
    SalarySubCategory,
)
from ..core.exceptions import ApiError, ValidationError
from ..reports.pdf.employee import build_employee_profile_pdf
from .service import SEARCH_PARAMS

logger = logging.getLogger(__name__)

EDIT_SECTIONS = ("basic", "contact", "bank", "additional", "reference", "salary", "documents", "employment")

CHOICES = {
    "titles": [t.value for t in EmployeeTitle],
    "genders": [g.value for g in Gender],
    "categories": [c.value for c in Category],
    "qualifications": [q.value for q in EducationQualification],
    "statuses": [s.value for s in EmployeeStatus],
    "document_types": [d.value for d in DocumentType],
    "salary_categories": [c.value for c in SalaryCategory],
    "salary_sub_categories": [s.value for s in SalarySubCategory],
}


def register(app: Flask, container: Container) -> None:
    def lookups() -> dict:
        try:
            companies, designations, departments = run_together(
                container.company_service.all_companies,
                container.designation_service.list_all,
                container.department_service.employee_departments,
            )
        except ApiError as e:
            logger.warning("Could not load employee form lookups: %s", e)
            companies, designations, departments = [], [], []
        return {"companies": companies, "designations": designations, "departments": departments}

    def load_employee(employee_id: str):
        try:
            return container.employee_service.get(employee_id)
        except ApiError as e:
            flash_error(e)
            return None

    def render_search(template: str):
        page, limit = page_args()
        result = Page()
        try:
            result = container.employee_service.search(request.args, page=page, limit=limit)
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return render_template(
            template,
            employees=result,
            filters={k: request.args.get(k, "") for k in SEARCH_PARAMS},
            active_page="employees",
            **lookups(),
            **CHOICES,
        )

    @app.route("/employees", endpoint="employees")
    @login_required
    def employees():
        return redirect(url_for("employee_list"))

    @app.route("/employees/list", endpoint="employee_list")
    @login_required
    def employee_list():
        return render_search("employees/list.html")

    @app.route("/employees/advanced-search", endpoint="employee_advanced_search")
    @login_required
    def employee_advanced_search():
        return render_search("employees/advanced_search.html")

    @app.route("/employees/bulk-delete", methods=["POST"], endpoint="bulk_delete_employees")
    @login_required
    def bulk_delete_employees():
        try:
            count = container.employee_service.delete_many(request.form.getlist("ids"))
            flash(f"{count} employee(s) deleted successfully", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return redirect(request.referrer or url_for("employee_list"))

    @app.route("/employees/add", methods=["GET", "POST"], endpoint="add_employee")
    @login_required
    def add_employee():
        errors: dict[str, str] = {}
        if request.method == "POST":
            try:
                employee = container.employee_service.create(request.form, request.files)
                flash("Employee created successfully", "success")
                if employee.id:
                    return redirect(url_for("view_employee", employee_id=employee.id))
                return redirect(url_for("employee_list"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)
        return render_template(
            "employees/add.html",
            form=request.form,
            errors=errors,
            active_page="employees",
            **lookups(),
            **CHOICES,
        )

    @app.route("/employees/<employee_id>", endpoint="view_employee")
    @login_required
    def view_employee(employee_id: str):
        employee = load_employee(employee_id)
        if employee is None:
            return redirect(url_for("employee_list"))
        histories = list(employee.employment_histories)
        if not histories:
            try:
                histories = container.employee_service.employment_history(employee_id)
            except ApiError as e:
                flash_error(e, "warning")
        attendance = []
        try:
            attendance = container.attendance_service.employee_records(employee_id)
        except ApiError as e:
            flash_error(e, "warning")
        return render_template(
            "employees/view.html",
            employee=employee,
            histories=histories,
            attendance=attendance,
            active_page="employees",
        )

    @app.route("/employees/<employee_id>/edit", endpoint="edit_employee")
    @login_required
    def edit_employee(employee_id: str):
        section = request.args.get("section", "basic")
        if section not in EDIT_SECTIONS:
            section = "basic"
        employee = load_employee(employee_id)
        if employee is None:
            return redirect(url_for("employee_list"))
        histories = []
        if section == "employment":
            try:
                histories = container.employee_service.employment_history(employee_id)
            except ApiError as e:
                flash_error(e, "warning")
        return render_template(
            "employees/edit.html",
            employee=employee,
            section=section,
            sections=EDIT_SECTIONS,
            histories=histories,
            errors={},
            active_page="employees",
            **lookups(),
            **CHOICES,
        )

    @app.route("/employees/<employee_id>/edit/<section>", methods=["POST"], endpoint="update_employee_section")
    @login_required
    def update_employee_section(employee_id: str, section: str):
        messages = {
            "basic": "Basic information updated successfully!",
            "salary": "Salary information updated successfully!",
            "contact": "Contact information updated successfully!",
            "bank": "Bank information updated successfully!",
            "additional": "Additional details updated successfully!",
            "reference": "Reference details updated successfully!",
        }
        if section not in messages:
            flash("Unknown section", "danger")
            return redirect(url_for("edit_employee", employee_id=employee_id))
        try:
            if section == "basic":
                container.employee_service.update_basic_info(employee_id, request.form)
            elif section == "salary":
                container.employee_service.update_salary_info(employee_id, request.form)
            else:
                container.employee_service.update_section(employee_id, section, request.form)
            flash(messages[section], "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return redirect(url_for("edit_employee", employee_id=employee_id, section=section))

    @app.route("/employees/<employee_id>/documents", methods=["POST"], endpoint="upload_employee_document")
    @login_required
    def upload_employee_document(employee_id: str):
        try:
            container.employee_service.upload_document(
                employee_id,
                request.files.get("document"),
                request.form.get("documentType", ""),
            )
            flash("Document uploaded successfully", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return redirect(url_for("edit_employee", employee_id=employee_id, section="documents"))

    @app.route("/employees/<employee_id>/employment-history", methods=["POST"], endpoint="add_employment_history")
    @login_required
    def add_employment_history(employee_id: str):
        try:
            container.employee_service.add_employment_history(employee_id, request.form)
            flash("Employment history added successfully!", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return redirect(url_for("edit_employee", employee_id=employee_id, section="employment"))

    @app.route(
        "/employees/<employee_id>/employment-history/<history_id>",
        methods=["POST"],
        endpoint="update_employment_history",
    )
    @login_required
    def update_employment_history(employee_id: str, history_id: str):
        try:
            container.employee_service.update_employment_history(history_id, request.form)
            flash("Employment history updated successfully!", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return redirect(url_for("edit_employee", employee_id=employee_id, section="employment"))

    @app.route("/employees/<employee_id>/close-employment", methods=["POST"], endpoint="close_employment")
    @login_required
    def close_employment(employee_id: str):
        try:
            active = container.employee_service.active_employment(employee_id)
            container.employee_service.close_employment(
                employee_id,
                request.form,
                joining_date=active.joining_date if active else None,
            )
            flash("Employment closed successfully!", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e)
        return redirect(url_for("view_employee", employee_id=employee_id))

    @app.route("/employees/<employee_id>/delete", methods=["POST"], endpoint="delete_employee")
    @login_required
    def delete_employee(employee_id: str):
        try:
            container.employee_service.delete(employee_id)
            flash("Employee deleted successfully", "success")
        except ApiError as e:
            flash_error(e)
        return redirect(url_for("employee_list"))

    @app.route("/employees/<employee_id>/profile.pdf", endpoint="employee_profile_pdf")
    @login_required
    def employee_profile_pdf(employee_id: str):
        employee = load_employee(employee_id)
        if employee is None:
            return redirect(url_for("employee_list"))
        content = build_employee_profile_pdf(employee, brand_name=app.config.get("COMPANY_BRAND_NAME", ""))
        name = employee.full_name.replace(" ", "_") or "Employee"
        return send_pdf(content, f"{name}_{timestamp_for_filename()}.pdf")
