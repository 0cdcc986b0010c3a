from __future__ import annotations

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.forms import to_bool
from ..common.guards import login_required
from ..common.pagination import Page
from ..common.views import error_message, flash_error, form_errors, page_args
from ..container import Container
from ..core.enums import SalarySubCategory
from ..core.exceptions import ApiError, ValidationError
from .service import RATE_CATEGORIES


def _is_active_filter(value: str | None):
    if value in ("true", "false"):
        return value == "true"
    return None


def register(app: Flask, container: Container) -> None:
    def _render_list(errors=None, form=None):
        page, limit = page_args()
        filters = {
            "category": request.args.get("category") or None,
            "sub_category": request.args.get("subCategory") or None,
            "is_active": _is_active_filter(request.args.get("isActive")),
        }
        schedules = Page()
        try:
            schedules = container.salary_schedule_service.list(page=page, limit=limit, **filters)
        except ApiError as e:
            flash_error(e)
        return render_template(
            "settings/salary_schedules.html",
            schedules=schedules,
            categories=RATE_CATEGORIES,
            sub_categories=[s.value for s in SalarySubCategory],
            filters=request.args,
            errors=errors or {},
            form=form or {},
            active_page="settings",
        )

    @app.route("/settings/salary-rate-schedule", methods=["GET", "POST"], endpoint="salary_schedules")
    @login_required
    def salary_schedules():
        if request.method == "POST":
            form = request.form
            try:
                container.salary_schedule_service.create(
                    category=form.get("category", ""),
                    sub_category=form.get("subCategory", ""),
                    rate_per_day=form.get("ratePerDay"),
                    effective_from=form.get("effectiveFrom"),
                    effective_to=form.get("effectiveTo") or None,
                    is_active=to_bool(form.get("isActive", "true")),
                )
                flash("Salary rate schedule created successfully.", "success")
                return redirect(url_for("salary_schedules"))
            except (ValidationError, ApiError) as e:
                flash_error(e)
                return _render_list(errors=form_errors(e), form=form)
        return _render_list()

    @app.route(
        "/settings/salary-rate-schedule/<schedule_id>",
        methods=["GET", "POST"],
        endpoint="edit_salary_schedule",
    )
    @login_required
    def edit_salary_schedule(schedule_id: str):
        errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form
            try:
                container.salary_schedule_service.update(
                    schedule_id,
                    rate_per_day=form.get("ratePerDay"),
                    effective_from=form.get("effectiveFrom") or None,
                    effective_to=form.get("effectiveTo") or None,
                    is_active=to_bool(form.get("isActive")),
                )
                flash("Salary rate schedule updated successfully.", "success")
                return redirect(url_for("salary_schedules"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)

        try:
            schedule = container.salary_schedule_service.get(schedule_id)
        except ApiError as e:
            flash_error(e)
            return redirect(url_for("salary_schedules"))
        return render_template(
            "settings/salary_schedule_edit.html",
            schedule=schedule,
            errors=errors,
            active_page="settings",
        )

    @app.route(
        "/settings/salary-rate-schedule/<schedule_id>/delete",
        methods=["POST"],
        endpoint="delete_salary_schedule",
    )
    @login_required
    def delete_salary_schedule(schedule_id: str):
        try:
            container.salary_schedule_service.delete(schedule_id)
            flash("Salary rate schedule deleted.", "success")
        except ApiError as e:
            flash_error(e)
        return redirect(url_for("salary_schedules"))

    @app.route("/api/salary-rate-schedule/active", endpoint="active_salary_rate")
    @login_required
    def active_salary_rate():
        try:
            schedule = container.salary_schedule_service.active_rate(
                request.args.get("category", ""),
                request.args.get("subCategory", ""),
                request.args.get("date") or None,
            )
        except (ValidationError, ApiError) as e:
            return jsonify({"error": error_message(e)}), 400
        if schedule is None:
            return jsonify({"ratePerDay": None})
        return jsonify({"id": schedule.id, "ratePerDay": schedule.rate_per_day})
