from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.guards import login_required
from ..common.views import flash_error, form_errors
from ..container import Container
from ..core.exceptions import ApiError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/settings/designation", methods=["GET", "POST"], endpoint="settings_designations")
    @login_required
    def settings_designations():
        errors: dict[str, str] = {}
        if request.method == "POST":
            try:
                designation = container.designation_service.create(request.form.get("name", ""))
                flash(f"Designation '{designation.name or request.form.get('name', '').strip()}' created.", "success")
                return redirect(url_for("settings_designations"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e, status_aware=True)

        designations = []
        try:
            designations = container.designation_service.list_all()
        except ApiError as e:
            flash_error(e, status_aware=True)
        return render_template(
            "settings/designations.html",
            designations=designations,
            errors=errors,
            active_page="settings",
        )

    @app.route("/settings/designation/<designation_id>/delete", methods=["POST"], endpoint="delete_designation")
    @login_required
    def delete_designation(designation_id: str):
        try:
            container.designation_service.delete(designation_id)
            flash("Designation deleted.", "success")
        except ApiError as e:
            flash_error(e, status_aware=True)
        return redirect(url_for("settings_designations"))
