from __future__ import annotations

from flask import Flask, render_template

from ..common.guards import login_required
from ..common.views import flash_error
from ..container import Container
from ..core.exceptions import ApiError


def register(app: Flask, container: Container) -> None:
    @app.route("/settings/department", endpoint="settings_departments")
    @login_required
    def settings_departments():
        user_departments, employee_departments = [], []
        try:
            user_departments, employee_departments = container.department_service.both()
        except ApiError as e:
            flash_error(e, status_aware=True)
        return render_template(
            "settings/departments.html",
            user_departments=user_departments,
            employee_departments=employee_departments,
            active_page="settings",
        )
