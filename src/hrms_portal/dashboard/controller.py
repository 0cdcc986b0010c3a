from __future__ import annotations

from flask import Flask, jsonify, render_template, request

from ..common.forms import to_int
from ..common.guards import login_required
from ..common.views import error_message, flash_error
from ..container import Container
from ..core.constants import DEFAULT_DASHBOARD_DAYS_AHEAD
from ..core.exceptions import ApiError, ValidationError
from .model import DashboardReport


def register(app: Flask, container: Container) -> None:
    def days_ahead() -> int:
        return to_int(request.args.get("daysAhead"), DEFAULT_DASHBOARD_DAYS_AHEAD) or DEFAULT_DASHBOARD_DAYS_AHEAD

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        report, counts = DashboardReport(), []
        try:
            report, counts = container.dashboard_service.page_data(days_ahead())
        except (ValidationError, ApiError) as e:
            flash_error(e, status_aware=True)
        return render_template(
            "dashboard/index.html",
            report=report,
            company_counts=counts,
            days_ahead=days_ahead(),
            active_page="dashboard",
        )

    @app.route("/api/dashboard/charts", endpoint="dashboard_charts")
    @login_required
    def dashboard_charts():
        try:
            report = container.dashboard_service.report(days_ahead())
        except (ValidationError, ApiError) as e:
            return jsonify({"error": error_message(e, status_aware=True)}), 502 if isinstance(e, ApiError) else 400
        return jsonify(report.chart_series())

    @app.route("/api/dashboard/attendance", endpoint="dashboard_attendance")
    @login_required
    def dashboard_attendance():
        try:
            data = container.dashboard_service.attendance_stats(
                request.args.get("startDate") or None, request.args.get("endDate") or None
            )
        except ApiError as e:
            return jsonify({"error": error_message(e, status_aware=True)}), 502
        return jsonify(data)

    @app.route("/api/dashboard/payroll", endpoint="dashboard_payroll")
    @login_required
    def dashboard_payroll():
        try:
            data = container.dashboard_service.payroll_stats(
                to_int(request.args.get("year")), to_int(request.args.get("month"))
            )
        except (ValidationError, ApiError) as e:
            return jsonify({"error": error_message(e, status_aware=True)}), 502 if isinstance(e, ApiError) else 400
        return jsonify(data)

    @app.route("/api/dashboard/overview", endpoint="dashboard_overview")
    @login_required
    def dashboard_overview():
        try:
            return jsonify(container.dashboard_service.overview())
        except ApiError as e:
            return jsonify({"error": error_message(e, status_aware=True)}), 502
