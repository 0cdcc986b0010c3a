from __future__ import annotations

import importlib
import logging
import sys
from datetime import timedelta
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, flash, redirect, render_template, session, url_for
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.datetime_utils import month_label
from .common.formatting import format_currency, format_date, input_date, or_na
from .common.guards import current_user, render_forbidden
from .common.pagination import page_numbers
from .companies.controller import register as register_companies
from .config import get_settings_module
from .container import build_container
from .core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from .dashboard.controller import register as register_dashboard
from .departments.controller import register as register_departments
from .designations.controller import register as register_designations
from .employees.controller import register as register_employees
from .payroll.controller import register as register_payroll
from .salary_schedules.controller import register as register_salary_schedules

logger = logging.getLogger(__name__)

SETTINGS_KEYS = (
    "SECRET_KEY",
    "DEBUG",
    "TESTING",
    "API_BASE_URL",
    "API_TIMEOUT",
    "LOG_LEVEL",
    "SESSION_DAYS",
    "COMPANY_BRAND_NAME",
    "MAX_UPLOAD_MB",
)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root = logging.getLogger("hrms_portal")
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
    root.propagate = False


def _load_settings(overrides: Optional[dict[str, Any]]) -> dict[str, Any]:
    settings_module = importlib.import_module(get_settings_module())
    settings = {key: getattr(settings_module, key) for key in SETTINGS_KEYS if hasattr(settings_module, key)}
    settings.update(overrides or {})
    return settings


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AuthenticationError)
    def handle_authentication_error(error: AuthenticationError):
        session.clear()
        flash(str(error) or "Your session has expired. Please sign in again.", "warning")
        return redirect(url_for("login"))

    @app.errorhandler(AuthorizationError)
    def handle_authorization_error(error: AuthorizationError):
        return render_forbidden()

    @app.errorhandler(NotFoundError)
    def handle_missing_record(error: NotFoundError):
        return render_template("error.html", code=404, message=str(error) or "The requested resource was not found."), 404

    @app.errorhandler(404)
    def handle_not_found(error):
        return render_template("error.html", code=404, message="Page not found."), 404

    @app.errorhandler(413)
    def handle_too_large(error):
        message = f"File size must be less than {app.config.get('MAX_UPLOAD_MB', 10)}MB"
        return render_template("error.html", code=413, message=message), 413

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled error")
        return render_template("error.html", code=500, message="An unexpected error occurred."), 500


def create_app(settings_override: Optional[dict[str, Any]] = None, *, container=None) -> Flask:
    load_dotenv(override=False)
    settings = _load_settings(settings_override)
    configure_logging(str(settings.get("LOG_LEVEL", "INFO")))

    app = Flask(__name__)
    app.config.update(settings)
    app.secret_key = settings["SECRET_KEY"]
    app.config["MAX_CONTENT_LENGTH"] = int(settings.get("MAX_UPLOAD_MB", 10)) * 1024 * 1024 + 64 * 1024
    app.permanent_session_lifetime = timedelta(days=int(settings.get("SESSION_DAYS", 7)))

    app.jinja_env.filters["currency"] = format_currency
    app.jinja_env.filters["display_date"] = format_date
    app.jinja_env.filters["month_label"] = month_label
    app.jinja_env.filters["or_na"] = or_na
    app.jinja_env.filters["input_date"] = input_date
    app.jinja_env.globals["page_numbers"] = page_numbers

    @app.context_processor
    def inject_globals():
        return {
            "current_user": current_user(),
            "brand_name": app.config.get("COMPANY_BRAND_NAME", ""),
        }

    container = container or build_container(settings=settings)
    app.extensions["hrms_container"] = container

    register_auth(app, container)
    register_dashboard(app, container)
    register_employees(app, container)
    register_companies(app, container)
    register_departments(app, container)
    register_designations(app, container)
    register_salary_schedules(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    _register_error_handlers(app)

    logger.info("HRMS portal started against %s", settings.get("API_BASE_URL"))
    return app
