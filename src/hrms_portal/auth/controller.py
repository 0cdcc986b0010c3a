from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.guards import login_required
from ..common.views import flash_error, form_errors
from ..container import Container
from ..core.exceptions import ApiError, AuthenticationError, ValidationError
from .model import SessionUser

logger = logging.getLogger(__name__)


def _store_session_user(s_user: SessionUser) -> None:
    session["user_id"] = s_user.user_id
    session["name"] = s_user.name
    session["email"] = s_user.email
    session["role"] = s_user.role.value
    session["department_id"] = s_user.department_id


def _safe_next(target: str | None) -> str:
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return url_for("dashboard")


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    def index():
        if "user_id" in session:
            return redirect(url_for("dashboard"))
        return redirect(url_for("login"))

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        errors: dict[str, str] = {}
        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.login(email, password)

                session.permanent = bool(remember)
                app.permanent_session_lifetime = timedelta(days=int(app.config.get("SESSION_DAYS", 7)))
                _store_session_user(s_user)

                flash("Login successful!", "success")
                return redirect(_safe_next(request.args.get("next")))
            except (ValidationError, AuthenticationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)

        return render_template("auth/login.html", errors=errors, form=request.form)

    @app.route("/signup", methods=["GET", "POST"], endpoint="signup")
    def signup():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form
            try:
                s_user = container.auth_service.signup(
                    name=form.get("name", ""),
                    mobile_number=form.get("mobileNumber", ""),
                    email=form.get("email", ""),
                    password=form.get("password", ""),
                    department_id=form.get("departmentId", ""),
                    role=form.get("role") or None,
                )
                _store_session_user(s_user)
                flash("Account created successfully!", "success")
                return redirect(url_for("dashboard"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)

        try:
            departments = container.department_service.user_departments()
        except ApiError as e:
            logger.warning("Could not load departments for signup: %s", e)
            departments = []
        return render_template("auth/signup.html", errors=errors, form=request.form, departments=departments)

    @app.route("/logout", endpoint="logout")
    def logout():
        container.auth_service.logout()
        session.clear()
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/forgot-password", methods=["GET", "POST"], endpoint="forgot_password")
    def forgot_password():
        errors: dict[str, str] = {}
        if request.method == "POST":
            try:
                message = container.auth_service.forgot_password(request.form.get("email", ""))
                flash(message or "Password reset instructions have been sent to your email.", "success")
                return redirect(url_for("login"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)
        return render_template("auth/forgot_password.html", errors=errors, form=request.form)

    @app.route("/reset-password", methods=["GET", "POST"], endpoint="reset_password")
    def reset_password():
        errors: dict[str, str] = {}
        token = request.values.get("token", "")
        if request.method == "POST":
            try:
                message = container.auth_service.reset_password(
                    reset_token=token,
                    new_password=request.form.get("newPassword", ""),
                    confirm_password=request.form.get("confirmPassword", ""),
                )
                flash(message or "Password reset successfully. Please sign in.", "success")
                return redirect(url_for("login"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)
        return render_template("auth/reset_password.html", errors=errors, token=token)

    @app.route("/settings/profile", methods=["GET", "POST"], endpoint="settings_profile")
    @login_required
    def settings_profile():
        errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form
            try:
                user = container.auth_service.update_profile(
                    session["user_id"],
                    name=form.get("name", ""),
                    mobile_number=form.get("mobileNumber", ""),
                    email=form.get("email", ""),
                )
                session["name"] = user.name or form.get("name", "").strip()
                session["email"] = user.email or form.get("email", "").strip()
                flash("Profile updated successfully.", "success")
                return redirect(url_for("settings_profile"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)

        user = None
        departments = []
        try:
            user = container.auth_service.current_user()
            departments = container.department_service.user_departments()
        except ApiError as e:
            flash_error(e, "warning")
        return render_template(
            "auth/profile.html",
            user=user,
            departments=departments,
            errors=errors,
            active_page="settings",
        )

    @app.route("/settings/security", methods=["GET", "POST"], endpoint="settings_security")
    @login_required
    def settings_security():
        errors: dict[str, str] = {}
        if request.method == "POST":
            try:
                message = container.auth_service.change_password(
                    old_password=request.form.get("oldPassword", ""),
                    new_password=request.form.get("newPassword", ""),
                    confirm_password=request.form.get("confirmPassword", ""),
                )
                flash(message or "Password changed successfully.", "success")
                return redirect(url_for("settings_security"))
            except (ValidationError, ApiError) as e:
                errors = form_errors(e)
                flash_error(e)
        return render_template(
            "auth/security.html",
            errors=errors,
            active_page="settings",
        )
