from __future__ import annotations

from functools import wraps

from flask import flash, redirect, render_template, request, session, url_for


def current_user() -> dict:
    return {
        "id": session.get("user_id"),
        "name": session.get("name"),
        "email": session.get("email"),
        "role": session.get("role"),
    }


def render_forbidden():
    return render_template("403.html"), 403


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("login", next=request.path))
        return view(*args, **kwargs)

    return wrapper
