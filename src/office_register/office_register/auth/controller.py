from __future__ import annotations

from functools import wraps

from flask import Flask

from ..common.http import json_payload, ok
from ..container import Container


def admin_required(container: Container):
    """Decorator factory: the wrapped view runs only with an admin session."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            container.auth_service.require_admin()
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = json_payload()
        s_admin = container.auth_service.login(str(data.get("email", "")), str(data.get("password", "")))
        return ok(admin=s_admin.to_dict(), message="Logged in")

    @app.route("/api/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        container.auth_service.logout()
        return ok(message="Logged out")

    @app.route("/api/admin/session", methods=["GET"], endpoint="admin_session")
    def admin_session():
        current = container.auth_service.current_session()
        return ok(is_authenticated=current is not None, admin=current.to_dict() if current else None)
