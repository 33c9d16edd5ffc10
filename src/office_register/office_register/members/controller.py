from __future__ import annotations

from flask import Flask

from ..auth.controller import admin_required
from ..common.http import json_payload, ok
from ..container import Container
from ..logging.utils import get_app_logger

logger = get_app_logger(__name__)


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def register(app: Flask, container: Container) -> None:
    admin_only = admin_required(container)

    @app.route("/api/admin/members", methods=["GET"], endpoint="admin_members")
    @admin_only
    def admin_members():
        members = container.member_service.list_members()
        return ok(members=[m.to_dict() for m in members])

    @app.route("/api/admin/members", methods=["POST"], endpoint="add_member")
    @admin_only
    def add_member():
        data = json_payload()
        member = container.member_service.add_member(
            name=str(data.get("name", "")),
            email=str(data.get("email", "")),
            category=str(data.get("category", "")),
            phone_number=data.get("phone_number"),
            role=data.get("role"),
        )
        issued = container.otp_service.issue(member.email)
        logger.info(f"member_first_otp_issued | member_id={member.member_id} delivered={issued.delivered}")
        return ok(
            201,
            member=member.to_dict(),
            otp_code=issued.code,
            delivered=issued.delivered,
            expires_at=issued.expires_at.isoformat(timespec="seconds"),
            message=f"Member added. {issued.message}",
        )

    @app.route("/api/admin/members/<int:member_id>/active", methods=["POST"], endpoint="set_member_active")
    @admin_only
    def set_member_active(member_id: int):
        data = json_payload()
        if "is_active" in data:
            member = container.member_service.set_active(member_id, is_active=_as_bool(data["is_active"]))
        else:
            member = container.member_service.toggle_active(member_id)
        return ok(member=member.to_dict())

    @app.route("/api/admin/members/<int:member_id>/otp", methods=["POST"], endpoint="regenerate_member_otp")
    @admin_only
    def regenerate_member_otp(member_id: int):
        member = container.member_service.get(member_id)
        result = container.otp_service.resend(member.email)
        logger.info(f"admin_otp_regenerated | member_id={member_id} delivered={result.delivered}")
        body = result.to_dict(include_code=True)
        body.pop("success", None)
        return ok(**body)
