from __future__ import annotations

from flask import Flask

from ..common.http import json_payload, ok
from ..common.validators import require_email, require_non_empty
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.checkin_service

    @app.route("/api/otp/request", methods=["POST"], endpoint="otp_request")
    def otp_request():
        email = require_email(str(json_payload().get("email", "")))
        result = svc.request_code(email)
        body = result.to_dict()
        body.pop("success", None)
        return ok(**body)

    @app.route("/api/otp/resend", methods=["POST"], endpoint="otp_resend")
    def otp_resend():
        email = require_email(str(json_payload().get("email", "")))
        result = svc.resend_code(email)
        body = result.to_dict()
        body.pop("success", None)
        return ok(**body)

    @app.route("/api/checkin/verify", methods=["POST"], endpoint="checkin_verify")
    def checkin_verify():
        data = json_payload()
        email = require_email(str(data.get("email", "")))
        code = require_non_empty(str(data.get("otp") or data.get("code") or ""), "OTP")
        record = svc.verify_and_sign_in(email, code)
        current = svc.current_session()
        return ok(
            message=f"Welcome, {record.member_name}! You are signed in.",
            visit=record.to_dict(),
            session=current.to_dict() if current else None,
        )

    @app.route("/api/checkin/sign-out", methods=["POST"], endpoint="checkin_sign_out")
    def checkin_sign_out():
        record = svc.sign_out()
        return ok(message=f"Goodbye, {record.member_name}! You are signed out.", visit=record.to_dict())

    @app.route("/api/checkin/session", methods=["GET"], endpoint="checkin_session")
    def checkin_session():
        current = svc.current_session()
        return ok(is_signed_in=current is not None, session=current.to_dict() if current else None)
