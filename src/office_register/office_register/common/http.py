from __future__ import annotations

import uuid
from typing import Any, Dict

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.enums import ErrorCode
from ..core.exceptions import DomainError
from ..logging.utils import get_app_logger

logger = get_app_logger(__name__)

ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.INACTIVE: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.EXPIRED: 410,
    ErrorCode.DELIVERY_FAILURE: 502,
    ErrorCode.STORE_ERROR: 503,
}


def json_payload() -> Dict[str, Any]:
    """Request body as a dict; form posts are accepted too."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def ok(status: int = 200, **data):
    body = {"success": True}
    body.update(data)
    return jsonify(body), status


def error_response(code: ErrorCode | str, message: str, status: int):
    code_s = code.value if isinstance(code, ErrorCode) else str(code)
    return jsonify({"success": False, "code": code_s, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    @app.after_request
    def _echo_request_id(response):
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers["X-Request-ID"] = rid
        return response

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        status = ERROR_STATUS.get(e.code, 400)
        if status >= 500:
            logger.warning(f"request_failed | code={e.code.value} path={request.path} message={e.message}")
        return error_response(e.code, e.message, status)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return error_response(e.name.upper().replace(" ", "_"), e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception(f"unhandled_error | path={request.path}")
        return error_response("INTERNAL_ERROR", "Something went wrong, please try again", 500)
