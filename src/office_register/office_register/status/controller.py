from __future__ import annotations

import json

from flask import Flask, Response, request

from ..auth.controller import admin_required
from ..common.http import ok
from ..container import Container
from ..core.exceptions import DomainError
from ..logging.utils import get_app_logger

logger = get_app_logger(__name__)

KEEPALIVE_SECONDS = 15


def _sse(event: str, payload) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


def register(app: Flask, container: Container) -> None:
    admin_only = admin_required(container)

    @app.route("/api/admin/status", methods=["GET"], endpoint="admin_status")
    @admin_only
    def admin_status():
        rows = container.status_projection.list_with_status(query=request.args.get("q"))
        return ok(members=[r.to_dict() for r in rows])

    @app.route("/api/admin/status/signed-in", methods=["GET"], endpoint="admin_signed_in")
    @admin_only
    def admin_signed_in():
        rows = container.status_projection.signed_in_members()
        return ok(members=[r.to_dict() for r in rows], count=len(rows))

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @admin_only
    def admin_stats():
        return ok(stats=container.status_projection.stats().to_dict())

    @app.route("/api/admin/status/stream", methods=["GET"], endpoint="admin_status_stream")
    @admin_only
    def admin_status_stream():
        query = request.args.get("q")

        def generate():
            view = container.open_status_view(query=query, deferred=True)
            try:
                yield _sse("status", [r.to_dict() for r in view.rows])
                while True:
                    if not view.wait_for_change(KEEPALIVE_SECONDS):
                        yield ": keepalive\n\n"
                        continue
                    try:
                        rows = view.refresh()
                    except DomainError as e:
                        logger.warning(f"status_stream_refresh_failed | code={e.code.value} message={e.message}")
                        yield _sse("error", {"code": e.code.value, "message": e.message})
                        continue
                    yield _sse("status", [r.to_dict() for r in rows])
            finally:
                # client went away: GeneratorExit lands here
                view.close()
                logger.info("status_stream_closed")

        return Response(generate(), mimetype="text/event-stream", headers={"Cache-Control": "no-cache"})
