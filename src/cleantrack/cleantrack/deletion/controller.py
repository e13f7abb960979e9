from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.web import session_required, to_json
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    login_required = session_required(container.sessions)

    @app.route("/api/deletion-requests", methods=["GET"], endpoint="api_deletion_requests")
    @login_required
    def list_requests():
        status_s = (request.args.get("status") or "").strip()
        try:
            status = RequestStatus(status_s) if status_s else None
        except ValueError:
            raise ValidationError(f"Unknown status: {status_s}")
        items = container.deletion_workflow.list_requests(scope=g.live.current_scope(), status=status)
        return jsonify({"requests": to_json(items)})

    def _resolve(request_id: str, approve: bool):
        outcome = container.deletion_workflow.resolve(
            scope=g.live.current_scope(),
            request_id=request_id,
            approve=approve,
        )
        return jsonify(
            {
                "request": to_json(outcome.request),
                "applied": outcome.applied,
                "location_deleted": outcome.location_deleted,
            }
        )

    @app.route("/api/deletion-requests/<request_id>/approve", methods=["POST"], endpoint="api_approve_deletion")
    @login_required
    def approve(request_id: str):
        return _resolve(request_id, True)

    @app.route("/api/deletion-requests/<request_id>/reject", methods=["POST"], endpoint="api_reject_deletion")
    @login_required
    def reject(request_id: str):
        return _resolve(request_id, False)
