from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import json_body, session_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = session_required(container.sessions)

    @app.route("/api/checkins", methods=["POST"], endpoint="api_check_in")
    @login_required
    def check_in():
        body = json_body()
        event = container.checkin_service.check_in(
            scope=g.live.current_scope(),
            identity=g.live.identity,
            location_id=str(body.get("location_id") or ""),
        )
        return jsonify({"checkin": to_json(event)}), 201

    @app.route("/api/checkins/reset", methods=["POST"], endpoint="api_reset_checkins")
    @login_required
    def reset_checkins():
        removed = container.checkin_service.reset(scope=g.live.current_scope())
        return jsonify({"removed": removed})
