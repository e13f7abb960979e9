from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import json_body, session_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = session_required(container.sessions)

    @app.route("/api/locations", methods=["GET"], endpoint="api_locations")
    @login_required
    def list_locations():
        items = container.location_service.list_for_scope(scope=g.live.current_scope())
        return jsonify({"locations": to_json(items)})

    @app.route("/api/locations", methods=["POST"], endpoint="api_create_location")
    @login_required
    def create_location():
        body = json_body()
        location = container.location_service.create(
            scope=g.live.current_scope(),
            name_en=body.get("name_en", ""),
            name_zh=body.get("name_zh", ""),
            zone=body.get("zone", ""),
            target_daily_frequency=body.get("target_daily_frequency", 1),
        )
        return jsonify({"location": to_json(location)}), 201

    @app.route("/api/locations/<location_id>", methods=["PATCH"], endpoint="api_update_location")
    @login_required
    def update_location(location_id: str):
        body = json_body()
        location = container.location_service.update(
            scope=g.live.current_scope(),
            location_id=location_id,
            name_en=body.get("name_en"),
            name_zh=body.get("name_zh"),
            zone=body.get("zone"),
            target_daily_frequency=body.get("target_daily_frequency"),
        )
        return jsonify({"location": to_json(location)})

    @app.route("/api/locations/<location_id>", methods=["DELETE"], endpoint="api_delete_location")
    @login_required
    def delete_location(location_id: str):
        outcome = container.location_service.remove_location(
            scope=g.live.current_scope(),
            identity=g.live.identity,
            location_id=location_id,
        )
        if outcome.deleted:
            return jsonify({"deleted": True})
        # Manager sessions only queue the removal.
        return jsonify({"deleted": False, "request": to_json(outcome.request)}), 202
