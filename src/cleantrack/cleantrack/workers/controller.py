from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import json_body, session_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = session_required(container.sessions)

    @app.route("/api/workers", methods=["GET"], endpoint="api_workers")
    @login_required
    def list_workers():
        items = container.worker_service.list_for_scope(scope=g.live.current_scope())
        return jsonify({"workers": to_json(items)})

    @app.route("/api/workers", methods=["POST"], endpoint="api_create_worker")
    @login_required
    def create_worker():
        body = json_body()
        worker = container.worker_service.create(
            scope=g.live.current_scope(),
            display_name=body.get("display_name", ""),
            password=body.get("password", ""),
            avatar=body.get("avatar", ""),
        )
        return jsonify({"worker": to_json(worker)}), 201

    @app.route("/api/workers/<worker_id>", methods=["PATCH"], endpoint="api_update_worker")
    @login_required
    def update_worker(worker_id: str):
        body = json_body()
        worker = container.worker_service.update(
            scope=g.live.current_scope(),
            worker_id=worker_id,
            display_name=body.get("display_name"),
            password=body.get("password"),
            avatar=body.get("avatar"),
        )
        return jsonify({"worker": to_json(worker)})

    @app.route("/api/workers/<worker_id>", methods=["DELETE"], endpoint="api_delete_worker")
    @login_required
    def delete_worker(worker_id: str):
        container.worker_service.delete(scope=g.live.current_scope(), worker_id=worker_id)
        return jsonify({"ok": True})
