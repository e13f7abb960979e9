from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import flag_arg, json_body, session_required, to_json
from ..container import Container
from ..sessions.controller import session_payload


def register(app: Flask, container: Container) -> None:
    login_required = session_required(container.sessions)

    @app.route("/api/admin/departments", methods=["GET"], endpoint="api_departments")
    @login_required
    def list_departments():
        items = container.department_service.list_all(scope=g.live.current_scope())
        return jsonify({"departments": to_json(items)})

    @app.route("/api/admin/departments", methods=["POST"], endpoint="api_create_department")
    @login_required
    def create_department():
        body = json_body()
        department = container.department_service.create(
            scope=g.live.current_scope(),
            display_name=body.get("display_name", ""),
            owner_name=body.get("owner_name", ""),
            password=body.get("password", ""),
        )
        return jsonify({"department": to_json(department)}), 201

    @app.route("/api/admin/departments/<department_id>", methods=["PATCH"], endpoint="api_update_department")
    @login_required
    def update_department(department_id: str):
        body = json_body()
        department = container.department_service.update(
            scope=g.live.current_scope(),
            department_id=department_id,
            display_name=body.get("display_name"),
            owner_name=body.get("owner_name"),
            password=body.get("password"),
        )
        return jsonify({"department": to_json(department)})

    @app.route("/api/admin/departments/<department_id>", methods=["DELETE"], endpoint="api_delete_department")
    @login_required
    def delete_department(department_id: str):
        container.department_service.delete(
            scope=g.live.current_scope(),
            department_id=department_id,
            purge=flag_arg("purge"),
        )
        return jsonify({"ok": True})

    @app.route("/api/admin/departments/<department_id>/select", methods=["POST"], endpoint="api_select_department")
    @login_required
    def select_department(department_id: str):
        g.live.select_department(department_id)
        return jsonify(session_payload(g.live))

    @app.route("/api/admin/departments/deselect", methods=["POST"], endpoint="api_deselect_department")
    @login_required
    def deselect_department():
        g.live.clear_department()
        return jsonify(session_payload(g.live))
