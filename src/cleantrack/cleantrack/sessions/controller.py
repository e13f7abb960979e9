from __future__ import annotations

from flask import Flask, g, jsonify, session

from ..common.web import SESSION_KEY, json_body, session_required, to_json
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .live import LiveSession


def session_payload(live: LiveSession) -> dict:
    scope = live.manager.scope
    return {
        "identity": to_json(live.identity),
        "selected_department_id": live.selected_department_id,
        "scope": to_json(scope) if scope else None,
    }


def register(app: Flask, container: Container) -> None:
    login_required = session_required(container.sessions)

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        body = json_body()
        try:
            role = Role(str(body.get("role") or ""))
        except ValueError:
            raise ValidationError("Unknown role")

        subject_id = body.get("worker_id") if role == Role.WORKER else body.get("department_id")
        identity = container.auth_service.login(role, password=str(body.get("password") or ""), subject_id=subject_id)

        # A new login always replaces the previous session of this client.
        container.sessions.close(session.get(SESSION_KEY))
        live = container.sessions.open(identity)
        session[SESSION_KEY] = live.token
        return jsonify(session_payload(live))

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        container.sessions.close(session.pop(SESSION_KEY, None))
        return jsonify({"ok": True})

    @app.route("/api/directory/workers", methods=["GET"], endpoint="api_worker_directory")
    def worker_directory():
        return jsonify({"workers": to_json(container.worker_directory.list_entries())})

    @app.route("/api/session", methods=["GET"], endpoint="api_session")
    @login_required
    def current_session():
        g.live.current_scope()
        return jsonify(session_payload(g.live))

    @app.route("/api/state", methods=["GET"], endpoint="api_state")
    @login_required
    def state():
        live: LiveSession = g.live
        live.current_scope()
        snapshot = live.state
        return jsonify(
            {
                **session_payload(live),
                "version": snapshot.version,
                "stale": snapshot.stale,
                "collections": {name: to_json(snapshot.get(name)) for name in snapshot.collections()},
            }
        )

    @app.route("/api/resync", methods=["POST"], endpoint="api_resync")
    @login_required
    def resync():
        live: LiveSession = g.live
        live.current_scope()
        live.manager.resync()
        return jsonify({"stale": live.state.stale, "version": live.state.version})
