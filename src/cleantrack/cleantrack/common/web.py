"""Flask helpers shared by the JSON controllers."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ValidationError,
)

LOGGER = logging.getLogger("cleantrack.web")

SESSION_KEY = "session_token"

# Never serialized, whatever the model.
HIDDEN_FIELDS = frozenset({"secret_hash"})


def to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_json(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.name not in HIDDEN_FIELDS
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [to_json(v) for v in value]
        return sorted(items) if isinstance(value, (set, frozenset)) else items
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items() if k not in HIDDEN_FIELDS}
    return value


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def flag_arg(name: str) -> bool:
    return (request.args.get(name) or "").strip().lower() in {"1", "true", "yes"}


def session_required(sessions):
    """Resolve the caller's LiveSession into ``g.live`` or fail with 401."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            live = sessions.get(session.get(SESSION_KEY))
            if live is None:
                raise AuthenticationError("Login required")
            g.live = live
            return view(*args, **kwargs)

        return wrapper

    return decorator


def _status_for(error: DomainError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    return 409


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = _status_for(e)
        if status >= 403:
            LOGGER.info("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
        return jsonify({"error": str(e)}), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        LOGGER.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return jsonify({"error": f"Internal error: {e}"}), 500
        return jsonify({"error": "Internal error"}), 500
