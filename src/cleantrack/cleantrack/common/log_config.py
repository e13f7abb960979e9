"""Structured logging setup shared by the app factory and scripts."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict


class JsonLogFormatter(logging.Formatter):
    """Format log records as JSON lines for downstream ingestion."""

    EXTRA_FIELDS = ("component", "department_id", "session", "collection")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited docstring
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for attr in self.EXTRA_FIELDS:
            if hasattr(record, attr):
                payload[attr] = getattr(record, attr)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(settings: Any) -> None:
    """Attach a single handler to the ``cleantrack`` logger.

    Reads ``LOG_LEVEL`` and ``LOG_JSON`` from the settings module.
    """

    logger = logging.getLogger("cleantrack")
    if logger.handlers:
        # Avoid double-configuration when the app factory runs more than once (tests).
        return

    level_name = str(getattr(settings, "LOG_LEVEL", "INFO"))
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if bool(getattr(settings, "LOG_JSON", True)):
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False

    logging.getLogger("mysql.connector").setLevel(logging.WARNING)
