from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.log_config import configure_logging
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.seed import seed_demo
from .checkins.controller import register as register_checkins
from .compliance.controller import register as register_compliance
from .deletion.controller import register as register_deletion
from .departments.controller import register as register_departments
from .locations.controller import register as register_locations
from .sessions.controller import register as register_sessions
from .workers.controller import register as register_workers

LOGGER = logging.getLogger("cleantrack.app")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(settings)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        container = build_container(settings=settings)
        if container.conn is not None and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn)
            LOGGER.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_demo(container)

    LOGGER.info(
        "Starting with settings=%s store=%s",
        settings_module,
        type(container.store).__name__,
    )
    app.extensions["cleantrack"] = container

    register_error_handlers(app)
    register_sessions(app, container)
    register_departments(app, container)
    register_workers(app, container)
    register_locations(app, container)
    register_checkins(app, container)
    register_compliance(app, container)
    register_deletion(app, container)

    return app
