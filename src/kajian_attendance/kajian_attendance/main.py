from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.log_setup import setup_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .invitations.controller import register as register_invitations
from .participants.controller import register as register_participants
from .sessions.controller import register as register_sessions
from .settings.controller import register as register_settings
from .web.guards import install_auth_context

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    """Application factory.

    `container` lets tests supply in-memory repositories; otherwise the
    MySQL-backed container is built from the selected settings module.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ADMIN_SIGNUP_CODE"] = getattr(settings, "ADMIN_SIGNUP_CODE", "")

    setup_logging(
        app,
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_dir=getattr(settings, "LOG_DIR", None),
    )
    db_config = dict(getattr(settings, "DB_CONFIG"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            settings_file=getattr(settings, "SETTINGS_FILE", None),
            late_threshold_default=int(getattr(settings, "LATE_THRESHOLD_DEFAULT", 15)),
            provisioning_timeout=float(getattr(settings, "PROVISIONING_TIMEOUT_SECONDS", 30)),
        )

    app.extensions["kajian_container"] = container

    install_auth_context(app, container)
    register_auth(app, container)
    register_sessions(app, container)
    register_participants(app, container)
    register_invitations(app, container)
    register_attendance(app, container)
    register_settings(app, container)

    return app
