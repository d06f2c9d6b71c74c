from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_socketio import SocketIO

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, LinkSettings, build_container
from .courses.controller import register as register_courses
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .holidays.controller import register as register_holidays
from .link.controller import register as register_link
from .locations.controller import register as register_locations
from .realtime.socket_events import register as register_socket_events
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. The Socket.IO server is reachable as app.extensions["socketio"]."""

    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    _configure_logging(str(getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO")))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        container = build_container(db_config=db_config, settings=LinkSettings.from_settings(settings))

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=REPO_ROOT / "database" / "schema.sql")
            ensure_admin_user(
                container.conn,
                username=str(getattr(settings, "ADMIN_USERNAME", "admin")),
                password=str(getattr(settings, "ADMIN_PASSWORD", "admin123")),
            )
            logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    socketio = SocketIO(
        app,
        async_mode=getattr(settings, "SOCKETIO_ASYNC_MODE", "threading"),
        cors_allowed_origins=getattr(settings, "CORS_ALLOWED_ORIGINS", None),
    )
    app.extensions["container"] = container

    register_users(app, container)
    register_courses(app, container)
    register_locations(app, container)
    register_link(app, container)
    register_attendance(app, container)
    register_holidays(app, container)
    register_students(app, container)
    register_socket_events(socketio, container)

    return app


def run() -> None:
    app = create_app()
    app.extensions["socketio"].run(app, host="0.0.0.0", port=5000, debug=app.config["DEBUG"], allow_unsafe_werkzeug=True)
