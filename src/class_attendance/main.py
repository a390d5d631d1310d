from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import (
    AlreadyCheckedOut,
    DomainError,
    NotEnrolled,
    RecordNotFound,
    SessionNotFound,
    StoreError,
)
from .database.bootstrap import SCHEMA_PATH, apply_schema, list_tables
from .reports.controller import register as register_reports
from .settings import get_settings_module

# Anything not listed is a client error (400).
STATUS_BY_ERROR: dict[type, int] = {
    SessionNotFound: 404,
    RecordNotFound: 404,
    NotEnrolled: 403,
    AlreadyCheckedOut: 409,
    StoreError: 503,
}


def status_for(error: DomainError) -> int:
    for error_type in type(error).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            app.logger.error("Store failure: %s", error.message)
        return jsonify({"success": False, **error.to_dict()}), status


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            checkout_grace_minutes=int(getattr(settings, "CHECKOUT_GRACE_MINUTES", 15)),
        )

    register_error_handlers(app)
    register_attendance(app, container)
    register_reports(app, container)

    return app
