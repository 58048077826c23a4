from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_setup import configure_logging
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .reports.controller import register as register_reports
from .uploads.controller import register as register_uploads

logger = logging.getLogger(__name__)

_SETTING_NAMES = ("SECRET_KEY", "DATABASE_URL", "MAX_UPLOAD_MB", "LOG_LEVEL", "DEBUG", "AUTO_INIT_DB")


def load_settings(overrides: Optional[dict] = None) -> dict:
    """Settings from the module chosen by APP_ENV, with optional overrides on top."""
    load_dotenv(override=False)
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)

    settings = {name: getattr(module, name, None) for name in _SETTING_NAMES}
    settings["SETTINGS_MODULE"] = settings_module
    settings.update(overrides or {})
    return settings


def create_app(overrides: Optional[dict] = None) -> Flask:
    settings = load_settings(overrides)
    configure_logging(settings.get("LOG_LEVEL") or "INFO")

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))

    container = build_container(
        database_url=str(settings["DATABASE_URL"]),
        max_upload_bytes=int(settings.get("MAX_UPLOAD_MB") or 10) * 1024 * 1024,
    )
    app.extensions["timeclock"] = container

    logger.info("settings=%s db=%s", settings["SETTINGS_MODULE"], container.conn.engine.url.render_as_string())
    if settings.get("AUTO_INIT_DB"):
        apply_schema(container.conn)
        logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    register_employees(app, container)
    register_uploads(app, container)
    register_reports(app, container)

    return app
