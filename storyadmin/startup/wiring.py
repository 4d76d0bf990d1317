"""Application initialization / wiring.

Orchestrates: DB init, translations, route & request hook registration.

Usage:
    flask --app storyadmin.startup.wiring:create_app run
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask
from flask_babel import Babel

from storyadmin import config as app_config
from storyadmin.db import init_engine_once
from storyadmin.routes.inject import register_all as register_routes
from storyadmin.services import auth_service
from storyadmin.utils.logging import get_logger

LOG = get_logger("storyadmin.startup")


def _configure_translations(app: Any) -> None:
    if "babel" in getattr(app, "extensions", {}):
        return
    app.config.setdefault("BABEL_DEFAULT_LOCALE", "en")
    Babel(app)


def init_app(app: Any) -> None:
    LOG.debug("init_app starting")
    init_engine_once()
    LOG.debug("DB engine initialized")
    _configure_translations(app)
    register_routes(app)
    if not auth_service.credentials_configured():
        LOG.warning("Admin credentials are not configured; every login will be rejected.")
    LOG.info("App startup wiring complete config=%s", app_config.summarize_runtime_config())


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Flask app."""
    app = Flask("storyadmin")
    app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024
    if test_config:
        app.config.update(test_config)
    init_app(app)
    return app


__all__ = ["create_app", "init_app"]
