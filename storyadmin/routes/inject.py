"""Route & request hook registration.

Called from startup to register blueprints. The session gate goes first so
it runs before any other `before_request` hook.
"""
from __future__ import annotations
from typing import Any

from .admin_api import register_admin_api
from .admin_pages import register_admin_pages
from .auth import register_auth
from .health import register_health
from .media_public import register_media
from .session_gate import register_session_gate


def register_all(app: Any) -> None:
    register_session_gate(app)
    register_auth(app)
    register_admin_pages(app)
    register_admin_api(app)
    register_media(app)
    register_health(app)


__all__ = ["register_all"]
