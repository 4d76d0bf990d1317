"""Redirect unauthenticated requests under /admin to the login page."""
from __future__ import annotations

from typing import Any

from flask import redirect, request

from storyadmin import config as app_config
from storyadmin.services import session_gate
from storyadmin.utils.logging import get_logger

LOG = get_logger("storyadmin.session_gate")


def register_session_gate(app: Any) -> None:
    if getattr(app, "_storyadmin_session_gate", False):
        return

    @app.before_request
    def _admin_session_gate():
        cookie_value = request.cookies.get(app_config.session_cookie_name())
        decision = session_gate.evaluate(request.path, cookie_value)
        if decision.proceed:
            return None
        return redirect(decision.location)

    setattr(app, "_storyadmin_session_gate", True)
    LOG.debug("Admin session gate registered")


__all__ = ["register_session_gate"]
