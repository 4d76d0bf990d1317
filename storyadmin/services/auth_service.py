"""Admin credential checks and session cookie settings."""
from __future__ import annotations

import hmac
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash

from storyadmin import config as app_config
from storyadmin.services.session_gate import SESSION_TRUE_VALUE
from storyadmin.utils.logging import get_logger

LOG = get_logger("storyadmin.auth")


def credentials_configured() -> bool:
    return bool(app_config.admin_username() and (app_config.admin_password_hash() or app_config.admin_password()))


def _matches(expected: str, given: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), given.encode("utf-8"))


def verify_credentials(username: Optional[str], password: Optional[str]) -> bool:
    if not isinstance(username, str) or not isinstance(password, str):
        return False
    expected_user = app_config.admin_username()
    if not expected_user:
        LOG.warning("Admin login attempted but ADMIN_USERNAME is not configured")
        return False
    user_ok = _matches(expected_user, username.strip())
    pw_hash = app_config.admin_password_hash()
    if pw_hash:
        password_ok = check_password_hash(pw_hash, password)
    else:
        expected_password = app_config.admin_password()
        if not expected_password:
            LOG.warning("Admin login attempted but no admin password is configured")
            return False
        password_ok = _matches(expected_password, password)
    return user_ok and password_ok


def session_cookie_kwargs() -> Dict[str, Any]:
    """Keyword arguments for `Response.set_cookie` when opening a session."""
    return {
        "key": app_config.session_cookie_name(),
        "value": SESSION_TRUE_VALUE,
        "max_age": app_config.session_max_age(),
        "path": "/",
        "httponly": True,
        "secure": app_config.is_production(),
        "samesite": "Lax",
    }


__all__ = ["credentials_configured", "verify_credentials", "session_cookie_kwargs"]
