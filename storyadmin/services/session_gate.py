"""Admin session gate decision logic.

Everything under the admin prefix requires the session cookie to hold the
literal ``"true"``. The decision is a pure function of the request path and
the cookie value; the Flask hook in `storyadmin.routes.session_gate` only
feeds it request data and turns a denial into a redirect.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

ADMIN_PREFIX = "/admin"
LOGIN_PATH = "/login"
REDIRECT_PARAM = "redirect"
SESSION_TRUE_VALUE = "true"


class SessionState(str, Enum):
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class GateDecision:
    proceed: bool
    location: Optional[str] = None


PROCEED = GateDecision(proceed=True)


def session_state(cookie_value: Optional[str]) -> SessionState:
    """The only truthiness rule: exact, case-sensitive match on "true"."""
    if cookie_value == SESSION_TRUE_VALUE:
        return SessionState.AUTHENTICATED
    return SessionState.UNAUTHENTICATED


def is_protected_path(path: Optional[str], prefix: str = ADMIN_PREFIX) -> bool:
    """Segment-aware prefix match: "/admin" and "/admin/..." but not "/admin2"."""
    if not path:
        return False
    root = prefix.rstrip("/")
    return path == root or path.startswith(root + "/")


def login_location(path: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({REDIRECT_PARAM: path})}"


def evaluate(path: Optional[str], cookie_value: Optional[str], prefix: str = ADMIN_PREFIX) -> GateDecision:
    if not is_protected_path(path, prefix):
        return PROCEED
    if session_state(cookie_value) is SessionState.AUTHENTICATED:
        return PROCEED
    return GateDecision(proceed=False, location=login_location(path or prefix))


__all__ = [
    "ADMIN_PREFIX",
    "LOGIN_PATH",
    "REDIRECT_PARAM",
    "SESSION_TRUE_VALUE",
    "SessionState",
    "GateDecision",
    "session_state",
    "is_protected_path",
    "login_location",
    "evaluate",
]
