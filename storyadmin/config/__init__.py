"""Application configuration accessors.

Centralizes environment variable parsing & defaults. Values are read on
every call so deployments (and tests) can change them without reloading
modules.
"""
from __future__ import annotations

import os

APP_NAME = "storyadmin"
APP_VERSION = "0.4.0"

DEFAULT_DB_PATH = "storyadmin.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MEDIA_ROOT = "media"
DEFAULT_SESSION_COOKIE = "admin_session_v2"
DEFAULT_SESSION_MAX_AGE = 60 * 60 * 24 * 7  # one week


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _clean_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_int(name: str, default: int) -> int:
    raw = _clean_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_db_path() -> str:
    raw = _raw_env("STORYADMIN_DB_PATH", DEFAULT_DB_PATH)
    if raw and raw != ":memory:" and not os.path.isabs(raw):
        data_root = os.getenv("STORYADMIN_DATA_DIR")
        if data_root:
            return os.path.join(data_root, raw)
    return raw  # type: ignore[return-value]


def log_level_name() -> str:
    return _raw_env("STORYADMIN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


def media_root() -> str:
    """Directory holding uploaded project images (STORYADMIN_MEDIA_ROOT)."""
    raw = _clean_env("STORYADMIN_MEDIA_ROOT") or DEFAULT_MEDIA_ROOT
    if not os.path.isabs(raw):
        data_root = os.getenv("STORYADMIN_DATA_DIR")
        if data_root:
            return os.path.join(data_root, raw)
    return raw


def is_production() -> bool:
    return (_clean_env("STORYADMIN_ENV") or "").lower() == "production"


def admin_username() -> str | None:
    """Admin login name (ADMIN_USERNAME, no default)."""
    return _clean_env("ADMIN_USERNAME")


def admin_password() -> str | None:
    """Plain admin password (ADMIN_PASSWORD, no default).

    Not stripped: leading/trailing whitespace is part of the secret.
    """
    value = os.getenv("ADMIN_PASSWORD")
    return value or None


def admin_password_hash() -> str | None:
    """Optional werkzeug password hash (ADMIN_PASSWORD_HASH).

    When set it takes precedence over ADMIN_PASSWORD.
    """
    return _clean_env("ADMIN_PASSWORD_HASH")


def session_cookie_name() -> str:
    """Name of the admin session cookie.

    Environment Variable: ADMIN_SESSION_COOKIE
    Renaming the cookie invalidates every session issued under the old name.
    """
    return _clean_env("ADMIN_SESSION_COOKIE") or DEFAULT_SESSION_COOKIE


def session_max_age() -> int:
    return env_int("ADMIN_SESSION_MAX_AGE", DEFAULT_SESSION_MAX_AGE)


def summarize_runtime_config() -> dict:
    return {
        "app": f"{APP_NAME} {APP_VERSION}",
        "db_path": get_db_path(),
        "log_level": log_level_name(),
        "media_root": media_root(),
        "session_cookie": session_cookie_name(),
        "production": is_production(),
        "admin_configured": bool(admin_username() and (admin_password() or admin_password_hash())),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "env_int",
    "get_db_path",
    "log_level_name",
    "media_root",
    "is_production",
    "admin_username",
    "admin_password",
    "admin_password_hash",
    "session_cookie_name",
    "session_max_age",
    "summarize_runtime_config",
]
