"""Application logging helpers.

A single handler lives on the ``storyadmin`` logger; module loggers are its
children and propagate to it. Records carry the thread name so lines from
the ``project-counts`` workers can be told apart from request threads.
Honors the log level from `storyadmin.config.log_level_name()`.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from storyadmin import config as app_config

ROOT_LOGGER = "storyadmin"
LOG_FORMAT = "[storyadmin] %(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"

_LOCK = threading.Lock()
_PRIMARY: Optional[logging.Logger] = None


def _configure_primary() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    level = getattr(logging, app_config.log_level_name(), logging.INFO)
    logger.setLevel(level)
    if not any(getattr(h, "_storyadmin_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._storyadmin_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return the primary logger or a child of it.

    Names outside the ``storyadmin.`` namespace are nested under it.
    """
    global _PRIMARY
    if _PRIMARY is None:
        with _LOCK:
            if _PRIMARY is None:
                _PRIMARY = _configure_primary()
    if name == ROOT_LOGGER:
        return _PRIMARY
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


__all__ = ["ROOT_LOGGER", "LOG_FORMAT", "get_logger"]
