"""Database engine & session management.

One lazily created engine per process. Request handlers and worker threads
obtain sessions through `app_session()`; the scoped registry gives every
thread its own session.
"""
from __future__ import annotations

import os, threading
try:  # POSIX file locking for gunicorn multi-worker safety
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - non-POSIX platform
    fcntl = None  # type: ignore
from contextlib import contextmanager
from typing import Optional, Iterator, Callable

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, scoped_session, Session as SASession
from sqlalchemy.pool import StaticPool

from storyadmin.utils.logging import get_logger
from storyadmin.db.models import Base
from storyadmin import config as app_config

_engine: Optional[Engine] = None
_SessionFactory: Optional[Callable[[], SASession]] = None
_scoped: Optional[scoped_session] = None
_LOCK = threading.Lock()

LOG = get_logger("storyadmin.db")


def _build_engine(db_path: str) -> Engine:
    if db_path == ":memory:":
        # A single shared connection so worker threads see the same database.
        return create_engine(
            "sqlite://",
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    parent_dir = os.path.dirname(os.path.abspath(db_path)) or "."
    os.makedirs(parent_dir, exist_ok=True)
    if not os.access(parent_dir, os.W_OK):
        raise RuntimeError(f"storyadmin DB directory not writable: {parent_dir}")
    return create_engine(
        f"sqlite:///{db_path}",
        future=True,
        connect_args={"check_same_thread": False},
    )


def init_engine_once() -> None:
    global _engine, _SessionFactory, _scoped
    if _engine is not None:
        return
    with _LOCK:
        if _engine is not None:
            return
        db_path = app_config.get_db_path()
        LOG.info("Initializing database engine at %s", db_path)
        _engine = _build_engine(db_path)
        _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False, class_=SASession)
        _scoped = scoped_session(_SessionFactory)
        if fcntl is not None and db_path != ":memory:":
            # Several gunicorn workers may boot at once; serialize DDL.
            parent_dir = os.path.dirname(os.path.abspath(db_path)) or "."
            lock_path = os.path.join(parent_dir, ".storyadmin_schema.lock")
            with open(lock_path, "w") as lf:
                try:
                    fcntl.flock(lf, fcntl.LOCK_EX)
                    _safe_create_schema()
                finally:
                    fcntl.flock(lf, fcntl.LOCK_UN)
        else:
            _safe_create_schema()
        LOG.debug("storyadmin schema ready")


def _safe_create_schema() -> None:
    """Run metadata.create_all, tolerating the multi-worker 'already exists' race."""
    if _engine is None:
        return
    try:
        Base.metadata.create_all(_engine)
    except OperationalError as e:  # pragma: no cover - concurrency edge
        if "already exists" in str(e).lower():
            LOG.warning("Schema create encountered existing tables (benign race)")
        else:
            raise


def get_engine() -> Engine:
    if _engine is None:
        init_engine_once()
    return _engine  # type: ignore[return-value]


def get_session_factory() -> Callable[[], SASession]:
    if _SessionFactory is None:
        init_engine_once()
    return _SessionFactory  # type: ignore[return-value]


def get_scoped_session() -> scoped_session:
    if _scoped is None:
        init_engine_once()
    if _scoped is None:
        raise RuntimeError("Scoped session could not be initialized.")
    return _scoped


@contextmanager
def app_session() -> Iterator[SASession]:
    scoped = get_scoped_session()
    sess = scoped()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()


def reset_for_tests(drop: bool = False) -> None:
    global _engine, _SessionFactory, _scoped
    with _LOCK:
        if _scoped is not None:
            _scoped.remove()
        if _engine is not None:
            if drop:
                try:
                    Base.metadata.drop_all(_engine)
                except Exception:
                    LOG.warning("Failed dropping tables during reset", exc_info=True)
            _engine.dispose()
        _engine = None
        _SessionFactory = None
        _scoped = None


__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
    "reset_for_tests",
]
