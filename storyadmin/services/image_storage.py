"""Project image asset storage.

Images live on local disk under ``<media_root>/<project_id>/`` and are served
by the public media blueprint. Uploaded names are never trusted; files are
stored as ``<kind>-<uuid>.<ext>``.
"""
from __future__ import annotations

import os
import re
import shutil
import uuid
from pathlib import Path
from typing import Optional

from werkzeug.datastructures import FileStorage

from storyadmin import config as app_config
from storyadmin.utils.logging import get_logger

LOG = get_logger("storyadmin.image_storage")

ALLOWED_EXT = {"jpg", "jpeg", "png", "webp"}
MAX_IMAGE_BYTES = 5 * 1024 * 1024
MEDIA_URL_PREFIX = "/media"
_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


class ImageValidationError(ValueError):
    """Raised for rejected uploads (missing file, bad type, too large)."""


def _root() -> Path:
    return Path(app_config.media_root())


def _project_dir(project_id: str) -> Path:
    if not project_id or not _SAFE_SEGMENT.match(project_id):
        raise ImageValidationError("invalid_project_id")
    return _root() / project_id


def _extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        raise ImageValidationError("unsupported_image_type")
    ext = filename.rsplit(".", 1)[1].lower()
    if ext not in ALLOWED_EXT:
        raise ImageValidationError("unsupported_image_type")
    return ext


def public_url(project_id: str, name: str) -> str:
    return f"{MEDIA_URL_PREFIX}/{project_id}/{name}"


def save_image(project_id: str, kind: str, file: Optional[FileStorage]) -> str:
    """Persist an uploaded image and return its public URL."""
    if file is None or not getattr(file, "filename", None):
        raise ImageValidationError("image_required")
    if not _SAFE_SEGMENT.match(kind or ""):
        raise ImageValidationError("invalid_image_kind")
    ext = _extension(file.filename)
    data = file.read()
    if not data:
        raise ImageValidationError("image_empty")
    if len(data) > MAX_IMAGE_BYTES:
        raise ImageValidationError("image_too_large")
    target_dir = _project_dir(project_id)
    target_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    name = f"{kind}-{uuid.uuid4().hex}.{ext}"
    target = target_dir / name
    tmp = target_dir / f".{name}.tmp"
    with tmp.open("wb") as fh:
        fh.write(data)
    os.replace(tmp, target)
    LOG.info("stored image project_id=%s name=%s bytes=%s", project_id, name, len(data))
    return public_url(project_id, name)


def resolve_image_path(project_id: str, name: str) -> Optional[Path]:
    """Absolute path of a stored image, or None if missing or outside the project dir."""
    try:
        base = _project_dir(project_id).resolve()
    except ImageValidationError:
        return None
    target = (base / name).resolve()
    if target.parent != base:
        LOG.warning("media path traversal guard triggered project_id=%s name=%s", project_id, name)
        return None
    if not target.is_file():
        return None
    return target


def remove_project_images(project_id: str) -> int:
    """Delete the project's image directory; returns the number of files removed."""
    try:
        directory = _project_dir(project_id)
    except ImageValidationError:
        return 0
    if not directory.is_dir():
        return 0
    removed = sum(1 for p in directory.iterdir() if p.is_file())
    shutil.rmtree(directory)
    LOG.info("removed %s image(s) for project_id=%s", removed, project_id)
    return removed


__all__ = [
    "ALLOWED_EXT",
    "MAX_IMAGE_BYTES",
    "ImageValidationError",
    "public_url",
    "save_image",
    "resolve_image_path",
    "remove_project_images",
]
