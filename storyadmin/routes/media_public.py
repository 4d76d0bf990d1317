"""Public endpoint serving stored project images."""
from __future__ import annotations

import mimetypes
from typing import Any

from flask import Blueprint, abort, send_file

from storyadmin.services import image_storage
from storyadmin.utils.logging import get_logger

LOG = get_logger("storyadmin.media")
bp = Blueprint("media_public", __name__, url_prefix=image_storage.MEDIA_URL_PREFIX)


@bp.route("/<project_id>/<path:filename>", methods=["GET"])
def get_media(project_id: str, filename: str):
    target = image_storage.resolve_image_path(project_id, filename)
    if target is None:
        abort(404)
    mimetype, _ = mimetypes.guess_type(target.name)
    if mimetype is None:
        mimetype = "application/octet-stream"
    return send_file(str(target), mimetype=mimetype, conditional=True, download_name=target.name)


def register_media(app: Any) -> None:
    if getattr(app, "_storyadmin_media_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_storyadmin_media_bp", bp)
    LOG.debug("media blueprint registered")


__all__ = ["register_media", "bp"]
