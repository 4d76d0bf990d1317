"""Admin JSON API under /admin/api.

Routes:
    GET    /admin/api/projects                         -> list with page counts
    POST   /admin/api/projects                         -> create (JSON or multipart)
    POST   /admin/api/projects/delete_all              -> remove every project
    GET    /admin/api/projects/<id>                    -> project record
    PATCH  /admin/api/projects/<id>                    -> edit fields
    DELETE /admin/api/projects/<id>                    -> delete with pages/characters/images
    GET    /admin/api/projects/<id>/counts             -> {pageCount, characterCount, hasImages}
    GET    /admin/api/projects/<id>/pages              -> pages ordered by number
    POST   /admin/api/projects/<id>/pages              -> add page
    PATCH  /admin/api/pages/<page_id>                  -> edit page
    DELETE /admin/api/pages/<page_id>                  -> delete page
    GET    /admin/api/projects/<id>/characters         -> characters, main first
    POST   /admin/api/projects/<id>/characters         -> add character
    GET    /admin/api/characters/<character_id>        -> character record
    PATCH  /admin/api/characters/<character_id>        -> edit character
    DELETE /admin/api/characters/<character_id>        -> delete (main is protected)
    POST   /admin/api/characters/<character_id>/image  -> upload character image

The session gate covers the whole /admin prefix, so handlers do no auth.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Blueprint, jsonify, request
from flask_babel import lazy_gettext as _l

from storyadmin.services import (
    characters_service,
    image_storage,
    pages_service,
    projects_service,
)
from storyadmin.services.project_counts import (
    ProjectCountsError,
    ProjectCountsValidationError,
    get_project_counts,
)
from storyadmin.utils.logging import get_logger

bp = Blueprint("admin_api", __name__, url_prefix="/admin/api")
LOG = get_logger("storyadmin.admin_api")

_ERROR_MESSAGES = {
    "invalid_payload": _l("Request body must be a JSON object."),
    "project_missing": _l("Project could not be found."),
    "page_missing": _l("Page could not be found."),
    "character_missing": _l("Character could not be found."),
    "counts_unavailable": _l("Project counts could not be loaded."),
    "project_id_required": _l("Project id is required."),
    "book_title_required": _l("Book title is required."),
    "author_fullname_required": _l("Author name is required."),
    "author_email_required": _l("Author email is required."),
    "author_phone_required": _l("Author phone is required."),
    "project_exists": _l("A project with the same identifiers already exists."),
    "unsupported_status": _l("Unknown project status."),
    "no_changes": _l("Nothing to update."),
    "invalid_page_number": _l("Page number must be a positive integer."),
    "invalid_story_text": _l("Story text must be a string."),
    "invalid_character_ids": _l("Character ids must be a list of strings."),
    "name_required": _l("Character name is required."),
    "invalid_flag": _l("Flag values must be true or false."),
    "invalid_appears_in": _l("Appears-in must be a list of strings."),
    "main_character_protected": _l("The main character cannot be deleted."),
    "image_required": _l("Choose an image to upload."),
    "image_empty": _l("Uploaded image is empty."),
    "image_too_large": _l("Image is too large."),
    "unsupported_image_type": _l("Only JPG, PNG and WEBP images are supported."),
}


def _error_message_for(code: str) -> Optional[str]:
    message = _ERROR_MESSAGES.get(code)
    return str(message) if message is not None else None


def _json_error(
    code: str,
    status: int = 400,
    *,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
):
    payload: Dict[str, Any] = {"error": code}
    final_message = message or _error_message_for(code)
    if final_message:
        payload["message"] = final_message
    if details is not None:
        payload["details"] = details
    return jsonify(payload), status


def _json_payload():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    return payload


# ------------------- Projects --------------------

@bp.route("/projects", methods=["GET"])
def api_projects_list():
    return jsonify({"projects": projects_service.list_projects()})


@bp.route("/projects", methods=["POST"])
def api_projects_create():
    if request.mimetype == "multipart/form-data":
        payload: Any = request.form.to_dict()
        image = request.files.get("main_character_image")
    else:
        payload = _json_payload()
        image = None
        if payload is None:
            return _json_error("invalid_payload", 400)
    try:
        result = projects_service.create_project(payload, main_character_image=image)
    except projects_service.ProjectValidationError as exc:
        code = str(exc)
        return _json_error(code, 409 if code == "project_exists" else 400)
    except image_storage.ImageValidationError as exc:
        return _json_error(str(exc), 400)
    return jsonify({"success": True, "project": result}), 201


@bp.route("/projects/delete_all", methods=["POST"])
def api_projects_delete_all():
    return jsonify(projects_service.delete_all_projects())


@bp.route("/projects/<project_id>", methods=["GET"])
def api_project_get(project_id: str):
    try:
        return jsonify(projects_service.get_project(project_id))
    except projects_service.ProjectNotFoundError:
        return _json_error("project_missing", 404)


@bp.route("/projects/<project_id>", methods=["PATCH"])
def api_project_update(project_id: str):
    payload = _json_payload()
    if payload is None:
        return _json_error("invalid_payload", 400)
    try:
        result = projects_service.update_project(project_id, payload)
    except projects_service.ProjectValidationError as exc:
        return _json_error(str(exc), 400)
    except projects_service.ProjectNotFoundError:
        return _json_error("project_missing", 404)
    return jsonify(result)


@bp.route("/projects/<project_id>", methods=["DELETE"])
def api_project_delete(project_id: str):
    try:
        return jsonify(projects_service.delete_project(project_id))
    except projects_service.ProjectNotFoundError:
        return _json_error("project_missing", 404)


@bp.route("/projects/<project_id>/counts", methods=["GET"])
def api_project_counts(project_id: str):
    try:
        counts = get_project_counts(project_id)
    except ProjectCountsValidationError as exc:
        return _json_error(str(exc), 400)
    except ProjectCountsError as exc:
        LOG.error("Counts request failed project_id=%s query=%s", project_id, exc.query)
        return _json_error("counts_unavailable", 503, details={"query": exc.query})
    return jsonify(counts.as_dict())


# ------------------- Pages --------------------

@bp.route("/projects/<project_id>/pages", methods=["GET"])
def api_pages_list(project_id: str):
    try:
        return jsonify({"pages": pages_service.list_pages(project_id)})
    except projects_service.ProjectNotFoundError:
        return _json_error("project_missing", 404)


@bp.route("/projects/<project_id>/pages", methods=["POST"])
def api_pages_create(project_id: str):
    payload = _json_payload()
    if payload is None:
        return _json_error("invalid_payload", 400)
    try:
        result = pages_service.create_page(project_id, payload)
    except projects_service.ProjectNotFoundError:
        return _json_error("project_missing", 404)
    except pages_service.PageValidationError as exc:
        return _json_error(str(exc), 400)
    return jsonify(result), 201


@bp.route("/pages/<page_id>", methods=["PATCH"])
def api_page_update(page_id: str):
    payload = _json_payload()
    if payload is None:
        return _json_error("invalid_payload", 400)
    try:
        result = pages_service.update_page(page_id, payload)
    except pages_service.PageValidationError as exc:
        return _json_error(str(exc), 400)
    except pages_service.PageNotFoundError:
        return _json_error("page_missing", 404)
    return jsonify(result)


@bp.route("/pages/<page_id>", methods=["DELETE"])
def api_page_delete(page_id: str):
    try:
        return jsonify(pages_service.delete_page(page_id))
    except pages_service.PageNotFoundError:
        return _json_error("page_missing", 404)


# ------------------- Characters --------------------

@bp.route("/projects/<project_id>/characters", methods=["GET"])
def api_characters_list(project_id: str):
    try:
        return jsonify({"characters": characters_service.list_characters(project_id)})
    except projects_service.ProjectNotFoundError:
        return _json_error("project_missing", 404)


@bp.route("/projects/<project_id>/characters", methods=["POST"])
def api_characters_create(project_id: str):
    payload = _json_payload()
    if payload is None:
        return _json_error("invalid_payload", 400)
    try:
        result = characters_service.create_character(project_id, payload)
    except projects_service.ProjectNotFoundError:
        return _json_error("project_missing", 404)
    except characters_service.CharacterValidationError as exc:
        return _json_error(str(exc), 400)
    return jsonify(result), 201


@bp.route("/characters/<character_id>", methods=["GET"])
def api_character_get(character_id: str):
    try:
        return jsonify(characters_service.get_character(character_id))
    except characters_service.CharacterNotFoundError:
        return _json_error("character_missing", 404)


@bp.route("/characters/<character_id>", methods=["PATCH"])
def api_character_update(character_id: str):
    payload = _json_payload()
    if payload is None:
        return _json_error("invalid_payload", 400)
    try:
        result = characters_service.update_character(character_id, payload)
    except characters_service.CharacterValidationError as exc:
        return _json_error(str(exc), 400)
    except characters_service.CharacterNotFoundError:
        return _json_error("character_missing", 404)
    return jsonify(result)


@bp.route("/characters/<character_id>", methods=["DELETE"])
def api_character_delete(character_id: str):
    try:
        result = characters_service.delete_character(character_id)
    except characters_service.CharacterNotFoundError:
        return _json_error("character_missing", 404)
    except characters_service.CharacterValidationError as exc:
        return _json_error(str(exc), 409)
    return jsonify(result)


@bp.route("/characters/<character_id>/image", methods=["POST"])
def api_character_image(character_id: str):
    try:
        result = characters_service.attach_image(character_id, request.files.get("file"))
    except characters_service.CharacterNotFoundError:
        return _json_error("character_missing", 404)
    except image_storage.ImageValidationError as exc:
        return _json_error(str(exc), 400)
    return jsonify(result)


def register_admin_api(app: Any) -> None:
    if getattr(app, "_storyadmin_admin_api_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_storyadmin_admin_api_bp", bp)
    LOG.debug("admin api blueprint registered")


__all__ = ["register_admin_api", "bp"]
