"""Project orchestration: listing with counts, creation, edits, deletion."""
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Mapping, Optional

from werkzeug.datastructures import FileStorage

from storyadmin.db.models import PROJECT_STATUSES
from storyadmin.db.repositories import characters_repo, counts_repo, projects_repo
from storyadmin.services import image_storage
from storyadmin.utils.logging import get_logger
from storyadmin.utils.text import clean_optional_text, normalize_email, split_full_name

LOG = get_logger("storyadmin.projects_service")

EDITABLE_FIELDS = (
    "book_title",
    "author_firstname",
    "author_lastname",
    "author_email",
    "author_phone",
    "status",
)
MAIN_CHARACTER_ROLE = "Main Character"


class ProjectValidationError(ValueError):
    """Raised when project payload fails validation."""


class ProjectNotFoundError(RuntimeError):
    """Raised when a project id cannot be located."""


def _new_review_token() -> str:
    return uuid.uuid4().hex[:32]


def _required(payload: Mapping[str, Any], key: str) -> str:
    value = clean_optional_text(payload.get(key))
    if not value:
        raise ProjectValidationError(f"{key}_required")
    return value


def list_projects() -> List[Dict[str, Any]]:
    projects = projects_repo.list_projects()
    page_counts = counts_repo.count_pages_by_project([p.id for p in projects])
    rows = []
    for project in projects:
        row = project.as_dict()
        row["page_count"] = page_counts.get(project.id, 0)
        rows.append(row)
    return rows


def get_project(project_id: str) -> Dict[str, Any]:
    project = projects_repo.get_project(project_id)
    if not project:
        raise ProjectNotFoundError(project_id)
    return project.as_dict()


def create_project(
    payload: Mapping[str, Any],
    main_character_image: Optional[FileStorage] = None,
) -> Dict[str, Any]:
    book_title = _required(payload, "book_title")
    full_name = _required(payload, "author_fullname")
    author_email = normalize_email(payload.get("author_email"))
    if not author_email:
        raise ProjectValidationError("author_email_required")
    author_phone = _required(payload, "author_phone")
    firstname, lastname = split_full_name(full_name)

    project_id = str(uuid.uuid4())
    image_url = None
    if main_character_image is not None and main_character_image.filename:
        image_url = image_storage.save_image(project_id, "main-character", main_character_image)

    try:
        project = projects_repo.create_project(
            id=project_id,
            book_title=book_title,
            author_firstname=firstname,
            author_lastname=lastname,
            author_email=author_email,
            author_phone=author_phone,
            review_token=_new_review_token(),
            status="draft",
        )
    except projects_repo.ProjectExistsError as exc:
        if image_url:
            image_storage.remove_project_images(project_id)
        LOG.warning("Project insert collided id=%s", project_id)
        raise ProjectValidationError("project_exists") from exc
    main_name = clean_optional_text(payload.get("main_character_name"))
    main_character = None
    if main_name or image_url:
        main_character = characters_repo.create_character(
            project.id,
            name=main_name,
            role=MAIN_CHARACTER_ROLE,
            is_main=True,
            image_url=image_url,
        )
    LOG.info("Project created id=%s title=%s main_character=%s", project.id, book_title, bool(main_character))
    result = project.as_dict()
    result["main_character"] = main_character.as_dict() if main_character else None
    return result


def update_project(project_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    for field in EDITABLE_FIELDS:
        if field not in payload:
            continue
        value = clean_optional_text(payload.get(field))
        if field == "book_title" and not value:
            raise ProjectValidationError("book_title_required")
        if field == "author_email":
            value = normalize_email(value)
            if not value:
                raise ProjectValidationError("author_email_required")
        if field == "status" and value not in PROJECT_STATUSES:
            raise ProjectValidationError("unsupported_status")
        changes[field] = value if value is not None else ""
    if not changes:
        raise ProjectValidationError("no_changes")
    project = projects_repo.update_project(project_id, changes)
    if not project:
        raise ProjectNotFoundError(project_id)
    LOG.info("Project updated id=%s fields=%s", project_id, sorted(changes))
    return project.as_dict()


def delete_project(project_id: str) -> Dict[str, Any]:
    deleted = projects_repo.delete_project(project_id)
    if deleted is None:
        raise ProjectNotFoundError(project_id)
    deleted["images"] = image_storage.remove_project_images(project_id)
    LOG.info(
        "Project deleted id=%s characters=%s pages=%s images=%s",
        project_id,
        deleted["characters"],
        deleted["pages"],
        deleted["images"],
    )
    return {"success": True, "deleted": deleted}


def delete_all_projects() -> Dict[str, Any]:
    removed_ids = projects_repo.delete_all_projects()
    for project_id in removed_ids:
        image_storage.remove_project_images(project_id)
    LOG.warning("All projects deleted count=%s", len(removed_ids))
    return {"success": True, "count": len(removed_ids)}


def ensure_project(project_id: str) -> None:
    if not project_id or not projects_repo.project_exists(project_id):
        raise ProjectNotFoundError(project_id)


__all__ = [
    "ProjectValidationError",
    "ProjectNotFoundError",
    "list_projects",
    "get_project",
    "create_project",
    "update_project",
    "delete_project",
    "delete_all_projects",
    "ensure_project",
]
