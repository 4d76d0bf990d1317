"""Manuscript page management."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from storyadmin.db.repositories import pages_repo
from storyadmin.services.projects_service import ensure_project
from storyadmin.utils.logging import get_logger
from storyadmin.utils.text import clean_optional_text

LOG = get_logger("storyadmin.pages_service")

_URL_FIELDS = ("sketch_url", "illustration_url")


class PageValidationError(ValueError):
    """Raised when page payload fails validation."""


class PageNotFoundError(RuntimeError):
    """Raised when a page id cannot be located."""


def _page_number(raw: Any) -> int:
    if isinstance(raw, bool):
        raise PageValidationError("invalid_page_number")
    try:
        number = int(raw)
    except (TypeError, ValueError):
        raise PageValidationError("invalid_page_number")
    if number < 1:
        raise PageValidationError("invalid_page_number")
    return number


def _flag(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    raise PageValidationError("invalid_flag")


def _character_ids(raw: Any) -> List[str]:
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)) or not all(isinstance(i, str) for i in raw):
        raise PageValidationError("invalid_character_ids")
    seen: List[str] = []
    for cid in raw:
        cid = cid.strip()
        if cid and cid not in seen:
            seen.append(cid)
    return seen


def list_pages(project_id: str) -> List[Dict[str, Any]]:
    ensure_project(project_id)
    return [page.as_dict() for page in pages_repo.list_pages(project_id)]


def create_page(project_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    ensure_project(project_id)
    if payload.get("page_number") is not None:
        number = _page_number(payload.get("page_number"))
    else:
        number = pages_repo.next_page_number(project_id)
    story_text = payload.get("story_text") or ""
    if not isinstance(story_text, str):
        raise PageValidationError("invalid_story_text")
    page = pages_repo.create_page(
        project_id,
        number,
        story_text=story_text.strip(),
        scene_description=clean_optional_text(payload.get("scene_description")),
        description_auto_generated=_flag(payload.get("description_auto_generated", False)),
        character_ids=_character_ids(payload.get("character_ids")),
    )
    LOG.info("Page created project_id=%s page_id=%s number=%s", project_id, page.id, number)
    return page.as_dict()


def update_page(page_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    if "story_text" in payload:
        text = payload.get("story_text") or ""
        if not isinstance(text, str):
            raise PageValidationError("invalid_story_text")
        changes["story_text"] = text.strip()
    if "scene_description" in payload:
        changes["scene_description"] = clean_optional_text(payload.get("scene_description"))
    if "page_number" in payload:
        changes["page_number"] = _page_number(payload.get("page_number"))
    if "character_ids" in payload:
        changes["character_ids"] = _character_ids(payload.get("character_ids"))
    if "description_auto_generated" in payload:
        changes["description_auto_generated"] = _flag(payload.get("description_auto_generated"))
    for field in _URL_FIELDS:
        if field in payload:
            changes[field] = clean_optional_text(payload.get(field))
    if not changes:
        raise PageValidationError("no_changes")
    page = pages_repo.update_page(page_id, changes)
    if not page:
        raise PageNotFoundError(page_id)
    return page.as_dict()


def delete_page(page_id: str) -> Dict[str, Any]:
    if not pages_repo.delete_page(page_id):
        raise PageNotFoundError(page_id)
    LOG.info("Page deleted page_id=%s", page_id)
    return {"success": True}


__all__ = [
    "PageValidationError",
    "PageNotFoundError",
    "list_pages",
    "create_page",
    "update_page",
    "delete_page",
]
