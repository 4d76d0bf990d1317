"""Story character management."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from werkzeug.datastructures import FileStorage

from storyadmin.db.models import CHARACTER_APPEARANCE_FIELDS
from storyadmin.db.repositories import characters_repo
from storyadmin.services import image_storage
from storyadmin.services.projects_service import ensure_project
from storyadmin.utils.logging import get_logger
from storyadmin.utils.text import clean_optional_text

LOG = get_logger("storyadmin.characters_service")

TEXT_FIELDS = ("name", "role", "story_role", "feedback_notes", "sketch_url") + CHARACTER_APPEARANCE_FIELDS
FLAG_FIELDS = ("is_resolved",)


class CharacterValidationError(ValueError):
    """Raised when character payload fails validation."""


class CharacterNotFoundError(RuntimeError):
    """Raised when a character id cannot be located."""


def _flag(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    raise CharacterValidationError("invalid_flag")


def _appears_in(raw: Any) -> List[str]:
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)) or not all(isinstance(i, str) for i in raw):
        raise CharacterValidationError("invalid_appears_in")
    return [item.strip() for item in raw if item.strip()]


def _collect_changes(payload: Mapping[str, Any]) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    for field in TEXT_FIELDS:
        if field in payload:
            changes[field] = clean_optional_text(payload.get(field))
    for field in FLAG_FIELDS:
        if field in payload:
            changes[field] = _flag(payload.get(field))
    if "appears_in" in payload:
        changes["appears_in"] = _appears_in(payload.get("appears_in"))
    return changes


def list_characters(project_id: str) -> List[Dict[str, Any]]:
    ensure_project(project_id)
    return [c.as_dict() for c in characters_repo.list_characters(project_id)]


def get_character(character_id: str) -> Dict[str, Any]:
    character = characters_repo.get_character(character_id)
    if not character:
        raise CharacterNotFoundError(character_id)
    return character.as_dict()


def create_character(project_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    ensure_project(project_id)
    fields = _collect_changes(payload)
    if not fields.get("name"):
        raise CharacterValidationError("name_required")
    character = characters_repo.create_character(project_id, is_main=False, **fields)
    LOG.info("Character created project_id=%s character_id=%s", project_id, character.id)
    return character.as_dict()


def update_character(character_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    changes = _collect_changes(payload)
    if not changes:
        raise CharacterValidationError("no_changes")
    character = characters_repo.update_character(character_id, changes)
    if not character:
        raise CharacterNotFoundError(character_id)
    return character.as_dict()


def delete_character(character_id: str) -> Dict[str, Any]:
    character = characters_repo.get_character(character_id)
    if not character:
        raise CharacterNotFoundError(character_id)
    if character.is_main:
        raise CharacterValidationError("main_character_protected")
    pages_touched = characters_repo.delete_character(character_id)
    if pages_touched is None:
        raise CharacterNotFoundError(character_id)
    LOG.info(
        "Character deleted character_id=%s project_id=%s pages_touched=%s",
        character_id,
        character.project_id,
        pages_touched,
    )
    return {"success": True, "pages_updated": pages_touched}


def attach_image(character_id: str, file: Optional[FileStorage]) -> Dict[str, Any]:
    character = characters_repo.get_character(character_id)
    if not character:
        raise CharacterNotFoundError(character_id)
    url = image_storage.save_image(character.project_id, "character", file)
    updated = characters_repo.update_character(character_id, {"image_url": url})
    if not updated:
        raise CharacterNotFoundError(character_id)
    return updated.as_dict()


__all__ = [
    "CharacterValidationError",
    "CharacterNotFoundError",
    "list_characters",
    "get_character",
    "create_character",
    "update_character",
    "delete_character",
    "attach_image",
]
