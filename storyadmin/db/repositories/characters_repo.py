"""Repository helpers for story characters."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from storyadmin.db import app_session
from storyadmin.db.models import Character, Page


def list_characters(project_id: str) -> List[Character]:
    with app_session() as session:
        return (
            session.query(Character)
            .filter(Character.project_id == project_id)
            .order_by(Character.is_main.desc(), Character.created_at.asc(), Character.id.asc())
            .all()
        )


def get_character(character_id: str) -> Optional[Character]:
    with app_session() as session:
        return session.query(Character).filter(Character.id == character_id).one_or_none()


def create_character(project_id: str, **fields: Any) -> Character:
    appears_in = fields.pop("appears_in", None)
    character = Character(project_id=project_id, **fields)
    character.set_appears_in(appears_in or [])
    with app_session() as session:
        session.add(character)
    return character


def update_character(character_id: str, changes: Dict[str, Any]) -> Optional[Character]:
    with app_session() as session:
        character = session.query(Character).filter(Character.id == character_id).one_or_none()
        if not character:
            return None
        for key, value in changes.items():
            if key == "appears_in":
                character.set_appears_in(value or [])
            else:
                setattr(character, key, value)
        return character


def delete_character(character_id: str) -> Optional[int]:
    """Delete a character and drop its id from the project's page lists.

    Both changes commit together. Returns the number of pages touched, or
    None when the character is missing.
    """
    with app_session() as session:
        character = session.query(Character).filter(Character.id == character_id).one_or_none()
        if not character:
            return None
        touched = 0
        pages = session.query(Page).filter(Page.project_id == character.project_id).all()
        for page in pages:
            ids = page.character_id_list()
            if character_id not in ids:
                continue
            page.set_character_ids([cid for cid in ids if cid != character_id])
            touched += 1
        session.delete(character)
        return touched


__all__ = [
    "list_characters",
    "get_character",
    "create_character",
    "update_character",
    "delete_character",
]
