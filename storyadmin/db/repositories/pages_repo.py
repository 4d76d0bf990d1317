"""Repository helpers for manuscript pages."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func

from storyadmin.db import app_session
from storyadmin.db.models import Page


def list_pages(project_id: str) -> List[Page]:
    with app_session() as session:
        return (
            session.query(Page)
            .filter(Page.project_id == project_id)
            .order_by(Page.page_number.asc(), Page.created_at.asc())
            .all()
        )


def next_page_number(project_id: str) -> int:
    with app_session() as session:
        current = (
            session.query(func.max(Page.page_number))
            .filter(Page.project_id == project_id)
            .scalar()
        )
    return int(current or 0) + 1


def create_page(project_id: str, page_number: int, **fields: Any) -> Page:
    character_ids = fields.pop("character_ids", None)
    page = Page(project_id=project_id, page_number=page_number, **fields)
    page.set_character_ids(character_ids or [])
    with app_session() as session:
        session.add(page)
    return page


def update_page(page_id: str, changes: Dict[str, Any]) -> Optional[Page]:
    with app_session() as session:
        page = session.query(Page).filter(Page.id == page_id).one_or_none()
        if not page:
            return None
        for key, value in changes.items():
            if key == "character_ids":
                page.set_character_ids(value or [])
            else:
                setattr(page, key, value)
        return page


def delete_page(page_id: str) -> bool:
    with app_session() as session:
        page = session.query(Page).filter(Page.id == page_id).one_or_none()
        if not page:
            return False
        session.delete(page)
        return True


__all__ = [
    "list_pages",
    "next_page_number",
    "create_page",
    "update_page",
    "delete_page",
]
