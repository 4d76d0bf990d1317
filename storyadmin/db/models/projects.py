"""ORM models for illustrated-book projects, their pages and characters."""
from __future__ import annotations

import datetime
import json
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _load_id_list(raw) -> list:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(data, list):
        return []
    return [str(item) for item in data]


PROJECT_STATUSES = (
    "draft",
    "awaiting_customer_input",
    "character_review",
    "character_generation",
    "character_generation_complete",
    "character_revision_needed",
    "characters_approved",
    "characters_regenerated",
    "sketches_review",
    "sketches_revision",
    "illustration_approved",
    "completed",
)


class Project(Base):
    """One book in production."""

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    book_title = Column(String(255), nullable=False)
    author_firstname = Column(String(120), nullable=False, default="")
    author_lastname = Column(String(120), nullable=False, default="")
    author_email = Column(String(255), nullable=False, index=True)
    author_phone = Column(String(64), nullable=False, default="")
    review_token = Column(String(32), nullable=False, unique=True)
    status = Column(String(64), nullable=False, default="draft")
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "book_title": self.book_title,
            "author_firstname": self.author_firstname,
            "author_lastname": self.author_lastname,
            "author_email": self.author_email,
            "author_phone": self.author_phone,
            "review_token": self.review_token,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Project id={self.id} title={self.book_title!r} status={self.status}>"


class Page(Base):
    """A manuscript page; `character_ids` is a JSON list of character ids."""

    __tablename__ = "pages"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    page_number = Column(Integer, nullable=False)
    story_text = Column(Text, nullable=False, default="")
    scene_description = Column(Text, nullable=True)
    description_auto_generated = Column(Boolean, nullable=False, default=False)
    character_ids = Column(Text, nullable=True)
    sketch_url = Column(String(500), nullable=True)
    illustration_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_pages_project_number", "project_id", "page_number"),
    )

    def character_id_list(self) -> list:
        return _load_id_list(self.character_ids)

    def set_character_ids(self, ids) -> None:
        self.character_ids = json.dumps([str(i) for i in ids])

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "page_number": self.page_number,
            "story_text": self.story_text or "",
            "scene_description": self.scene_description,
            "description_auto_generated": bool(self.description_auto_generated),
            "character_ids": self.character_id_list(),
            "sketch_url": self.sketch_url,
            "illustration_url": self.illustration_url,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Page id={self.id} project={self.project_id} number={self.page_number}>"


CHARACTER_APPEARANCE_FIELDS = (
    "age",
    "gender",
    "ethnicity",
    "skin_color",
    "hair_color",
    "hair_style",
    "eye_color",
    "clothing",
    "accessories",
    "special_features",
)


class Character(Base):
    """A story character; the main character is flagged with `is_main`."""

    __tablename__ = "characters"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    role = Column(String(255), nullable=True)
    story_role = Column(Text, nullable=True)
    is_main = Column(Boolean, nullable=False, default=False)
    is_resolved = Column(Boolean, nullable=False, default=False)
    appears_in = Column(Text, nullable=True)
    age = Column(String(64), nullable=True)
    gender = Column(String(64), nullable=True)
    ethnicity = Column(String(120), nullable=True)
    skin_color = Column(String(120), nullable=True)
    hair_color = Column(String(120), nullable=True)
    hair_style = Column(String(255), nullable=True)
    eye_color = Column(String(120), nullable=True)
    clothing = Column(Text, nullable=True)
    accessories = Column(Text, nullable=True)
    special_features = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    sketch_url = Column(String(500), nullable=True)
    feedback_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    def appears_in_list(self) -> list:
        return _load_id_list(self.appears_in)

    def set_appears_in(self, values) -> None:
        self.appears_in = json.dumps([str(v) for v in values])

    def as_dict(self) -> dict:
        payload = {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "role": self.role,
            "story_role": self.story_role,
            "is_main": bool(self.is_main),
            "is_resolved": bool(self.is_resolved),
            "appears_in": self.appears_in_list(),
            "image_url": self.image_url,
            "sketch_url": self.sketch_url,
            "feedback_notes": self.feedback_notes,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        for field in CHARACTER_APPEARANCE_FIELDS:
            payload[field] = getattr(self, field)
        return payload

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Character id={self.id} project={self.project_id} main={self.is_main}>"


__all__ = [
    "Base",
    "Project",
    "Page",
    "Character",
    "PROJECT_STATUSES",
    "CHARACTER_APPEARANCE_FIELDS",
]
