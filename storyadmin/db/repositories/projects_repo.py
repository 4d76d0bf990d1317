"""Repository helpers for project records."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from storyadmin.db import app_session
from storyadmin.db.models import Character, Page, Project


class ProjectExistsError(Exception):
    """Raised when a project id or review token collides with an existing row."""


def list_projects() -> List[Project]:
    with app_session() as session:
        return (
            session.query(Project)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all()
        )


def get_project(project_id: str) -> Optional[Project]:
    with app_session() as session:
        return session.query(Project).filter(Project.id == project_id).one_or_none()


def project_exists(project_id: str) -> bool:
    with app_session() as session:
        return session.query(Project.id).filter(Project.id == project_id).first() is not None


def create_project(**fields: Any) -> Project:
    project = Project(**fields)
    try:
        with app_session() as session:
            session.add(project)
    except IntegrityError as exc:
        raise ProjectExistsError("Project already exists") from exc
    return project


def update_project(project_id: str, changes: Dict[str, Any]) -> Optional[Project]:
    with app_session() as session:
        project = session.query(Project).filter(Project.id == project_id).one_or_none()
        if not project:
            return None
        for key, value in changes.items():
            setattr(project, key, value)
        return project


def delete_project(project_id: str) -> Optional[Dict[str, Any]]:
    """Delete a project with its pages and characters.

    Returns the deleted title and child row counts, or None when missing.
    """
    with app_session() as session:
        project = session.query(Project).filter(Project.id == project_id).one_or_none()
        if not project:
            return None
        characters = (
            session.query(Character)
            .filter(Character.project_id == project_id)
            .delete(synchronize_session=False)
        )
        pages = (
            session.query(Page)
            .filter(Page.project_id == project_id)
            .delete(synchronize_session=False)
        )
        title = project.book_title
        session.delete(project)
    return {"project": title, "characters": characters, "pages": pages}


def delete_all_projects() -> List[str]:
    """Delete every project and child row; returns the removed project ids."""
    with app_session() as session:
        ids = [row[0] for row in session.query(Project.id).all()]
        if not ids:
            return []
        session.query(Character).delete(synchronize_session=False)
        session.query(Page).delete(synchronize_session=False)
        session.query(Project).delete(synchronize_session=False)
    return ids


__all__ = [
    "ProjectExistsError",
    "list_projects",
    "get_project",
    "project_exists",
    "create_project",
    "update_project",
    "delete_project",
    "delete_all_projects",
]
