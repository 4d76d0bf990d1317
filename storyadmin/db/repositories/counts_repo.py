"""Row counting over project-owned relations.

The aggregate reader only needs "how many rows of relation X belong to
project P (and satisfy a few extra predicates)". `CountQuery` describes that
request and `CountStore` is the capability the reader consumes, so services
and tests can swap the SQL implementation for a fake.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

from sqlalchemy import func, or_

from storyadmin.db import app_session
from storyadmin.db.models import Character, Page


@dataclass(frozen=True)
class CountQuery:
    """Count rows of `relation` whose `project_id` equals `project_id`.

    not_empty: columns that must be non-NULL and not the empty string.
    any_of: (column, value) equalities of which at least one must hold.
    """

    relation: str
    project_id: str
    not_empty: Tuple[str, ...] = ()
    any_of: Tuple[Tuple[str, Any], ...] = ()


class CountStore(Protocol):
    def count(self, query: CountQuery) -> Optional[int]:
        ...


_RELATIONS: Dict[str, Any] = {
    "pages": Page,
    "characters": Character,
}


def _model_for(relation: str):
    model = _RELATIONS.get(relation)
    if model is None:
        raise ValueError(f"unknown_relation:{relation}")
    return model


def _column(model, name: str):
    table = model.__table__
    if name not in table.c:
        raise ValueError(f"unknown_column:{model.__tablename__}.{name}")
    return getattr(model, name)


class SqlCountStore:
    """`CountStore` backed by the application database.

    Every call opens its own session, so one instance may be shared by
    concurrently running threads.
    """

    def count(self, query: CountQuery) -> Optional[int]:
        model = _model_for(query.relation)
        criteria = [_column(model, "project_id") == query.project_id]
        for name in query.not_empty:
            col = _column(model, name)
            criteria.append(col.isnot(None))
            criteria.append(col != "")
        if query.any_of:
            criteria.append(or_(*[_column(model, name) == value for name, value in query.any_of]))
        with app_session() as session:
            return session.query(func.count(model.id)).filter(*criteria).scalar()


def count_pages_by_project(project_ids) -> Dict[str, int]:
    """Page counts for many projects in a single grouped query."""
    ids = [pid for pid in project_ids if pid]
    if not ids:
        return {}
    with app_session() as session:
        rows = (
            session.query(Page.project_id, func.count(Page.id))
            .filter(Page.project_id.in_(ids))
            .group_by(Page.project_id)
            .all()
        )
    return {project_id: int(total or 0) for project_id, total in rows}


__all__ = [
    "CountQuery",
    "CountStore",
    "SqlCountStore",
    "count_pages_by_project",
]
