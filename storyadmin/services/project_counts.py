"""Per-project count summary (pages, characters, characters with images).

The three counts are independent reads, so they run concurrently on a small
thread pool and are joined before returning. A failed sub-query fails the
whole summary; no partial or zeroed summary is ever returned.
"""
from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Dict, Optional

from storyadmin.db.repositories.counts_repo import CountQuery, CountStore, SqlCountStore
from storyadmin.utils.logging import get_logger

LOG = get_logger("storyadmin.project_counts")

PAGES_QUERY = "pages"
CHARACTERS_QUERY = "characters"
IMAGES_QUERY = "character_images"


class ProjectCountsValidationError(ValueError):
    """Raised when no project id is supplied."""


class ProjectCountsError(RuntimeError):
    """A count sub-query failed; the original error is chained as __cause__."""

    def __init__(self, query: str, project_id: str):
        super().__init__(f"{query}_count_failed")
        self.query = query
        self.project_id = project_id


@dataclass(frozen=True)
class ProjectCounts:
    page_count: int
    character_count: int
    has_images: bool

    def as_dict(self) -> Dict[str, object]:
        return {
            "pageCount": self.page_count,
            "characterCount": self.character_count,
            "hasImages": self.has_images,
        }


def build_queries(project_id: str) -> Dict[str, CountQuery]:
    # Images only count for side characters, or for the main character once
    # resolved.
    return {
        PAGES_QUERY: CountQuery("pages", project_id),
        CHARACTERS_QUERY: CountQuery("characters", project_id),
        IMAGES_QUERY: CountQuery(
            "characters",
            project_id,
            not_empty=("image_url",),
            any_of=(("is_main", False), ("is_resolved", True)),
        ),
    }


def _as_count(value: Optional[int]) -> int:
    return int(value or 0)


def get_project_counts(project_id: str, store: Optional[CountStore] = None) -> ProjectCounts:
    if not isinstance(project_id, str) or not project_id.strip():
        raise ProjectCountsValidationError("project_id_required")
    store = store or SqlCountStore()
    queries = build_queries(project_id)

    executor = ThreadPoolExecutor(max_workers=len(queries), thread_name_prefix="project-counts")
    try:
        futures = {executor.submit(store.count, query): name for name, query in queries.items()}
        done, _pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future, name in futures.items():
            if future not in done:
                continue
            exc = future.exception()
            if exc is not None:
                LOG.warning("Count sub-query %s failed project_id=%s: %s", name, project_id, exc)
                raise ProjectCountsError(name, project_id) from exc
        results = {name: _as_count(future.result()) for future, name in futures.items()}
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return ProjectCounts(
        page_count=results[PAGES_QUERY],
        character_count=results[CHARACTERS_QUERY],
        has_images=results[IMAGES_QUERY] > 0,
    )


__all__ = [
    "ProjectCounts",
    "ProjectCountsError",
    "ProjectCountsValidationError",
    "build_queries",
    "get_project_counts",
]
