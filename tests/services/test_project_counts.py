"""Tests for the project count summary."""
from __future__ import annotations

import threading

import pytest

from storyadmin.db.engine import init_engine_once, reset_for_tests
from storyadmin.db.repositories import characters_repo, pages_repo, projects_repo
from storyadmin.db.repositories.counts_repo import CountQuery
from storyadmin.services import project_counts
from storyadmin.services.project_counts import (
    ProjectCounts,
    ProjectCountsError,
    ProjectCountsValidationError,
    get_project_counts,
)


@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    reset_for_tests(drop=True)
    monkeypatch.setenv("STORYADMIN_DB_PATH", str(tmp_path / "storyadmin.db"))
    init_engine_once()
    yield
    reset_for_tests(drop=True)


class FakeStore:
    def __init__(self, results, barrier=None):
        self.results = results
        self.barrier = barrier
        self.calls = []
        self._lock = threading.Lock()

    @staticmethod
    def key(query: CountQuery) -> str:
        if query.relation == "pages":
            return "pages"
        return "character_images" if query.not_empty else "characters"

    def count(self, query: CountQuery):
        with self._lock:
            self.calls.append(query)
        if self.barrier is not None:
            self.barrier.wait()
        value = self.results[self.key(query)]
        if isinstance(value, Exception):
            raise value
        return value


def _make_project(title: str = "Hedgehog Adventures") -> str:
    project = projects_repo.create_project(
        book_title=title,
        author_firstname="Ana",
        author_lastname="Berzina",
        author_email="ana@example.com",
        author_phone="+37120000000",
        review_token=title.lower().replace(" ", "")[:32],
    )
    return project.id


def test_counts_summary_from_database():
    project_id = _make_project()
    for number in range(1, 6):
        pages_repo.create_page(project_id, number, story_text=f"Page {number}")
    characters_repo.create_character(project_id, name="Hero", is_main=True, image_url="")
    characters_repo.create_character(project_id, name="Fox", image_url="/media/x/fox.png")
    characters_repo.create_character(project_id, name="Owl", image_url="/media/x/owl.png")

    counts = get_project_counts(project_id)

    assert counts == ProjectCounts(page_count=5, character_count=3, has_images=True)
    assert counts.as_dict() == {"pageCount": 5, "characterCount": 3, "hasImages": True}


def test_counts_for_empty_project():
    project_id = _make_project()

    counts = get_project_counts(project_id)

    assert counts.as_dict() == {"pageCount": 0, "characterCount": 0, "hasImages": False}


def test_unresolved_main_character_image_does_not_count():
    project_id = _make_project()
    characters_repo.create_character(project_id, name="Hero", is_main=True, image_url="/media/x/hero.png")

    assert get_project_counts(project_id).has_images is False

    characters_repo.create_character(project_id, name="Cat", image_url=None)
    assert get_project_counts(project_id).has_images is False


def test_resolved_main_character_image_counts():
    project_id = _make_project()
    characters_repo.create_character(
        project_id,
        name="Hero",
        is_main=True,
        is_resolved=True,
        image_url="/media/x/hero.png",
    )

    counts = get_project_counts(project_id)
    assert counts.character_count == 1
    assert counts.has_images is True


def test_counts_only_include_the_requested_project():
    first = _make_project("First Book")
    second = _make_project("Second Book")
    pages_repo.create_page(first, 1, story_text="a")
    pages_repo.create_page(second, 1, story_text="b")
    pages_repo.create_page(second, 2, story_text="c")

    assert get_project_counts(first).page_count == 1
    assert get_project_counts(second).page_count == 2


def test_counts_are_idempotent():
    project_id = _make_project()
    pages_repo.create_page(project_id, 1, story_text="a")
    characters_repo.create_character(project_id, name="Fox", image_url="/media/x/fox.png")

    assert get_project_counts(project_id) == get_project_counts(project_id)


def test_queries_run_concurrently():
    # Each call blocks until all three are in flight; sequential execution
    # would break the barrier.
    barrier = threading.Barrier(3, timeout=5)
    store = FakeStore({"pages": 2, "characters": 1, "character_images": 1}, barrier=barrier)

    counts = get_project_counts("p-1", store=store)

    assert counts == ProjectCounts(page_count=2, character_count=1, has_images=True)
    assert len(store.calls) == 3
    assert {q.project_id for q in store.calls} == {"p-1"}


def test_failed_sub_query_fails_whole_summary():
    cause = RuntimeError("connection reset")
    store = FakeStore({"pages": 5, "characters": cause, "character_images": 2})

    with pytest.raises(ProjectCountsError) as excinfo:
        get_project_counts("p-1", store=store)

    assert excinfo.value.query == project_counts.CHARACTERS_QUERY
    assert excinfo.value.project_id == "p-1"
    assert excinfo.value.__cause__ is cause


def test_missing_counts_are_treated_as_zero():
    store = FakeStore({"pages": None, "characters": None, "character_images": None})

    counts = get_project_counts("p-1", store=store)

    assert counts == ProjectCounts(page_count=0, character_count=0, has_images=False)


@pytest.mark.parametrize("project_id", ["", "   ", None])
def test_project_id_is_required(project_id):
    store = FakeStore({"pages": 1, "characters": 1, "character_images": 1})

    with pytest.raises(ProjectCountsValidationError):
        get_project_counts(project_id, store=store)
    assert store.calls == []


def test_image_query_shape():
    queries = project_counts.build_queries("p-9")
    images = queries[project_counts.IMAGES_QUERY]

    assert images.relation == "characters"
    assert images.project_id == "p-9"
    assert images.not_empty == ("image_url",)
    assert set(images.any_of) == {("is_main", False), ("is_resolved", True)}


def test_project_id_is_passed_through_unchanged():
    store = FakeStore({"pages": 1, "characters": 1, "character_images": 0})

    get_project_counts(" p-7 ", store=store)

    assert {query.project_id for query in store.calls} == {" p-7 "}
