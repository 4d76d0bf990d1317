"""Tests for the admin HTML views and health probe."""
from __future__ import annotations

import pytest

from storyadmin.db.engine import reset_for_tests
from storyadmin.routes import admin_pages
from storyadmin.services import pages_service, projects_service
from storyadmin.services.project_counts import ProjectCountsError
from storyadmin.startup.wiring import create_app


@pytest.fixture
def client(monkeypatch, tmp_path):
    reset_for_tests(drop=True)
    monkeypatch.setenv("STORYADMIN_DB_PATH", str(tmp_path / "storyadmin.db"))
    monkeypatch.delenv("ADMIN_SESSION_COOKIE", raising=False)
    app = create_app({"TESTING": True})
    client = app.test_client()
    client.set_cookie("admin_session_v2", "true")
    yield client
    reset_for_tests(drop=True)


@pytest.fixture
def project():
    return projects_service.create_project({
        "book_title": "Moon Garden",
        "author_fullname": "Elza Berzina",
        "author_email": "elza@example.com",
        "author_phone": "+37120000005",
        "main_character_name": "Runcis",
    })


def test_admin_root_redirects_to_dashboard(client):
    resp = client.get("/admin/")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/dashboard")


def test_dashboard_empty_state(client):
    resp = client.get("/admin/dashboard")

    assert resp.status_code == 200
    assert "No projects yet." in resp.get_data(as_text=True)


def test_dashboard_lists_projects(client, project):
    pages_service.create_page(project["id"], {"story_text": "a"})

    body = client.get("/admin/dashboard").get_data(as_text=True)

    assert "Moon Garden" in body
    assert '<td class="page-count">1</td>' in body


def test_project_detail_shows_counts(client, project):
    pages_service.create_page(project["id"], {"story_text": "a"})
    pages_service.create_page(project["id"], {"story_text": "b"})

    resp = client.get(f"/admin/project/{project['id']}")

    body = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert '<dd class="page-count">2</dd>' in body
    assert '<dd class="character-count">1</dd>' in body
    assert '<dd class="has-images">no</dd>' in body


def test_project_detail_error_state(client, project, monkeypatch):
    def failing(project_id):
        raise ProjectCountsError("pages", project_id)

    monkeypatch.setattr(admin_pages, "get_project_counts", failing)

    resp = client.get(f"/admin/project/{project['id']}")

    assert resp.status_code == 503
    body = resp.get_data(as_text=True)
    assert "counts-error" in body
    assert 'class="page-count"' not in body


def test_project_detail_missing(client):
    assert client.get("/admin/project/missing").status_code == 404


def test_healthz_is_public(client):
    client.delete_cookie("admin_session_v2")

    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "db": True}
