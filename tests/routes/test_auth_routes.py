"""Tests for admin login and logout routes."""
from __future__ import annotations

import pytest

from storyadmin.db.engine import reset_for_tests
from storyadmin.startup.wiring import create_app


@pytest.fixture
def app(monkeypatch, tmp_path):
    reset_for_tests(drop=True)
    monkeypatch.setenv("STORYADMIN_DB_PATH", str(tmp_path / "storyadmin.db"))
    monkeypatch.setenv("ADMIN_USERNAME", "editor")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret!")
    monkeypatch.delenv("ADMIN_PASSWORD_HASH", raising=False)
    monkeypatch.delenv("ADMIN_SESSION_COOKIE", raising=False)
    monkeypatch.delenv("STORYADMIN_ENV", raising=False)
    yield create_app({"TESTING": True})
    reset_for_tests(drop=True)


@pytest.fixture
def client(app):
    return app.test_client()


def _session_cookie(resp):
    for header in resp.headers.getlist("Set-Cookie"):
        if header.startswith("admin_session_v2="):
            return header
    return None


def test_login_page_keeps_redirect_target(client):
    resp = client.get("/login?redirect=%2Fadmin%2Fproject%2Fabc")

    assert resp.status_code == 200
    assert 'name="redirect" value="/admin/project/abc"' in resp.get_data(as_text=True)


def test_form_login_sets_cookie_and_redirects(client):
    resp = client.post(
        "/login",
        data={"username": "editor", "password": "s3cret!", "redirect": "/admin/project/abc"},
    )

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/project/abc")
    cookie = _session_cookie(resp)
    assert cookie is not None
    assert cookie.startswith("admin_session_v2=true")
    assert "HttpOnly" in cookie
    assert "SameSite=Lax" in cookie


def test_form_login_rejects_bad_password(client):
    resp = client.post("/login", data={"username": "editor", "password": "nope"})

    assert resp.status_code == 401
    assert "Invalid username or password." in resp.get_data(as_text=True)
    assert _session_cookie(resp) is None


@pytest.mark.parametrize("target", ["https://evil.example/", "//evil.example", "admin"])
def test_offsite_redirect_targets_fall_back_to_dashboard(client, target):
    resp = client.post("/login", data={"username": "editor", "password": "s3cret!", "redirect": target})

    assert resp.headers["Location"].endswith("/admin/dashboard")


def test_json_login(client):
    bad = client.post("/api/auth/login", json={"username": "editor", "password": "x"})
    assert bad.status_code == 401
    assert bad.get_json()["error"] == "invalid_credentials"

    assert client.post("/api/auth/login", data="[]", content_type="application/json").status_code == 400

    ok = client.post("/api/auth/login", json={"username": "editor", "password": "s3cret!"})
    assert ok.status_code == 200
    assert ok.get_json() == {"success": True}
    assert _session_cookie(ok) is not None


def test_login_then_dashboard_then_logout(client):
    assert client.get("/admin/dashboard").status_code == 302

    client.post("/login", data={"username": "editor", "password": "s3cret!"})
    assert client.get("/admin/dashboard").status_code == 200

    resp = client.post("/api/auth/logout")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
    assert client.get("/admin/dashboard").status_code == 302


def test_signed_in_user_skips_login_form(client):
    client.set_cookie("admin_session_v2", "true")

    resp = client.get("/login?redirect=%2Fadmin%2Fproject%2Fabc")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/project/abc")
