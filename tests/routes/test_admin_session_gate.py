"""Tests for the before_request session gate guarding /admin."""
from __future__ import annotations

import pytest
from flask import Flask

from storyadmin.routes.session_gate import register_session_gate


@pytest.fixture
def gated_app(monkeypatch):
    monkeypatch.delenv("ADMIN_SESSION_COOKIE", raising=False)
    app = Flask(__name__)
    app.add_url_rule("/admin", endpoint="admin_root", view_func=lambda: "admin")
    app.add_url_rule("/admin/dashboard", endpoint="dashboard", view_func=lambda: "dashboard")
    app.add_url_rule("/admin/project/<pid>/pages", endpoint="pages", view_func=lambda pid: pid)
    app.add_url_rule("/administrator", endpoint="administrator", view_func=lambda: "other")
    app.add_url_rule("/login", endpoint="login", view_func=lambda: "login")
    register_session_gate(app)
    return app


@pytest.fixture
def client(gated_app):
    return gated_app.test_client()


def test_admin_requires_session_cookie(client):
    resp = client.get("/admin/dashboard")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login?redirect=%2Fadmin%2Fdashboard")


def test_nested_admin_path_is_kept_in_redirect(client):
    resp = client.get("/admin/project/1234/pages")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login?redirect=%2Fadmin%2Fproject%2F1234%2Fpages")


def test_admin_root_is_guarded(client):
    resp = client.get("/admin")
    assert resp.status_code == 302


@pytest.mark.parametrize("value", ["false", "TRUE", "1", "", " true"])
def test_non_true_cookie_values_are_rejected(client, value):
    client.set_cookie("admin_session_v2", value)

    resp = client.get("/admin/dashboard")

    assert resp.status_code == 302


def test_true_cookie_lets_request_through(client):
    client.set_cookie("admin_session_v2", "true")

    resp = client.get("/admin/dashboard")

    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "dashboard"


def test_similar_prefixes_are_not_guarded(client):
    assert client.get("/administrator").status_code == 200
    assert client.get("/login").status_code == 200


def test_cookie_name_follows_config(gated_app, monkeypatch):
    monkeypatch.setenv("ADMIN_SESSION_COOKIE", "admin_session_v3")
    client = gated_app.test_client()

    client.set_cookie("admin_session_v2", "true")
    assert client.get("/admin/dashboard").status_code == 302

    client.set_cookie("admin_session_v3", "true")
    assert client.get("/admin/dashboard").status_code == 200


def test_register_is_idempotent(gated_app):
    register_session_gate(gated_app)
    hooks = gated_app.before_request_funcs.get(None, [])
    assert len(hooks) == 1
