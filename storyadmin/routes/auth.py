"""Admin login / logout.

Routes:
    GET  /                  -> landing page with the login link
    GET  /login            -> login form (keeps the ?redirect= target)
    POST /login             -> form login, sets the session cookie
    POST /api/auth/login    -> JSON login
    POST /api/auth/logout   -> clears the session cookie
"""
from __future__ import annotations

from typing import Any, Optional

from flask import Blueprint, jsonify, make_response, redirect, render_template, request
from flask_babel import lazy_gettext as _l

from storyadmin import config as app_config
from storyadmin.services import auth_service
from storyadmin.services.session_gate import LOGIN_PATH, REDIRECT_PARAM, SessionState, session_state
from storyadmin.utils.logging import get_logger

LOG = get_logger("storyadmin.auth_routes")
bp = Blueprint("auth", __name__)

DEFAULT_AFTER_LOGIN = "/admin/dashboard"
_INVALID_CREDENTIALS = _l("Invalid username or password.")


def _sanitize_next(raw_target: Optional[str]) -> str:
    target = (raw_target or "").strip()
    if target.startswith("/") and not target.startswith("//") and "\\" not in target:
        return target
    return DEFAULT_AFTER_LOGIN


def _with_session_cookie(response):
    response.set_cookie(**auth_service.session_cookie_kwargs())
    return response


def _has_admin_session() -> bool:
    cookie_value = request.cookies.get(app_config.session_cookie_name())
    return session_state(cookie_value) is SessionState.AUTHENTICATED


@bp.route("/", methods=["GET"])
def home():
    return render_template("home.html", signed_in=_has_admin_session())


@bp.route(LOGIN_PATH, methods=["GET"])
def login_page():
    target = _sanitize_next(request.args.get(REDIRECT_PARAM))
    if _has_admin_session():
        return redirect(target)
    return render_template("login.html", redirect_target=target, form_errors=[])


@bp.route(LOGIN_PATH, methods=["POST"])
def login_submit():
    username = request.form.get("username")
    password = request.form.get("password")
    target = _sanitize_next(request.form.get(REDIRECT_PARAM) or request.args.get(REDIRECT_PARAM))
    if not auth_service.verify_credentials(username, password):
        LOG.info("Admin form login rejected username=%s", (username or "").strip())
        body = render_template(
            "login.html",
            redirect_target=target,
            form_errors=[str(_INVALID_CREDENTIALS)],
            username=username or "",
        )
        return body, 401
    LOG.info("Admin form login accepted")
    return _with_session_cookie(redirect(target))


@bp.route("/api/auth/login", methods=["POST"])
def api_login():
    payload: Any = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "invalid_payload"}), 400
    if not auth_service.verify_credentials(payload.get("username"), payload.get("password")):
        LOG.info("Admin API login rejected")
        return jsonify({"error": "invalid_credentials", "message": str(_INVALID_CREDENTIALS)}), 401
    LOG.info("Admin API login accepted")
    return _with_session_cookie(make_response(jsonify({"success": True})))


@bp.route("/api/auth/logout", methods=["POST"])
def api_logout():
    response = redirect(LOGIN_PATH)
    response.delete_cookie(app_config.session_cookie_name(), path="/")
    LOG.info("Admin session closed")
    return response


def register_auth(app: Any) -> None:
    if getattr(app, "_storyadmin_auth_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_storyadmin_auth_bp", bp)
    LOG.debug("auth blueprint registered")


__all__ = ["register_auth", "bp"]
