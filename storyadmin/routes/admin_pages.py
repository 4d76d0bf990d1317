"""Admin HTML views.

Routes:
    /admin/                 -> redirect to the dashboard
    /admin/dashboard        -> project list with page counts
    /admin/project/<id>     -> project summary with the count rollup

Access control is handled by the session gate before these views run.
"""
from __future__ import annotations

from typing import Any

from flask import Blueprint, abort, redirect, render_template, url_for
from flask_babel import lazy_gettext as _l

from storyadmin.services import projects_service
from storyadmin.services.project_counts import ProjectCountsError, get_project_counts
from storyadmin.utils.logging import get_logger

bp = Blueprint("admin_pages", __name__, url_prefix="/admin")
LOG = get_logger("storyadmin.admin_pages")

_COUNTS_UNAVAILABLE = _l("Project counts could not be loaded. Try again later.")


@bp.route("/", methods=["GET"])
def landing():
    return redirect(url_for("admin_pages.dashboard"))


@bp.route("/dashboard", methods=["GET"])
def dashboard():
    projects = projects_service.list_projects()
    return render_template("dashboard.html", projects=projects)


@bp.route("/project/<project_id>", methods=["GET"])
def project_detail(project_id: str):
    try:
        project = projects_service.get_project(project_id)
    except projects_service.ProjectNotFoundError:
        abort(404)
    try:
        counts = get_project_counts(project_id)
    except ProjectCountsError as exc:
        LOG.error("Project counts unavailable project_id=%s query=%s", project_id, exc.query)
        body = render_template(
            "project.html",
            project=project,
            counts=None,
            counts_error=str(_COUNTS_UNAVAILABLE),
        )
        return body, 503
    return render_template("project.html", project=project, counts=counts, counts_error=None)


def register_admin_pages(app: Any) -> None:
    if getattr(app, "_storyadmin_admin_pages_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_storyadmin_admin_pages_bp", bp)
    LOG.debug("admin pages blueprint registered")


__all__ = ["register_admin_pages", "bp"]
