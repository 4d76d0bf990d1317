"""Service exports."""

from .projects_service import (
    list_projects,
    get_project,
    create_project,
    update_project,
    delete_project,
    delete_all_projects,
    ProjectValidationError,
    ProjectNotFoundError,
)
from .project_counts import (
    get_project_counts,
    ProjectCounts,
    ProjectCountsError,
    ProjectCountsValidationError,
)
from . import (
    auth_service,
    characters_service,
    image_storage,
    pages_service,
    session_gate,
)

__all__ = [
    "list_projects",
    "get_project",
    "create_project",
    "update_project",
    "delete_project",
    "delete_all_projects",
    "ProjectValidationError",
    "ProjectNotFoundError",
    "get_project_counts",
    "ProjectCounts",
    "ProjectCountsError",
    "ProjectCountsValidationError",
    "auth_service",
    "characters_service",
    "image_storage",
    "pages_service",
    "session_gate",
]
