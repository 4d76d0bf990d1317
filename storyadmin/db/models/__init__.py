"""ORM models aggregate exports."""
from .projects import (  # noqa: F401
	Base,
	Project,
	Page,
	Character,
	PROJECT_STATUSES,
	CHARACTER_APPEARANCE_FIELDS,
)

__all__ = [
	"Base",
	"Project",
	"Page",
	"Character",
	"PROJECT_STATUSES",
	"CHARACTER_APPEARANCE_FIELDS",
]
