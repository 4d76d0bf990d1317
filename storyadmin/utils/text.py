"""Small text normalization helpers shared by services."""
from __future__ import annotations

from typing import Any, Optional, Tuple


def normalize_email(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip().lower()
    return cleaned or None


def clean_optional_text(raw: Any) -> Optional[str]:
    """Strip strings; empty strings and non-strings become None."""
    if raw is None:
        return None
    if not isinstance(raw, str):
        raw = str(raw)
    cleaned = raw.strip()
    return cleaned or None


def split_full_name(full_name: str) -> Tuple[str, str]:
    """Split "First Middle Last" into ("First", "Middle Last")."""
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


__all__ = ["normalize_email", "clean_optional_text", "split_full_name"]
