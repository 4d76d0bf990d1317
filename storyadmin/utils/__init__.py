"""Utility helpers."""
from .logging import get_logger
from .text import clean_optional_text, normalize_email, split_full_name

__all__ = [
    "get_logger",
    "clean_optional_text",
    "normalize_email",
    "split_full_name",
]
