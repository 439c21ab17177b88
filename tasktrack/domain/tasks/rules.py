from __future__ import annotations

from typing import Optional

from tasktrack.constants import FILTER_MODES, SORT_MODES
from tasktrack.domain.common.errors import ValidationError


def _ensure_encodable(value: str, field: str) -> None:
    # lone surrogates cannot be stored as UTF-8
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError(f"{field} contains characters that cannot be stored.") from None


def validate_text(text: str) -> None:
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Task text is required.")
    _ensure_encodable(text, "Task text")


def normalize_description(description: Optional[str]) -> str:
    if description is None:
        return ""
    if not isinstance(description, str):
        raise ValidationError("Description must be a string.")
    _ensure_encodable(description, "Description")
    return description


def validate_filter_mode(mode: str) -> None:
    if mode not in FILTER_MODES:
        raise ValidationError(f"Unknown filter mode: {mode!r}")


def validate_sort_mode(mode: str) -> None:
    if mode not in SORT_MODES:
        raise ValidationError(f"Unknown sort mode: {mode!r}")
