from __future__ import annotations

from typing import Any, Mapping

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_float(payload: Mapping[str, Any], field_name: str) -> float:
    raw = payload.get(field_name)
    if raw is None or isinstance(raw, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def require_week_index(value: Any) -> int:
    """Parse a page index from the query string; negative values clamp to 0."""
    if value is None or value == "":
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        raise ValidationError("week must be an integer")
