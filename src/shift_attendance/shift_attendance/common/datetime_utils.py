from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError

_SCHEDULE_FORMATS = ("%m/%d/%Y %H:%M:%S", "%m/%d/%Y %H:%M")


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Return the configured schedule zone, or None for process-local time."""
    name = (name or "").strip()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as e:
        raise ValidationError(f"Unknown timezone: {name}") from e


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current time in the schedule's frame.

    Note: Wrapped so tests can patch/mocked easier. Naive (process-local)
    when no zone is configured, aware otherwise.
    """
    return datetime.now(tz) if tz else datetime.now()


def parse_schedule_time(value: object, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse a timetable cell like ``1/18/2026 12:00:00`` as a local wall-clock instant.

    Seconds are dropped (schedules are minute-granular). Returns None when the
    value cannot be parsed.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    parsed: Optional[datetime] = None
    for fmt in _SCHEDULE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is not None:
            parsed = to_local(parsed, tz)

    parsed = parsed.replace(second=0, microsecond=0)
    if tz and parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed


def to_iso_utc(value: datetime) -> str:
    """Normalize an instant to ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive values are taken as process-local time. This string is part of the
    attendance key, so every writer must go through here.
    """
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso_utc(value: object) -> datetime:
    """Parse an ISO instant (``Z`` or offset suffix) into an aware UTC datetime.

    Naive datetimes (as returned by MySQL DATETIME columns) are taken as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"Invalid ISO timestamp: {value!r}") from e
    else:
        raise ValidationError(f"Invalid ISO timestamp: {value!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def normalize_iso(value: object) -> str:
    return to_iso_utc(parse_iso_utc(value))


def to_local(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert an aware instant into the schedule's frame (naive local when tz is None)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz) if tz else value
    if tz:
        return value.astimezone(tz)
    return value.astimezone().replace(tzinfo=None)
