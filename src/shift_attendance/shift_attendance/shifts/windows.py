"""Week paging relative to the timeline anchor."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from ..core.constants import DAYS_PER_WEEK
from ..core.exceptions import ValidationError
from .model import Shift, WeekWindow


def clamp_week_index(index: int) -> int:
    return max(0, int(index))


def week_bounds(anchor: datetime, week_index: int, *, days_per_week: int = DAYS_PER_WEEK) -> WeekWindow:
    """``[anchor + i*7d, anchor + (i+1)*7d)``.

    Arithmetic is calendar-day on the wall clock (naive or same-zone aware
    datetimes), so a page spanning a DST change is 7*24h +/- 1h.
    """
    if week_index < 0:
        raise ValueError("week_index must be >= 0")
    try:
        start = anchor + timedelta(days=week_index * days_per_week)
        end = start + timedelta(days=days_per_week)
    except OverflowError as e:
        raise ValidationError("week out of range") from e
    return WeekWindow(index=week_index, start=start, end=end)


def filter_shifts_in_range(shifts: Iterable[Shift], start: datetime, end: datetime) -> list[Shift]:
    """Shifts overlapping ``[start, end)``; partial overlap counts."""
    return [s for s in shifts if s.overlaps(start, end)]


def week_index_for(anchor: datetime, instant: datetime, *, days_per_week: int = DAYS_PER_WEEK) -> int:
    """Page that contains ``instant`` (0 for anything before the anchor)."""
    if instant <= anchor:
        return 0
    return (instant - anchor) // timedelta(days=days_per_week)
