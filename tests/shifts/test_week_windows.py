from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.shift_attendance.shift_attendance.core.exceptions import ValidationError
from src.shift_attendance.shift_attendance.shifts.model import Shift
from src.shift_attendance.shift_attendance.shifts.windows import (
    clamp_week_index,
    filter_shifts_in_range,
    week_bounds,
    week_index_for,
)

ANCHOR = datetime(2026, 1, 18, 12, 0)


def test_week_zero_starts_at_anchor():
    assert week_bounds(ANCHOR, 0).start == ANCHOR
    assert week_bounds(ANCHOR, 0).end == ANCHOR + timedelta(days=7)


def test_pages_are_contiguous():
    for i in range(20):
        assert week_bounds(ANCHOR, i + 1).start == week_bounds(ANCHOR, i).end


def test_negative_index_is_rejected_and_clamped():
    with pytest.raises(ValueError):
        week_bounds(ANCHOR, -1)
    assert clamp_week_index(-3) == 0
    assert clamp_week_index(4) == 4


def test_custom_page_length():
    window = week_bounds(ANCHOR, 2, days_per_week=3)
    assert window.start == ANCHOR + timedelta(days=6)
    assert window.end == ANCHOR + timedelta(days=9)


def test_partial_overlap_is_included_touching_is_not():
    window = week_bounds(ANCHOR, 1)
    straddling = Shift("Alex", window.start - timedelta(hours=2), window.start + timedelta(hours=2))
    inside = Shift("Alex", window.start + timedelta(days=1), window.start + timedelta(days=1, hours=2))
    ends_at_start = Shift("Alex", window.start - timedelta(hours=2), window.start)
    starts_at_end = Shift("Alex", window.end, window.end + timedelta(hours=2))

    kept = filter_shifts_in_range([straddling, inside, ends_at_start, starts_at_end], window.start, window.end)

    assert kept == [straddling, inside]


def test_week_index_for_instant():
    assert week_index_for(ANCHOR, ANCHOR - timedelta(days=3)) == 0
    assert week_index_for(ANCHOR, ANCHOR + timedelta(days=6, hours=23)) == 0
    assert week_index_for(ANCHOR, ANCHOR + timedelta(days=7)) == 1
    assert week_index_for(ANCHOR, ANCHOR + timedelta(days=15)) == 2


def test_dst_week_uses_calendar_days():
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

    try:
        tz = ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")

    anchor = datetime(2026, 3, 4, 0, 0, tzinfo=tz)
    window = week_bounds(anchor, 0)

    assert window.end == datetime(2026, 3, 11, 0, 0, tzinfo=tz)
    elapsed = window.end.astimezone(timezone.utc) - window.start.astimezone(timezone.utc)
    assert elapsed == timedelta(days=7) - timedelta(hours=1)


def test_index_past_calendar_end_is_a_validation_error():
    with pytest.raises(ValidationError):
        week_bounds(ANCHOR, 1_000_000)
    with pytest.raises(ValidationError):
        week_bounds(ANCHOR, 10**12)
