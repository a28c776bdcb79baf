from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import NamedTuple

from ..common.datetime_utils import to_iso_utc


class ShiftKey(NamedTuple):
    """Identity triple shared by Shift and AttendanceRecord (ISO-normalized instants)."""

    person: str
    shift_start: str
    shift_end: str


@dataclass(frozen=True)
class Shift:
    """Thực thể miền (domain): Ca trực, half-open interval ``[start, end)``.

    Derived from the timeline, never stored.
    """

    person: str
    start: datetime
    end: datetime

    @property
    def key(self) -> ShiftKey:
        return ShiftKey(self.person, to_iso_utc(self.start), to_iso_utc(self.end))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.end > start and self.start < end


@dataclass(frozen=True)
class WeekWindow:
    index: int
    start: datetime
    end: datetime

    @property
    def last_moment(self) -> datetime:
        return self.end - timedelta(milliseconds=1)
