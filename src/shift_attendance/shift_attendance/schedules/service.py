from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DAYS_PER_WEEK
from ..shifts.extractor import build_all_shifts, build_shifts_for_person
from ..shifts.model import Shift, WeekWindow
from ..shifts.windows import clamp_week_index, filter_shifts_in_range, week_bounds
from .model import Timeline
from .repository import TimetableSource


@dataclass(frozen=True)
class WeekPage:
    window: WeekWindow
    shifts: list[Shift]

    @property
    def prev_index(self) -> int:
        return clamp_week_index(self.window.index - 1)

    @property
    def next_index(self) -> int:
        return self.window.index + 1


class ScheduleService:
    def __init__(self, source: TimetableSource, *, days_per_week: int = DAYS_PER_WEEK):
        self._source = source
        self._days_per_week = int(days_per_week)

    @property
    def days_per_week(self) -> int:
        return self._days_per_week

    def load(self) -> Timeline:
        return self._source.load()

    def shifts_for(self, timeline: Timeline, person: str) -> list[Shift]:
        return build_shifts_for_person(timeline.samples, person)

    def all_shifts(self, timeline: Timeline) -> list[Shift]:
        return build_all_shifts(timeline)

    def week_page(self, timeline: Timeline, shifts: list[Shift], week_index: int) -> WeekPage:
        window = week_bounds(timeline.anchor, clamp_week_index(week_index), days_per_week=self._days_per_week)
        in_range = sorted(filter_shifts_in_range(shifts, window.start, window.end), key=lambda s: s.start)
        return WeekPage(window=window, shifts=in_range)
