from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import normalize_iso
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthenticationError, ValidationError
from ..geofence.provider import LocationProvider
from ..schedules.model import Timeline
from ..schedules.service import ScheduleService
from ..shifts.model import Shift, ShiftKey, WeekWindow
from ..shifts.windows import week_index_for
from .model import AttendanceRecord
from .service import AttendanceService, CheckInOutcome, status_of


@dataclass(frozen=True)
class ShiftRow:
    shift: Shift
    status: AttendanceStatus
    record: Optional[AttendanceRecord] = None


@dataclass(frozen=True)
class WeekView:
    window: WeekWindow
    rows: list[ShiftRow]
    verifiable: list[Shift]
    prev_index: int
    next_index: int
    missed_written: int = 0


@dataclass
class VolunteerSession:
    """Per-user working state: loaded timeline, derived shifts and attendance index.

    Built fresh for each request; nothing here is shared between sessions.
    """

    person: str
    timeline: Timeline
    shifts: list[Shift]
    records: dict[ShiftKey, AttendanceRecord]
    schedule: ScheduleService
    attendance: AttendanceService
    clock: Callable[[], datetime]
    _by_key: dict[ShiftKey, Shift] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self._by_key = {s.key: s for s in self.shifts}

    @classmethod
    def open(
        cls,
        *,
        person: str,
        schedule: ScheduleService,
        attendance: AttendanceService,
        clock: Callable[[], datetime],
        timeline: Optional[Timeline] = None,
    ) -> "VolunteerSession":
        timeline = timeline or schedule.load()
        if not timeline.has_person(person):
            raise AuthenticationError(f'Name "{person}" not found in the schedule header.')
        return cls(
            person=person,
            timeline=timeline,
            shifts=schedule.shifts_for(timeline, person),
            records=attendance.records_for(person),
            schedule=schedule,
            attendance=attendance,
            clock=clock,
        )

    def find_shift(self, shift_start: str, shift_end: str) -> Shift:
        try:
            key = ShiftKey(self.person, normalize_iso(shift_start), normalize_iso(shift_end))
        except ValidationError:
            raise ValidationError("Invalid shift bounds")
        shift = self._by_key.get(key)
        if shift is None:
            raise ValidationError("Shift not found in your schedule")
        return shift

    def record_missed_if_needed(self, *, now: Optional[datetime] = None) -> list[AttendanceRecord]:
        return self.attendance.record_missed_if_needed(self.shifts, self.records, now=now or self.clock())

    def verifiable_shifts(self, *, now: Optional[datetime] = None) -> list[Shift]:
        return self.attendance.verifiable_shifts(self.shifts, self.records, now=now or self.clock())

    def week(self, week_index: Optional[int] = None) -> WeekView:
        """One page: best-effort missed recording first, then statuses and check-in options.

        Without an index, opens the page that contains the current time.
        """
        now = self.clock()
        if week_index is None:
            week_index = week_index_for(self.timeline.anchor, now, days_per_week=self.schedule.days_per_week)
        written = self.record_missed_if_needed(now=now)
        page = self.schedule.week_page(self.timeline, self.shifts, week_index)
        rows = [ShiftRow(shift=s, status=status_of(s, self.records), record=self.records.get(s.key)) for s in page.shifts]
        return WeekView(
            window=page.window,
            rows=rows,
            verifiable=self.verifiable_shifts(now=now),
            prev_index=page.prev_index,
            next_index=page.next_index,
            missed_written=len(written),
        )

    def check_in(self, *, shift_start: str, shift_end: str, provider: LocationProvider) -> CheckInOutcome:
        shift = self.find_shift(shift_start, shift_end)
        return self.attendance.check_in(shift, provider, records=self.records, now=self.clock())
