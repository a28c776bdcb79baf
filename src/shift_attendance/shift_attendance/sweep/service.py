"""Sweep reconciler: authoritative batch that records missed shifts.

Steps:
  1. recompute every person's shifts from the current timetable;
  2. keep shifts that started more than ``grace`` before the sweep clock;
  3. bulk-read existing records over the candidates' [min start, max end];
  4. drop candidate keys that already have a record;
  5. insert ``missed`` for the rest in chunks, insert-if-absent.

Step 5 never overwrites: a check-in that lands between steps 3 and 5 keeps
its verified record. Safe to run repeatedly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, to_iso_utc
from ..core.constants import SWEEP_CHUNK_SIZE, SWEEP_GRACE_MINUTES
from ..schedules.service import ScheduleService
from ..shifts.model import Shift

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    candidates: int
    already_recorded: int
    written: int
    chunks: int
    ran_at: str


def chunked(items: Sequence, size: int):
    if size <= 0:
        raise ValueError("chunk size must be positive")
    for i in range(0, len(items), size):
        yield items[i : i + size]


class SweepService:
    def __init__(
        self,
        schedule: ScheduleService,
        attendance: AttendanceRepository,
        *,
        grace_minutes: int = SWEEP_GRACE_MINUTES,
        chunk_size: int = SWEEP_CHUNK_SIZE,
        tz: Optional[tzinfo] = None,
    ):
        self._schedule = schedule
        self._attendance = attendance
        self._grace = timedelta(minutes=int(grace_minutes))
        self._chunk_size = int(chunk_size)
        self._tz = tz

    def due_shifts(self, shifts: Sequence[Shift], now: datetime) -> list[Shift]:
        cutoff = now - self._grace
        return [s for s in shifts if s.start < cutoff]

    def run(self, *, now: Optional[datetime] = None, dry_run: bool = False) -> SweepResult:
        now = now or now_local(self._tz)
        ran_at = to_iso_utc(now)

        timeline = self._schedule.load()
        candidates = self.due_shifts(self._schedule.all_shifts(timeline), now)
        if not candidates:
            logger.info("Sweep: no shifts past the %s grace period", self._grace)
            if not dry_run:
                self._attendance.set_last_sweep(ran_at)
            return SweepResult(candidates=0, already_recorded=0, written=0, chunks=0, ran_at=ran_at)

        range_start = to_iso_utc(min(s.start for s in candidates))
        range_end = to_iso_utc(max(s.end for s in candidates))
        existing_keys = {r.key for r in self._attendance.list_in_range(start=range_start, end=range_end)}

        pending: list[AttendanceRecord] = []
        seen = set()
        for shift in candidates:
            key = shift.key
            if key in existing_keys or key in seen:
                continue
            seen.add(key)
            pending.append(AttendanceRecord.missed(key))

        already = len(candidates) - len(pending)
        logger.info("Sweep: %d due shifts, %d already recorded, %d to mark missed", len(candidates), already, len(pending))

        if dry_run:
            return SweepResult(candidates=len(candidates), already_recorded=already, written=0, chunks=0, ran_at=ran_at)

        written = 0
        chunks = 0
        for chunk in chunked(pending, self._chunk_size):
            # Each chunk commits on its own; a failure keeps earlier chunks.
            written += self._attendance.insert_if_absent(chunk)
            chunks += 1

        self._attendance.set_last_sweep(ran_at)
        return SweepResult(candidates=len(candidates), already_recorded=already, written=written, chunks=chunks, ran_at=ran_at)
