"""Shift extractor: run-length decode one person's flag signal into shifts."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..schedules.model import Sample, Timeline
from .model import Shift

logger = logging.getLogger(__name__)


def build_shifts_for_person(samples: Sequence[Sample], person: str) -> list[Shift]:
    """Maximal TRUE runs as ``[start, end)`` shifts, ascending by start.

    A run ends at the instant of the next sample that is FALSE, not at the
    last TRUE sample. A run still on at the final sample is closed at that
    final instant: the real end lies past the data horizon.
    """
    shifts: list[Shift] = []
    if len(samples) < 2:
        return shifts

    start: Optional[datetime] = None
    for cur, nxt in zip(samples, samples[1:]):
        if start is None and cur.is_on(person):
            start = cur.instant
        if start is not None and not nxt.is_on(person):
            shifts.append(Shift(person=person, start=start, end=nxt.instant))
            start = None

    last = samples[-1].instant
    if start is not None and start < last:
        logger.debug("Shift for %s starting %s still on at horizon; closing at %s", person, start, last)
        shifts.append(Shift(person=person, start=start, end=last))

    return shifts


def build_all_shifts(timeline: Timeline, people: Optional[Iterable[str]] = None) -> list[Shift]:
    """Shifts for every person (header order), each person's list ascending by start."""
    out: list[Shift] = []
    for person in people if people is not None else timeline.people:
        out.extend(build_shifts_for_person(timeline.samples, person))
    return out
