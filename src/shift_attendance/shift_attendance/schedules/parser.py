"""Timeline parser: raw timetable rows -> sorted, de-duplicated samples.

Row format (CSV with header)::

    Time,Alex,Cole,...,Vincent
    1/18/2026 12:00:00,FALSE,TRUE,...

For each person, TRUE means they are on from that row's time until the next
row's time (irregular spacing allowed).
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_schedule_time
from ..core.constants import TIME_COLUMN, TRUE_TOKEN
from ..core.exceptions import MalformedRow, SourceUnavailable
from .model import Timeline, as_samples

logger = logging.getLogger(__name__)


def people_from_headers(headers: Sequence[Optional[str]], *, time_column: str = TIME_COLUMN) -> tuple[str, ...]:
    """Every non-blank header except the time column, in header order."""
    people: list[str] = []
    for h in headers:
        name = (h or "").strip()
        if name and name != time_column and name not in people:
            people.append(name)
    return tuple(people)


def parse_flag(value: object) -> bool:
    return str(value if value is not None else "").strip().upper() == TRUE_TOKEN


def parse_row(
    row: Mapping[str, object],
    people: Sequence[str],
    *,
    row_number: int,
    tz: Optional[tzinfo] = None,
    time_column: str = TIME_COLUMN,
) -> tuple[datetime, dict[str, bool]]:
    raw_time = row.get(time_column)
    instant = parse_schedule_time(raw_time, tz)
    if instant is None:
        raise MalformedRow(f"Row {row_number}: invalid {time_column} {raw_time!r}", row_number=row_number, raw_time=raw_time)
    return instant, {p: parse_flag(row.get(p)) for p in people}


def is_blank_row(row: Mapping[str, object]) -> bool:
    return not any(v.strip() for v in row.values() if isinstance(v, str))


def parse_timeline(
    rows: Iterable[Mapping[str, object]],
    headers: Sequence[Optional[str]],
    *,
    tz: Optional[tzinfo] = None,
    time_column: str = TIME_COLUMN,
) -> Timeline:
    """Build a Timeline from header + dict rows; the first row is source line 2."""
    return parse_numbered_rows(enumerate(rows, start=2), headers, tz=tz, time_column=time_column)


def parse_numbered_rows(
    numbered_rows: Iterable[tuple[int, Mapping[str, object]]],
    headers: Sequence[Optional[str]],
    *,
    tz: Optional[tzinfo] = None,
    time_column: str = TIME_COLUMN,
) -> Timeline:
    """Build a Timeline from ``(source line, row)`` pairs.

    Blank rows are ignored. Rows with an unparseable time are logged and
    skipped. Duplicate instants collapse to the last row seen in source order.
    """
    people = people_from_headers(headers, time_column=time_column)
    if not people:
        raise SourceUnavailable("Schedule has no person columns")

    by_instant: dict[datetime, dict[str, bool]] = {}
    seen_rows = 0
    skipped = 0
    for row_number, row in numbered_rows:
        if is_blank_row(row):
            continue
        seen_rows += 1
        try:
            instant, flags = parse_row(row, people, row_number=row_number, tz=tz, time_column=time_column)
        except MalformedRow as e:
            skipped += 1
            logger.warning("Skipping schedule row: %s", e)
            continue
        if instant in by_instant:
            logger.debug("Duplicate instant %s at row %d; keeping the later row", instant, row_number)
        by_instant[instant] = flags

    if not seen_rows:
        raise SourceUnavailable("Schedule appears empty")
    if not by_instant:
        raise SourceUnavailable("Schedule has no rows with a valid time")

    ordered = sorted(by_instant.items(), key=lambda item: item[0])
    return Timeline(people=people, samples=as_samples(ordered), skipped_rows=skipped)
