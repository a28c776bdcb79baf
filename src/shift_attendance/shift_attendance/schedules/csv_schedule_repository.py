from __future__ import annotations

import csv
import io
import logging
from datetime import tzinfo
from pathlib import Path
from typing import Optional

from ..core.exceptions import SourceUnavailable
from .model import Timeline
from .parser import parse_numbered_rows
from .repository import TimetableSource

logger = logging.getLogger(__name__)


def parse_csv_text(text: str, *, tz: Optional[tzinfo] = None) -> Timeline:
    body = text.lstrip("\ufeff")
    if not body.strip():
        raise SourceUnavailable("Schedule appears empty")

    # Leading blank lines are dropped before the header; keep line numbers true to the file.
    stripped = body.lstrip()
    offset = body[: len(body) - len(stripped)].count("\n")

    reader = csv.DictReader(io.StringIO(stripped))
    headers = reader.fieldnames or []
    numbered = ((reader.line_num + offset, row) for row in reader)
    return parse_numbered_rows(numbered, headers, tz=tz)


class CsvTimetableSource(TimetableSource):
    """Timetable read from a CSV file on every load (no caching)."""

    def __init__(self, path: str | Path, *, tz: Optional[tzinfo] = None):
        self._path = Path(path)
        self._tz = tz

    def load(self) -> Timeline:
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceUnavailable(f"Failed to read {self._path}: {e}") from e

        timeline = parse_csv_text(text, tz=self._tz)
        logger.debug(
            "Loaded %s: %d samples, %d people, %d skipped rows",
            self._path, len(timeline), len(timeline.people), timeline.skipped_rows,
        )
        return timeline
