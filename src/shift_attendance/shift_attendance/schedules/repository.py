from __future__ import annotations

from typing import Protocol

from .model import Timeline


class TimetableSource(Protocol):
    def load(self) -> Timeline:
        """Read and parse the whole timetable.

        Raises SourceUnavailable when the source cannot be read or parsed.
        """

        raise NotImplementedError
