from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..shifts.model import ShiftKey
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_person(self, person: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get(self, key: ShiftKey) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or fully replace the record stored under ``record.key``.

        Only verified writes (check-in, override) may use this path.
        """

        raise NotImplementedError

    def insert_if_absent(self, records: Sequence[AttendanceRecord]) -> int:
        """Insert records whose key is not present; existing keys are left untouched.

        Returns the number of rows actually inserted.
        """

        raise NotImplementedError

    def list_by_status(self, status: str, *, limit: int) -> Sequence[AttendanceRecord]:
        """Records with the given status ordered by shift_start DESC."""

        raise NotImplementedError

    def list_in_range(self, *, start: str, end: str) -> Sequence[AttendanceRecord]:
        """Records whose shift overlaps ``[start, end]`` (ISO instants)."""

        raise NotImplementedError

    def get_last_sweep(self) -> Optional[str]:
        raise NotImplementedError

    def set_last_sweep(self, at: str) -> None:
        raise NotImplementedError
