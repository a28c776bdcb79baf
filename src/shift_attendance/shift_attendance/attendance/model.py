from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import AttendanceStatus
from ..shifts.model import ShiftKey


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi chấm công cho một ca.

    Uniquely keyed by ``(person, shift_start, shift_end)`` with ISO-normalized
    instants; absence of a record means the shift is unrecorded.
    """

    person: str
    shift_start: str
    shift_end: str
    status: AttendanceStatus
    verified_at: Optional[str] = None
    overridden: bool = False
    override_by: Optional[str] = None
    override_at: Optional[str] = None

    @property
    def key(self) -> ShiftKey:
        return ShiftKey(self.person, self.shift_start, self.shift_end)

    @classmethod
    def missed(cls, key: ShiftKey) -> "AttendanceRecord":
        return cls(person=key.person, shift_start=key.shift_start, shift_end=key.shift_end, status=AttendanceStatus.MISSED)

    @classmethod
    def verified(cls, key: ShiftKey, *, at: str) -> "AttendanceRecord":
        return cls(
            person=key.person,
            shift_start=key.shift_start,
            shift_end=key.shift_end,
            status=AttendanceStatus.VERIFIED,
            verified_at=at,
        )

    @classmethod
    def override(cls, key: ShiftKey, *, by: str, at: str) -> "AttendanceRecord":
        return cls(
            person=key.person,
            shift_start=key.shift_start,
            shift_end=key.shift_end,
            status=AttendanceStatus.VERIFIED,
            verified_at=at,
            overridden=True,
            override_by=by,
            override_at=at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "person": self.person,
            "shift_start": self.shift_start,
            "shift_end": self.shift_end,
            "status": self.status.value,
            "verified_at": self.verified_at,
            "overridden": self.overridden,
            "override_by": self.override_by,
            "override_at": self.override_at,
        }


def index_records(records) -> dict[ShiftKey, AttendanceRecord]:
    return {r.key: r for r in records}
