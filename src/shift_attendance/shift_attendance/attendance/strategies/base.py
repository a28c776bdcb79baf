from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...shifts.model import ShiftKey
from ..model import AttendanceRecord


@dataclass(frozen=True)
class TransitionDecision:
    """What to write for one key; ``record=None`` means leave the store alone."""

    record: Optional[AttendanceRecord] = None
    reason: Optional[str] = None

    @property
    def writes(self) -> bool:
        return self.record is not None


class AttendanceTransition(ABC):
    """Strategy Pattern: one rule of the attendance state machine.

    Status strength only increases: unrecorded -> missed -> verified. No
    strategy ever produces a missed record for a key that already has one.
    """

    @abstractmethod
    def decide(
        self,
        *,
        key: ShiftKey,
        existing: Optional[AttendanceRecord],
        now_iso: str,
        actor: Optional[str] = None,
    ) -> TransitionDecision:
        raise NotImplementedError
