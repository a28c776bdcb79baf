from __future__ import annotations

from typing import Optional

from ...shifts.model import ShiftKey
from ..model import AttendanceRecord
from .base import AttendanceTransition, TransitionDecision


class MissedTransition(AttendanceTransition):
    """unrecorded -> missed; any existing record wins."""

    def decide(
        self,
        *,
        key: ShiftKey,
        existing: Optional[AttendanceRecord],
        now_iso: str,
        actor: Optional[str] = None,
    ) -> TransitionDecision:
        if existing is not None:
            return TransitionDecision(reason=f"already {existing.status.value}")
        return TransitionDecision(record=AttendanceRecord.missed(key))
