from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import ShiftKey
from ..model import AttendanceRecord
from .base import AttendanceTransition, TransitionDecision


class CheckInTransition(AttendanceTransition):
    """Geofence-gated check-in: -> verified (verified_at=now)."""

    def decide(
        self,
        *,
        key: ShiftKey,
        existing: Optional[AttendanceRecord],
        now_iso: str,
        actor: Optional[str] = None,
    ) -> TransitionDecision:
        if existing is not None and existing.status == AttendanceStatus.VERIFIED:
            return TransitionDecision(reason="already verified")
        return TransitionDecision(record=AttendanceRecord.verified(key, at=now_iso))
