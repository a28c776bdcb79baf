from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ...core.exceptions import ValidationError
from ...shifts.model import ShiftKey
from ..model import AttendanceRecord
from .base import AttendanceTransition, TransitionDecision


class OverrideTransition(AttendanceTransition):
    """Admin override: missed -> verified with override metadata."""

    def decide(
        self,
        *,
        key: ShiftKey,
        existing: Optional[AttendanceRecord],
        now_iso: str,
        actor: Optional[str] = None,
    ) -> TransitionDecision:
        if not actor:
            raise ValidationError("Override requires an admin name")
        if existing is None:
            raise ValidationError("No missed record for this shift")
        if existing.status == AttendanceStatus.VERIFIED:
            return TransitionDecision(reason="already verified")
        return TransitionDecision(record=AttendanceRecord.override(key, by=actor, at=now_iso))
