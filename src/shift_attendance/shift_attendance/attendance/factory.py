from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Transition
from .strategies.base import AttendanceTransition
from .strategies.checkin_strategy import CheckInTransition
from .strategies.missed_strategy import MissedTransition
from .strategies.override_strategy import OverrideTransition


@dataclass
class AttendanceTransitionFactory:
    """Factory Pattern: pick the rule that governs a write."""

    def for_transition(self, kind: Transition) -> AttendanceTransition:
        if kind == Transition.CHECK_IN:
            return CheckInTransition()
        if kind == Transition.MARK_MISSED:
            return MissedTransition()
        if kind == Transition.OVERRIDE:
            return OverrideTransition()
        raise ValueError(f"Unsupported transition: {kind!r}")
