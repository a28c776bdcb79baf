from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Mapping, MutableMapping, Optional, Sequence

from ..common.datetime_utils import now_local, to_iso_utc
from ..core.constants import CHECKIN_WINDOW_MINUTES, MISSED_LIST_LIMIT
from ..core.enums import AttendanceStatus, Role, Transition
from ..core.exceptions import AuthorizationError, StorageFailure, ValidationError
from ..geofence.model import GeofenceResult
from ..geofence.provider import LocationProvider
from ..geofence.service import GeofenceService
from ..shifts.model import Shift, ShiftKey
from .factory import AttendanceTransitionFactory
from .model import AttendanceRecord, index_records
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInOutcome:
    accepted: bool
    geofence: GeofenceResult
    record: Optional[AttendanceRecord] = None

    @property
    def message(self) -> str:
        if self.accepted:
            return "Verification successful. You're checked in."
        return f"You're not close enough to the check-in point. (~{self.geofence.rounded_distance}m away)"


def status_of(shift: Shift, records: Mapping[ShiftKey, AttendanceRecord]) -> AttendanceStatus:
    rec = records.get(shift.key)
    return rec.status if rec else AttendanceStatus.UNRECORDED


class AttendanceService:
    """Attendance state machine over the keyed store.

    Write discipline: verified writes (check-in, override) replace the record;
    missed writes are insert-if-absent so they can never downgrade an
    existing verified or overridden record.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        geofence: GeofenceService,
        *,
        transitions: AttendanceTransitionFactory | None = None,
        checkin_window_minutes: int = CHECKIN_WINDOW_MINUTES,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._geofence = geofence
        self._transitions = transitions or AttendanceTransitionFactory()
        self._window = timedelta(minutes=int(checkin_window_minutes))
        self._tz = tz

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or now_local(self._tz)

    # Reads

    def records_for(self, person: str) -> dict[ShiftKey, AttendanceRecord]:
        return index_records(self._attendance.list_for_person(person))

    def missed_newest_first(self, *, current_role: Role, limit: int = MISSED_LIST_LIMIT) -> Sequence[AttendanceRecord]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        return self._attendance.list_by_status(AttendanceStatus.MISSED.value, limit=max(1, int(limit)))

    def last_sweep(self) -> Optional[str]:
        return self._attendance.get_last_sweep()

    # Check-in

    def is_checkin_eligible(
        self,
        shift: Shift,
        records: Mapping[ShiftKey, AttendanceRecord],
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        """``0 < start - now <= window`` and not already verified."""
        if status_of(shift, records) == AttendanceStatus.VERIFIED:
            return False
        to_start = shift.start - self._now(now)
        return timedelta(0) < to_start <= self._window

    def verifiable_shifts(
        self,
        shifts: Iterable[Shift],
        records: Mapping[ShiftKey, AttendanceRecord],
        *,
        now: Optional[datetime] = None,
    ) -> list[Shift]:
        now = self._now(now)
        eligible = [s for s in shifts if self.is_checkin_eligible(s, records, now=now)]
        return sorted(eligible, key=lambda s: s.start)

    def check_in(
        self,
        shift: Shift,
        provider: LocationProvider,
        *,
        records: Optional[MutableMapping[ShiftKey, AttendanceRecord]] = None,
        now: Optional[datetime] = None,
    ) -> CheckInOutcome:
        """Geofence-gated unrecorded -> verified.

        Raises ValidationError when the shift is outside the pre-start window or
        already verified; LocationUnavailable/LocationUnsupported propagate. A
        geofence miss is returned as a rejected outcome with the distance.
        """
        now = self._now(now)
        key = shift.key
        if records is None:
            records = {}
            existing = self._attendance.get(key)
            if existing:
                records[key] = existing

        if not self.is_checkin_eligible(shift, records, now=now):
            if status_of(shift, records) == AttendanceStatus.VERIFIED:
                raise ValidationError("This shift is already verified")
            if shift.start <= now:
                raise ValidationError("This shift has already started")
            minutes = int(self._window.total_seconds() // 60)
            raise ValidationError(f"Check-in opens {minutes} minutes before the shift starts")

        result = self._geofence.check(provider)
        if not result.ok:
            logger.info("Check-in for %s rejected: %.0fm from target", key.person, result.distance_m)
            return CheckInOutcome(accepted=False, geofence=result)

        existing = self._attendance.get(key)
        decision = self._transitions.for_transition(Transition.CHECK_IN).decide(
            key=key, existing=existing, now_iso=to_iso_utc(now), actor=key.person
        )
        if not decision.writes:
            if existing:
                records[key] = existing
            raise ValidationError("This shift is already verified")

        record = self._attendance.upsert(decision.record)
        records[key] = record
        logger.info("Verified %s for shift %s", key.person, key.shift_start)
        return CheckInOutcome(accepted=True, geofence=result, record=record)

    # Missed

    def record_missed_if_needed(
        self,
        shifts: Iterable[Shift],
        records: MutableMapping[ShiftKey, AttendanceRecord],
        *,
        now: Optional[datetime] = None,
    ) -> list[AttendanceRecord]:
        """Best-effort client trigger: started shifts with no record become missed.

        Only fires while a session is open; the sweep is the authoritative
        path. Failures are logged per shift and do not stop the loop.
        """
        now = self._now(now)
        rule = self._transitions.for_transition(Transition.MARK_MISSED)
        now_iso = to_iso_utc(now)

        written: list[AttendanceRecord] = []
        for shift in shifts:
            if shift.start > now:
                continue
            key = shift.key
            decision = rule.decide(key=key, existing=records.get(key), now_iso=now_iso)
            if not decision.writes:
                continue
            try:
                inserted = self._attendance.insert_if_absent([decision.record])
                if inserted:
                    records[key] = decision.record
                    written.append(decision.record)
                else:
                    # Another writer got there first; pick up whatever it stored.
                    current = self._attendance.get(key)
                    if current:
                        records[key] = current
            except StorageFailure as e:
                logger.warning("Failed to mark missed for %s at %s: %s", key.person, key.shift_start, e)
        return written

    # Override

    def override_missed(
        self,
        *,
        current_role: Role,
        admin_name: str,
        key: ShiftKey,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        existing = self._attendance.get(key)
        decision = self._transitions.for_transition(Transition.OVERRIDE).decide(
            key=key, existing=existing, now_iso=to_iso_utc(self._now(now)), actor=admin_name
        )
        if not decision.writes:
            return existing

        record = self._attendance.upsert(decision.record)
        logger.info("Override by %s: %s shift %s -> verified", admin_name, key.person, key.shift_start)
        return record
