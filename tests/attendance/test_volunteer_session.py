from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.shift_attendance.shift_attendance.attendance.service import AttendanceService
from src.shift_attendance.shift_attendance.attendance.session import VolunteerSession
from src.shift_attendance.shift_attendance.core.enums import AttendanceStatus
from src.shift_attendance.shift_attendance.core.exceptions import AuthenticationError, ValidationError
from src.shift_attendance.shift_attendance.geofence.service import GeofenceService
from src.shift_attendance.shift_attendance.schedules.service import ScheduleService
from tests.fakes import TARGET, FakeLocation, StaticTimetable


def _open(timeline, repo, now, person="Alex") -> VolunteerSession:
    return VolunteerSession.open(
        person=person,
        schedule=ScheduleService(StaticTimetable(timeline)),
        attendance=AttendanceService(repo, GeofenceService(TARGET)),
        clock=lambda: now,
    )


def test_unknown_person_cannot_open_session(hourly_timeline, attendance_repo, fixed_now):
    with pytest.raises(AuthenticationError):
        _open(hourly_timeline, attendance_repo, fixed_now, person="Nobody")


def test_week_records_missed_before_listing(hourly_timeline, attendance_repo, fixed_now):
    vs = _open(hourly_timeline, attendance_repo, fixed_now)

    view = vs.week(0)

    assert view.missed_written == 1
    assert [(r.shift.start.hour, r.status) for r in view.rows] == [
        (13, AttendanceStatus.MISSED),
        (16, AttendanceStatus.UNRECORDED),
    ]
    assert view.verifiable == []
    assert (view.prev_index, view.next_index) == (0, 1)


def test_week_lists_shift_inside_checkin_window(hourly_timeline, attendance_repo):
    now = datetime(2026, 1, 18, 15, 50)
    vs = _open(hourly_timeline, attendance_repo, now)

    view = vs.week(0)

    assert [s.start for s in view.verifiable] == [datetime(2026, 1, 18, 16, 0)]


def test_check_in_by_shift_bounds(hourly_timeline, attendance_repo):
    now = datetime(2026, 1, 18, 15, 50)
    vs = _open(hourly_timeline, attendance_repo, now)
    shift = vs.shifts[1]

    outcome = vs.check_in(shift_start=shift.key.shift_start, shift_end=shift.key.shift_end, provider=FakeLocation(TARGET))

    assert outcome.accepted
    assert vs.records[shift.key].status == AttendanceStatus.VERIFIED
    assert vs.week(0).verifiable == []


def test_find_shift_rejects_unknown_bounds(hourly_timeline, attendance_repo, fixed_now):
    vs = _open(hourly_timeline, attendance_repo, fixed_now)

    with pytest.raises(ValidationError):
        vs.find_shift("not-a-time", "2026-01-18T17:00:00.000Z")
    with pytest.raises(ValidationError):
        vs.find_shift("2001-01-01T00:00:00.000Z", "2001-01-01T01:00:00.000Z")


def test_later_week_is_empty_but_navigable(hourly_timeline, attendance_repo, fixed_now):
    view = _open(hourly_timeline, attendance_repo, fixed_now).week(3)

    assert view.rows == []
    assert view.window.start == hourly_timeline.anchor + timedelta(days=21)
    assert (view.prev_index, view.next_index) == (2, 4)


def test_week_without_index_opens_page_containing_now(hourly_timeline, attendance_repo):
    now = hourly_timeline.anchor + timedelta(days=8)

    view = _open(hourly_timeline, attendance_repo, now).week()

    assert view.window.index == 1
    assert view.window.start <= now < view.window.end
