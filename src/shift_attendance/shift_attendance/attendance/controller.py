from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import normalize_iso
from ..common.http import admin_required, error, login_required, payload
from ..common.validators import require_non_empty, require_week_index
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    LocationUnavailable,
    LocationUnsupported,
    SourceUnavailable,
    StorageFailure,
    ValidationError,
)
from ..geofence.provider import SubmittedLocationProvider
from ..shifts.model import Shift, ShiftKey
from .model import AttendanceRecord
from .session import ShiftRow, VolunteerSession

logger = logging.getLogger(__name__)


def _fmt_date(dt) -> str:
    return dt.strftime("%a %b %d, %Y")


def _shift_dict(shift: Shift) -> dict[str, Any]:
    key = shift.key
    return {
        "person": shift.person,
        "start": shift.start.isoformat(),
        "end": shift.end.isoformat(),
        "shift_start": key.shift_start,
        "shift_end": key.shift_end,
        "duration_minutes": int(shift.duration.total_seconds() // 60),
    }


def _row_dict(row: ShiftRow) -> dict[str, Any]:
    out = _shift_dict(row.shift)
    out["status"] = row.status.value
    out["overridden"] = bool(row.record and row.record.overridden)
    return out


def _record_dict(record: Optional[AttendanceRecord]) -> Optional[dict[str, Any]]:
    return record.to_dict() if record else None


def register(app: Flask, container: Container) -> None:
    def open_session() -> VolunteerSession:
        return VolunteerSession.open(
            person=str(session["name"]),
            schedule=container.schedule_service,
            attendance=container.attendance_service,
            clock=container.clock,
        )

    def session_errors(e: AuthenticationError | SourceUnavailable | StorageFailure):
        if isinstance(e, AuthenticationError):
            session.clear()
            return error(str(e), 401)
        if isinstance(e, SourceUnavailable):
            logger.error("Schedule unavailable: %s", e)
            return error(f"Startup error: {e}", 503)
        return error("Attendance store is unavailable. Please try again.", 502)

    @app.route("/api/week", methods=["GET"], endpoint="api_week")
    @login_required
    def api_week():
        if session.get("role") == Role.ADMIN.value:
            return error("Admin has no personal schedule.", 400)
        raw_week = request.args.get("week")
        try:
            week_index = None if raw_week in (None, "") else require_week_index(raw_week)
            vs = open_session()
            view = vs.week(week_index)
        except (AuthenticationError, SourceUnavailable, StorageFailure) as e:
            return session_errors(e)
        except ValidationError as e:
            return error(str(e), 400)

        return jsonify(
            {
                "success": True,
                "person": vs.person,
                "week": view.window.index,
                "prev_week": view.prev_index,
                "next_week": view.next_index,
                "label": f"{_fmt_date(view.window.start)} → {_fmt_date(view.window.last_moment)}",
                "window": {"start": view.window.start.isoformat(), "end": view.window.end.isoformat()},
                "shifts": [_row_dict(r) for r in view.rows],
                "verifiable": [_shift_dict(s) for s in view.verifiable],
                "missed_recorded": view.missed_written,
            }
        )

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    @login_required
    def api_checkin():
        if session.get("role") == Role.ADMIN.value:
            return error("Admin has no shifts to check in to.", 400)
        data = payload()
        try:
            shift_start = require_non_empty(str(data.get("shift_start") or ""), "shift_start")
            shift_end = require_non_empty(str(data.get("shift_end") or ""), "shift_end")
        except ValidationError as e:
            return error(str(e), 400)

        location = data.get("location")
        provider = SubmittedLocationProvider(
            location if isinstance(location, dict) else None,
            max_age_seconds=container.options.location_max_age_seconds,
        )

        try:
            vs = open_session()
            outcome = vs.check_in(shift_start=shift_start, shift_end=shift_end, provider=provider)
        except (AuthenticationError, SourceUnavailable, StorageFailure) as e:
            return session_errors(e)
        except LocationUnsupported as e:
            return error(str(e), 400, code="location_unsupported")
        except LocationUnavailable as e:
            return error(str(e), 400, code="location_unavailable")
        except ValidationError as e:
            return error(str(e), 400)

        if not outcome.accepted:
            return jsonify(
                {
                    "success": False,
                    "code": "geofence_miss",
                    "message": outcome.message,
                    "distance_m": round(outcome.geofence.distance_m, 1),
                }
            )

        return jsonify(
            {
                "success": True,
                "message": outcome.message,
                "distance_m": round(outcome.geofence.distance_m, 1),
                "record": _record_dict(outcome.record),
            }
        )

    @app.route("/api/admin/missed", methods=["GET"], endpoint="api_admin_missed")
    @admin_required
    def api_admin_missed():
        limit = request.args.get("limit", type=int) or container.options.admin_missed_limit
        try:
            records = container.attendance_service.missed_newest_first(current_role=Role.ADMIN, limit=limit)
        except StorageFailure:
            return error("Attendance store is unavailable. Please try again.", 502)
        return jsonify({"success": True, "records": [r.to_dict() for r in records]})

    @app.route("/api/admin/override", methods=["POST"], endpoint="api_admin_override")
    @admin_required
    def api_admin_override():
        data = payload()
        try:
            key = ShiftKey(
                require_non_empty(str(data.get("person") or ""), "person"),
                normalize_iso(require_non_empty(str(data.get("shift_start") or ""), "shift_start")),
                normalize_iso(require_non_empty(str(data.get("shift_end") or ""), "shift_end")),
            )
            record = container.attendance_service.override_missed(
                current_role=Role(session.get("role")),
                admin_name=str(session["name"]),
                key=key,
            )
        except AuthorizationError as e:
            return error(str(e), 403)
        except ValidationError as e:
            return error(str(e), 400)
        except StorageFailure:
            return error("Override failed: attendance store is unavailable.", 502)

        return jsonify(
            {
                "success": True,
                "message": f"Overrode {key.person} shift to verified.",
                "record": _record_dict(record),
            }
        )

    @app.route("/api/admin/last-sweep", methods=["GET"], endpoint="api_admin_last_sweep")
    @admin_required
    def api_admin_last_sweep():
        try:
            last_run = container.attendance_service.last_sweep()
        except StorageFailure:
            return error("Attendance store is unavailable. Please try again.", 502)
        return jsonify({"success": True, "last_run": last_run})
