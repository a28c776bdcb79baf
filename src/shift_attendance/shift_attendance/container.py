from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local, resolve_timezone
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .geofence.model import Coordinates
from .geofence.service import GeofenceService
from .schedules.csv_schedule_repository import CsvTimetableSource
from .schedules.repository import TimetableSource
from .schedules.service import ScheduleService
from .sweep.service import SweepService
from .users.service import AuthService


@dataclass(frozen=True)
class AppOptions:
    app_title: str = "UNC Tenting Schedules"
    admin_name: str = "secret"
    admin_missed_limit: int = constants.ADMIN_MISSED_LIMIT
    location_max_age_seconds: float = constants.LOCATION_MAX_AGE_SECONDS
    tz: Optional[tzinfo] = None

    def clock(self) -> datetime:
        return now_local(self.tz)


@dataclass(frozen=True)
class Container:
    options: AppOptions

    timetable: TimetableSource
    attendance_repo: AttendanceRepository

    schedule_service: ScheduleService
    geofence_service: GeofenceService
    attendance_service: AttendanceService
    auth_service: AuthService

    clock: Callable[[], datetime]


def _setting(settings: Any, name: str, default: Any) -> Any:
    return getattr(settings, name, default)


def resolve_csv_path(settings: Any, *, root: Path | None = None) -> Path:
    path = Path(_setting(settings, "SCHEDULE_CSV_PATH", "data/schedule.csv"))
    if not path.is_absolute():
        path = (root or Path.cwd()) / path
    return path


def build_services(
    *,
    settings: Any,
    timetable: TimetableSource,
    attendance_repo: AttendanceRepository,
    tz: Optional[tzinfo] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    options = AppOptions(
        app_title=str(_setting(settings, "APP_TITLE", "UNC Tenting Schedules")),
        admin_name=str(_setting(settings, "ADMIN_NAME", "secret")),
        admin_missed_limit=int(_setting(settings, "ADMIN_MISSED_LIMIT", constants.ADMIN_MISSED_LIMIT)),
        location_max_age_seconds=float(_setting(settings, "LOCATION_MAX_AGE_SECONDS", constants.LOCATION_MAX_AGE_SECONDS)),
        tz=tz,
    )

    schedule_service = ScheduleService(
        timetable,
        days_per_week=int(_setting(settings, "DAYS_PER_WEEK", constants.DAYS_PER_WEEK)),
    )
    geofence_service = GeofenceService(
        Coordinates(
            lat=float(_setting(settings, "TARGET_LAT", 35.9971389)),
            lon=float(_setting(settings, "TARGET_LON", -78.9415278)),
        ),
        max_distance_m=float(_setting(settings, "MAX_DISTANCE_METERS", constants.MAX_DISTANCE_METERS)),
        timeout_seconds=float(_setting(settings, "LOCATION_TIMEOUT_SECONDS", constants.LOCATION_TIMEOUT_SECONDS)),
    )
    attendance_service = AttendanceService(
        attendance_repo,
        geofence_service,
        checkin_window_minutes=int(_setting(settings, "CHECKIN_WINDOW_MINUTES", constants.CHECKIN_WINDOW_MINUTES)),
        tz=tz,
    )
    auth_service = AuthService(schedule_service, admin_name=options.admin_name)

    return Container(
        options=options,
        timetable=timetable,
        attendance_repo=attendance_repo,
        schedule_service=schedule_service,
        geofence_service=geofence_service,
        attendance_service=attendance_service,
        auth_service=auth_service,
        clock=clock or options.clock,
    )


def build_container(*, settings: Any, db_config: dict) -> Container:
    tz = resolve_timezone(_setting(settings, "SCHEDULE_TIMEZONE", ""))
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return build_services(
        settings=settings,
        timetable=CsvTimetableSource(resolve_csv_path(settings), tz=tz),
        attendance_repo=MySQLAttendanceRepository(conn),
        tz=tz,
    )


def build_sweep_service(*, settings: Any, db_config: dict) -> SweepService:
    """Sweep wiring with its own (elevated) connection; shares nothing with the web app."""
    tz = resolve_timezone(_setting(settings, "SCHEDULE_TIMEZONE", ""))
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    schedule_service = ScheduleService(
        CsvTimetableSource(resolve_csv_path(settings), tz=tz),
        days_per_week=int(_setting(settings, "DAYS_PER_WEEK", constants.DAYS_PER_WEEK)),
    )
    return SweepService(
        schedule_service,
        MySQLAttendanceRepository(conn),
        grace_minutes=int(_setting(settings, "SWEEP_GRACE_MINUTES", constants.SWEEP_GRACE_MINUTES)),
        chunk_size=int(_setting(settings, "SWEEP_CHUNK_SIZE", constants.SWEEP_CHUNK_SIZE)),
        tz=tz,
    )
