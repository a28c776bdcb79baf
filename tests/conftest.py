from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from src.shift_attendance.shift_attendance.schedules.model import Timeline
from tests.fakes import InMemoryAttendance, make_timeline

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 18, 13, 50, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def schedule_csv() -> Path:
    return DATA_DIR / "schedule.csv"


@pytest.fixture
def hourly_timeline() -> Timeline:
    # t = 0..5h, Alex [F,T,T,F,T,F]
    return make_timeline(
        datetime(2026, 1, 18, 12, 0),
        timedelta(hours=1),
        {"Alex": [False, True, True, False, True, False], "Cole": [True, True, False, False, False, True]},
    )
