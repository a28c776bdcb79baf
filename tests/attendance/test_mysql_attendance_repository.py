from __future__ import annotations

from datetime import datetime

from src.shift_attendance.shift_attendance.attendance.model import AttendanceRecord
from src.shift_attendance.shift_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.shift_attendance.shift_attendance.core.enums import AttendanceStatus
from src.shift_attendance.shift_attendance.shifts.model import ShiftKey

KEY = ShiftKey("Alex", "2026-01-18T19:00:00.000Z", "2026-01-18T21:00:00.000Z")


class _Cursor:
    def __init__(self, row):
        self.row = row
        self.executed: list[tuple[str, tuple]] = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.row

    def close(self):
        pass


class _Connection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class _Factory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self, *, timeout=None):
        return self.conn


def _overridden_row():
    return {
        "person": "Alex",
        "shift_start": datetime(2026, 1, 18, 19, 0),
        "shift_end": datetime(2026, 1, 18, 21, 0),
        "status": "verified",
        "verified_at": datetime(2026, 1, 19, 9, 0),
        "overridden": 1,
        "override_by": "secret",
        "override_at": datetime(2026, 1, 19, 9, 0),
    }


def test_upsert_keeps_override_columns_and_returns_stored_row():
    cur = _Cursor(_overridden_row())
    conn = _Connection(cur)
    repo = MySQLAttendanceRepository(_Factory(conn))

    stored = repo.upsert(AttendanceRecord.verified(KEY, at="2026-01-18T18:50:00.000Z"))

    upsert_sql = cur.executed[0][0]
    for column in ("status", "verified_at", "override_by", "override_at", "overridden"):
        assert f"{column}=IF(overridden=1, {column}, VALUES({column}))" in upsert_sql
    assert upsert_sql.rstrip().endswith("overridden=IF(overridden=1, overridden, VALUES(overridden))")

    assert conn.committed
    assert stored.status == AttendanceStatus.VERIFIED
    assert stored.overridden is True
    assert stored.override_by == "secret"
    assert stored.override_at == "2026-01-19T09:00:00.000Z"
