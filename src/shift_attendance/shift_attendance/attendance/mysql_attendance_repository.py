from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, iso_to_mysql, mysql_to_iso
from ..shifts.model import ShiftKey
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "person, shift_start, shift_end, status, verified_at, overridden, override_by, override_at"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        person=r["person"],
        shift_start=mysql_to_iso(r["shift_start"]),
        shift_end=mysql_to_iso(r["shift_end"]),
        status=AttendanceStatus(r["status"]),
        verified_at=mysql_to_iso(r.get("verified_at")),
        overridden=bool(r.get("overridden")),
        override_by=r.get("override_by"),
        override_at=mysql_to_iso(r.get("override_at")),
    )


def _params(record: AttendanceRecord) -> tuple:
    return (
        record.person,
        iso_to_mysql(record.shift_start),
        iso_to_mysql(record.shift_end),
        record.status.value,
        iso_to_mysql(record.verified_at),
        1 if record.overridden else 0,
        record.override_by,
        iso_to_mysql(record.override_at),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_person(self, person: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE person=%s
                ORDER BY shift_start ASC
                """,
                (person,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get(self, key: ShiftKey) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE person=%s AND shift_start=%s AND shift_end=%s
                """,
                (key.person, iso_to_mysql(key.shift_start), iso_to_mysql(key.shift_end)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Write a verified record and return what is stored.

        A row that is already overridden keeps its override metadata.
        ``overridden`` must be assigned last: MySQL applies the update list
        left to right.
        """
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=IF(overridden=1, status, VALUES(status)),
                    verified_at=IF(overridden=1, verified_at, VALUES(verified_at)),
                    override_by=IF(overridden=1, override_by, VALUES(override_by)),
                    override_at=IF(overridden=1, override_at, VALUES(override_at)),
                    overridden=IF(overridden=1, overridden, VALUES(overridden))
                """,
                _params(record),
            )
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE person=%s AND shift_start=%s AND shift_end=%s
                """,
                _params(record)[:3],
            )
            r = fetchone(cur)
        return _to_record(r) if r else record

    def insert_if_absent(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            # No-op update on duplicate: affected rows is 1 per insert, 0 per existing key.
            cur.executemany(
                f"""
                INSERT INTO attendance({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE id=id
                """,
                [_params(r) for r in records],
            )
            return max(int(cur.rowcount or 0), 0)

    def list_by_status(self, status: str, *, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE status=%s
                ORDER BY shift_start DESC
                LIMIT %s
                """,
                (str(status), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_in_range(self, *, start: str, end: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE shift_end >= %s AND shift_start <= %s
                """,
                (iso_to_mysql(start), iso_to_mysql(end)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_last_sweep(self) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT last_run FROM sweep_metadata WHERE id=1")
            r = fetchone(cur)
            return mysql_to_iso(r["last_run"]) if r else None

    def set_last_sweep(self, at: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sweep_metadata(id, last_run)
                VALUES(1, %s)
                ON DUPLICATE KEY UPDATE last_run=VALUES(last_run)
                """,
                (iso_to_mysql(at),),
            )
