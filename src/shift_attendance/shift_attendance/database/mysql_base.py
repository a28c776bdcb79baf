from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import mysql.connector

from ..common.datetime_utils import parse_iso_utc, to_iso_utc
from ..core.exceptions import StorageFailure
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cur)``; commit on success, rollback and re-raise on error.

    Driver errors are surfaced as StorageFailure so callers only deal with
    domain exceptions.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.exception("Could not connect to attendance store")
        raise StorageFailure(f"Could not connect to attendance store: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.exception("Attendance store operation failed")
        raise StorageFailure(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def iso_to_mysql(value: Optional[str]) -> Optional[datetime]:
    """ISO instant -> naive UTC datetime for DATETIME(3) columns."""
    if value is None:
        return None
    return parse_iso_utc(value).replace(tzinfo=None)


def mysql_to_iso(value: Any) -> Optional[str]:
    """DATETIME(3) column (naive UTC) -> normalized ISO instant."""
    if value is None:
        return None
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return to_iso_utc(parse_iso_utc(value))
