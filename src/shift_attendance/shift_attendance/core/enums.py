from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò trong phiên làm việc (admin = tên bí mật dùng chung)."""

    ADMIN = "admin"
    VOLUNTEER = "volunteer"


class AttendanceStatus(str, Enum):
    """Trạng thái chấm công lưu trong CSDL.

    UNRECORDED is never stored: it is the absence of a record.
    """

    UNRECORDED = "unrecorded"
    MISSED = "missed"
    VERIFIED = "verified"


class Transition(str, Enum):
    CHECK_IN = "check_in"
    MARK_MISSED = "mark_missed"
    OVERRIDE = "override"
