from __future__ import annotations

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..schedules.service import ScheduleService
from .model import SessionUser


class AuthService:
    """Name-only login.

    The admin name is a shared secret used as a flag, not a security boundary.
    """

    def __init__(self, schedule: ScheduleService, *, admin_name: str):
        self._schedule = schedule
        self._admin_name = admin_name

    def login(self, name: str) -> SessionUser:
        name = require_non_empty(name, "Name")
        if name == self._admin_name:
            return SessionUser(name=name, role=Role.ADMIN)

        timeline = self._schedule.load()
        if not timeline.has_person(name):
            raise AuthenticationError(f'Name "{name}" not found in the schedule header.')
        return SessionUser(name=name, role=Role.VOLUNTEER)

    def restore(self, name: str | None, role: str | None) -> SessionUser | None:
        """Rebuild the user from the cookie session; None if nobody is logged in."""
        if not name:
            return None
        try:
            return SessionUser(name=name, role=Role(role))
        except ValueError:
            return None
