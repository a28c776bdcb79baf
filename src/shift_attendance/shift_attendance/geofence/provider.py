from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, Protocol

from ..common.datetime_utils import parse_iso_utc
from ..common.validators import require_float
from ..core.constants import LOCATION_MAX_AGE_SECONDS
from ..core.exceptions import LocationUnavailable, LocationUnsupported, ValidationError
from .model import Coordinates, LocationReading

_UNAVAILABLE_ERRORS = {
    "timeout": "Timed out waiting for a location fix.",
    "unavailable": "Location is currently unavailable.",
    "denied": "Location permission was denied.",
}


class LocationProvider(Protocol):
    def read(self, *, timeout_seconds: float) -> LocationReading:
        """Return one fresh reading or raise LocationUnavailable / LocationUnsupported."""

        raise NotImplementedError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_taken_at(raw: Any) -> datetime:
    # Browsers report Position.timestamp as epoch milliseconds.
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return datetime.fromtimestamp(float(raw) / 1000.0, tz=timezone.utc)
    return parse_iso_utc(raw)


class SubmittedLocationProvider(LocationProvider):
    """Reading taken by the browser and posted with the check-in request.

    The client performs the bounded-wait read (``maximumAge: 0``) and sends
    either ``{lat, lon, timestamp, accuracy}`` or ``{error: ...}``. Readings
    older than ``max_age_seconds`` are rejected as stale.
    """

    def __init__(
        self,
        payload: Optional[Mapping[str, Any]],
        *,
        max_age_seconds: float = LOCATION_MAX_AGE_SECONDS,
        now: Callable[[], datetime] = _utc_now,
    ):
        self._payload = payload
        self._max_age = timedelta(seconds=float(max_age_seconds))
        self._now = now

    def read(self, *, timeout_seconds: float) -> LocationReading:
        payload = self._payload
        if not payload:
            raise LocationUnsupported("Geolocation is not supported by this browser.")

        error = str(payload.get("error") or "").strip().lower()
        if error == "unsupported":
            raise LocationUnsupported("Geolocation is not supported by this browser.")
        if error:
            raise LocationUnavailable(_UNAVAILABLE_ERRORS.get(error, f"Location error: {error}"))

        if payload.get("elapsed_ms") is not None:
            try:
                elapsed_ms = require_float(payload, "elapsed_ms")
            except ValidationError as e:
                raise LocationUnavailable("Location reading has an invalid elapsed time.") from e
            if elapsed_ms > float(timeout_seconds) * 1000:
                raise LocationUnavailable("Timed out waiting for a location fix.")

        coords = Coordinates(lat=require_float(payload, "lat"), lon=require_float(payload, "lon"))
        if not (-90.0 <= coords.lat <= 90.0 and -180.0 <= coords.lon <= 180.0):
            raise ValidationError("Coordinates out of range")

        raw_ts = payload.get("timestamp")
        if raw_ts is None:
            raise LocationUnavailable("Location reading has no timestamp; a fresh reading is required.")
        try:
            taken_at = _parse_taken_at(raw_ts)
        except (ValidationError, OverflowError, OSError, ValueError) as e:
            raise LocationUnavailable("Location reading has an invalid timestamp.") from e

        if self._now() - taken_at > self._max_age:
            raise LocationUnavailable("Location reading is stale; please try again.")

        accuracy = payload.get("accuracy")
        return LocationReading(
            coords=coords,
            taken_at=taken_at,
            accuracy_m=float(accuracy) if isinstance(accuracy, (int, float)) and not isinstance(accuracy, bool) else None,
        )
