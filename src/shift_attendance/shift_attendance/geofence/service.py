from __future__ import annotations

import logging
import math

from ..core.constants import EARTH_RADIUS_METERS, LOCATION_TIMEOUT_SECONDS, MAX_DISTANCE_METERS
from .model import Coordinates, GeofenceResult
from .provider import LocationProvider

logger = logging.getLogger(__name__)


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance on a spherical Earth (R = 6,371,000 m)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


class GeofenceService:
    def __init__(
        self,
        target: Coordinates,
        *,
        max_distance_m: float = MAX_DISTANCE_METERS,
        timeout_seconds: float = LOCATION_TIMEOUT_SECONDS,
    ):
        self._target = target
        self._max_distance_m = float(max_distance_m)
        self._timeout_seconds = float(timeout_seconds)

    @property
    def target(self) -> Coordinates:
        return self._target

    def distance_to_target(self, point: Coordinates) -> float:
        return haversine_meters(point.lat, point.lon, self._target.lat, self._target.lon)

    def check(self, provider: LocationProvider) -> GeofenceResult:
        """Read one fresh sample and compare it to the target.

        LocationUnavailable / LocationUnsupported from the provider propagate.
        """
        reading = provider.read(timeout_seconds=self._timeout_seconds)
        dist = self.distance_to_target(reading.coords)
        ok = dist <= self._max_distance_m
        logger.debug("Geofence check: %.1fm from target (max %.0fm) ok=%s", dist, self._max_distance_m, ok)
        return GeofenceResult(ok=ok, distance_m=dist, max_distance_m=self._max_distance_m, reading=reading)
