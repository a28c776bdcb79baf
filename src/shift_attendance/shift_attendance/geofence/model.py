from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class LocationReading:
    """A single sensor sample."""

    coords: Coordinates
    taken_at: Optional[datetime] = None
    accuracy_m: Optional[float] = None


@dataclass(frozen=True)
class GeofenceResult:
    """Outcome of a geofence check.

    ``ok=False`` is a normal negative outcome (too far away), not an error.
    """

    ok: bool
    distance_m: float
    max_distance_m: float
    reading: Optional[LocationReading] = None

    @property
    def rounded_distance(self) -> int:
        return int(round(self.distance_m))
