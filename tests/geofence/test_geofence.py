from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.shift_attendance.shift_attendance.core.exceptions import LocationUnavailable, LocationUnsupported, ValidationError
from src.shift_attendance.shift_attendance.geofence.provider import SubmittedLocationProvider
from src.shift_attendance.shift_attendance.geofence.service import GeofenceService, haversine_meters
from tests.fakes import TARGET, FakeLocation, meters_north

NOW = datetime(2026, 1, 18, 18, 0, tzinfo=timezone.utc)


def _provider(payload, **kwargs):
    return SubmittedLocationProvider(payload, now=lambda: NOW, **kwargs)


def test_haversine_zero_and_one_degree():
    assert haversine_meters(TARGET.lat, TARGET.lon, TARGET.lat, TARGET.lon) == 0
    assert haversine_meters(0, 0, 1, 0) == pytest.approx(111_194.9, abs=0.5)


def test_inside_radius_is_ok():
    svc = GeofenceService(TARGET, max_distance_m=200)
    result = svc.check(FakeLocation(meters_north(TARGET, 50)))

    assert result.ok
    assert result.distance_m == pytest.approx(50, abs=0.5)


def test_outside_radius_reports_distance():
    svc = GeofenceService(TARGET, max_distance_m=200)
    result = svc.check(FakeLocation(meters_north(TARGET, 250)))

    assert not result.ok
    assert result.distance_m == pytest.approx(250, abs=0.5)
    assert result.rounded_distance == 250


def test_boundary_is_inclusive():
    svc = GeofenceService(TARGET, max_distance_m=200)
    point = meters_north(TARGET, 200)
    assert svc.check(FakeLocation(point)).ok is (svc.distance_to_target(point) <= 200)


def test_provider_errors_propagate():
    svc = GeofenceService(TARGET)
    with pytest.raises(LocationUnavailable):
        svc.check(FakeLocation(error=LocationUnavailable("timeout")))


def test_no_payload_is_unsupported():
    with pytest.raises(LocationUnsupported):
        _provider(None).read(timeout_seconds=15)
    with pytest.raises(LocationUnsupported):
        _provider({"error": "unsupported"}).read(timeout_seconds=15)


@pytest.mark.parametrize("err", ["timeout", "denied", "unavailable"])
def test_client_errors_are_unavailable(err):
    with pytest.raises(LocationUnavailable):
        _provider({"error": err}).read(timeout_seconds=15)


def test_fresh_reading_is_accepted():
    ts_ms = (NOW - timedelta(seconds=2)).timestamp() * 1000
    reading = _provider({"lat": TARGET.lat, "lon": TARGET.lon, "timestamp": ts_ms, "accuracy": 12}).read(timeout_seconds=15)

    assert reading.coords == TARGET
    assert reading.accuracy_m == 12
    assert reading.taken_at == NOW - timedelta(seconds=2)


def test_stale_reading_is_rejected():
    old = (NOW - timedelta(minutes=5)).isoformat()
    with pytest.raises(LocationUnavailable):
        _provider({"lat": TARGET.lat, "lon": TARGET.lon, "timestamp": old}, max_age_seconds=30).read(timeout_seconds=15)


def test_reading_without_timestamp_is_rejected():
    with pytest.raises(LocationUnavailable):
        _provider({"lat": TARGET.lat, "lon": TARGET.lon}).read(timeout_seconds=15)


def test_slow_fix_is_a_timeout():
    payload = {"lat": TARGET.lat, "lon": TARGET.lon, "timestamp": NOW.isoformat(), "elapsed_ms": 20_000}
    with pytest.raises(LocationUnavailable):
        _provider(payload).read(timeout_seconds=15)


@pytest.mark.parametrize("elapsed", ["abc", [1, 2], {"ms": 5}, True])
def test_unreadable_elapsed_time_is_unavailable(elapsed):
    payload = {"lat": TARGET.lat, "lon": TARGET.lon, "timestamp": NOW.isoformat(), "elapsed_ms": elapsed}
    with pytest.raises(LocationUnavailable, match="elapsed time"):
        _provider(payload).read(timeout_seconds=15)


def test_numeric_string_elapsed_time_is_accepted():
    payload = {"lat": TARGET.lat, "lon": TARGET.lon, "timestamp": NOW.isoformat(), "elapsed_ms": "1200"}
    assert _provider(payload).read(timeout_seconds=15).coords == TARGET


def test_bad_coordinates_are_validation_errors():
    with pytest.raises(ValidationError):
        _provider({"lat": "abc", "lon": 1, "timestamp": NOW.isoformat()}).read(timeout_seconds=15)
    with pytest.raises(ValidationError):
        _provider({"lat": 95, "lon": 1, "timestamp": NOW.isoformat()}).read(timeout_seconds=15)
