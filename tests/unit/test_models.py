"""Unit tests for pydantic models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from pedometer.models import (
    AccelerometerReading,
    GeoPoint,
    Run,
    RunSummary,
    SessionStatus,
    path_bounds,
)

T0 = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


class TestSensorModels:
    """Test sample and fix models."""

    def test_accelerometer_reading(self):
        """Test ints are accepted while strings, booleans and infinities are not."""
        reading = AccelerometerReading(x=0, y=-0.3, z=9.8)
        assert reading.x == 0.0

        with pytest.raises(ValidationError):
            AccelerometerReading(x=float("inf"), y=0, z=0)
        with pytest.raises(ValidationError):
            AccelerometerReading(x="0.5", y=0, z=0)
        with pytest.raises(ValidationError):
            AccelerometerReading(x=True, y=0, z=0)

    def test_geopoint_aliases(self):
        """Test long coordinate names are accepted on input."""
        point = GeoPoint.model_validate({"latitude": 37.7749, "longitude": -122.4194})
        assert point == GeoPoint(lat=37.7749, lng=-122.4194)
        assert point.model_dump() == {"lat": 37.7749, "lng": -122.4194}

    def test_geopoint_frozen(self):
        """Test fixes cannot change after creation."""
        point = GeoPoint(lat=1.0, lng=2.0)
        with pytest.raises(ValidationError):
            point.lat = 3.0


class TestRun:
    """Test the archived record."""

    def test_run_serialization(self):
        """Test camelCase time keys on output and both names on input."""
        run = Run(id=1, date="2025-06-01 08:30:00", steps=5, start_time=T0, end_time=T0)
        dumped = run.model_dump(mode="json", by_alias=True)
        assert dumped["startTime"] == "2025-06-01T08:00:00Z"
        assert Run.model_validate(dumped) == run

    def test_run_is_immutable(self):
        """Test runs cannot be edited."""
        run = Run(id=1, date="d", steps=5, start_time=T0, end_time=T0)
        with pytest.raises(ValidationError):
            run.steps = 6

    def test_negative_steps_rejected(self):
        """Test step counts are non-negative."""
        with pytest.raises(ValidationError):
            Run(id=1, date="d", steps=-1, start_time=T0, end_time=T0)

    def test_summary_from_run(self):
        """Test the history row projection."""
        run = Run(id=3, date="d", steps=0, start_time=T0, end_time=T0)
        summary = RunSummary.from_run(run)
        assert summary.distance_text == "0.00 km"
        assert summary.id == 3


class TestHelpers:
    """Test view helpers."""

    def test_path_bounds_empty(self):
        """Test an empty path has no bounds."""
        assert path_bounds(()) is None

    def test_path_bounds_single(self):
        """Test a single point is its own box."""
        bounds = path_bounds([GeoPoint(lat=1.0, lng=2.0)])
        assert (bounds.min_lat, bounds.max_lat, bounds.min_lng, bounds.max_lng) == (1.0, 1.0, 2.0, 2.0)

    def test_session_status_defaults(self):
        """Test idle status defaults."""
        status = SessionStatus(active=False)
        assert status.elapsed == "00:00:00"
        assert status.distance_text == "0.00 km"
