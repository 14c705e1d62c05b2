"""Global test configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from pedometer.archive import RunArchive
from pedometer.config import Settings
from pedometer.session import SessionController
from pedometer.sources import PushLocationSource, PushMotionSource, StaticPermission
from pedometer.storage import MemoryStore

SAMPLE_INTERVAL_MS = 20


class FakeClock:
    """Manually advanced clock handed to the session controller."""

    def __init__(self, start: datetime = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def feed_spikes(controller, clock, count, gap_ms, magnitude=20.0):
    """Drive ``count`` vertical spikes, ``gap_ms`` apart, over a zero baseline.

    Samples arrive every 20 ms; the gap is rounded to that cadence.
    Returns the number of steps the controller reported.
    """
    steps = 0
    per_gap = max(gap_ms // SAMPLE_INTERVAL_MS, 1)
    for i in range(count):
        if controller.handle_motion({"x": 0.0, "y": 0.0, "z": magnitude}):
            steps += 1
        clock.advance(milliseconds=SAMPLE_INTERVAL_MS)
        samples_after = per_gap - 1 if i < count - 1 else 20
        for _ in range(samples_after):
            if controller.handle_motion({"x": 0.0, "y": 0.0, "z": 0.0}):
                steps += 1
            clock.advance(milliseconds=SAMPLE_INTERVAL_MS)
    return steps


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def archive(store):
    return RunArchive(store)


@pytest.fixture
def motion_source():
    return PushMotionSource()


@pytest.fixture
def location_source():
    return PushLocationSource()


@pytest.fixture
def controller(archive, motion_source, location_source, settings, clock):
    """Controller wired to in-process sources and a granted permission."""
    return SessionController(
        archive,
        motion_source=motion_source,
        location_source=location_source,
        permissions=StaticPermission(True),
        settings=settings,
        clock=clock,
    )


@pytest.fixture
def spikes():
    return feed_spikes
