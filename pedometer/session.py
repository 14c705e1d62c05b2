"""Tracking session state machine.

The ``Session`` value is owned by a single ``SessionController`` and is
changed only through the transition functions below, so the state machine
can be driven without a live event loop. The controller wires those
transitions to the motion, location and permission collaborators.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator, Callable, Optional

import structlog
from pydantic import ValidationError

from . import metrics
from .archive import RunArchive
from .config import Settings
from .errors import LocationUnavailable, MalformedSample, PermissionDenied
from .formatting import distance_km, format_distance, format_elapsed
from .models import AccelerometerReading, GeoPoint, Run, SessionStatus
from .motion_filter import MotionFilter
from .path import PathAccumulator
from .sources import LocationOptions, LocationSource, MotionSource, PermissionProvider
from .step_detector import StepDetector

logger = structlog.get_logger(__name__)

RUN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    start_time: datetime
    motion_filter: MotionFilter
    detector: StepDetector
    path: PathAccumulator = field(default_factory=PathAccumulator)
    step_count: int = 0
    last_step_time: Optional[datetime] = None
    is_active: bool = True


def parse_sample(event: Any) -> AccelerometerReading:
    """Accept a reading, a plain ``{x, y, z}`` mapping, or a device motion
    event carrying ``accelerationIncludingGravity``."""
    if isinstance(event, AccelerometerReading):
        return event
    if isinstance(event, Mapping) and "accelerationIncludingGravity" in event:
        event = event["accelerationIncludingGravity"]
    if not isinstance(event, Mapping):
        raise MalformedSample("motion event has no acceleration data")
    try:
        return AccelerometerReading.model_validate(event)
    except ValidationError as e:
        raise MalformedSample(str(e)) from e


def parse_fix(fix: Any) -> GeoPoint:
    """Accept a point, a ``{lat, lng}`` / ``{latitude, longitude}`` mapping,
    or a position with nested ``coords``."""
    if isinstance(fix, GeoPoint):
        return fix
    if isinstance(fix, Mapping) and "coords" in fix:
        fix = fix["coords"]
    if not isinstance(fix, Mapping):
        raise LocationUnavailable("location fix has no coordinates")
    try:
        return GeoPoint.model_validate(fix)
    except ValidationError as e:
        raise LocationUnavailable(f"invalid location fix: {e}") from e


def start_session(now: datetime, settings: Settings) -> Session:
    return Session(
        start_time=now,
        motion_filter=MotionFilter(settings.gravity_alpha),
        detector=StepDetector(
            threshold_ms2=settings.step_threshold_ms2,
            min_step_delay=timedelta(milliseconds=settings.min_step_delay_ms),
        ),
    )


def on_sample(session: Session, reading: AccelerometerReading, now: datetime) -> bool:
    """Filter one sample and count a step if one fires."""
    linear = session.motion_filter.update(reading)
    is_step, session.last_step_time = session.detector.detect(
        linear, now, session.last_step_time
    )
    if is_step:
        session.step_count += 1
    return is_step


def on_fix(session: Session, point: GeoPoint) -> None:
    session.path.append(point)


def stop_session(session: Session, now: datetime) -> Optional[Run]:
    """Deactivate and build the Run, or None for an empty walk."""
    session.is_active = False
    if session.step_count == 0 and not session.path:
        return None
    return Run(
        id=int(now.timestamp() * 1000),
        date=now.astimezone().strftime(RUN_DATE_FORMAT),
        steps=session.step_count,
        start_time=session.start_time,
        end_time=now,
        path=session.path.points(),
    )


class SessionController:
    """Owns the single tracking session and reacts to sensor events.

    All handlers run on one event loop and never block; only ``start``
    suspends, while the permission request is pending.
    """

    def __init__(
        self,
        archive: RunArchive,
        motion_source: Optional[MotionSource] = None,
        location_source: Optional[LocationSource] = None,
        permissions: Optional[PermissionProvider] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.archive = archive
        self.motion_source = motion_source
        self.location_source = location_source
        self.permissions = permissions
        self.settings = settings or Settings()
        self._clock = clock
        self._session: Optional[Session] = None
        self._watch_id: Optional[int] = None

    @property
    def active(self) -> bool:
        return self._session is not None and self._session.is_active

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def step_count(self) -> int:
        return self._session.step_count if self._session else 0

    @property
    def location_options(self) -> LocationOptions:
        return LocationOptions(
            enable_high_accuracy=self.settings.location_high_accuracy,
            timeout_ms=self.settings.location_timeout_ms,
            maximum_age_ms=self.settings.location_maximum_age_ms,
        )

    async def start(self, permissions: Optional[PermissionProvider] = None) -> Session:
        """Enter Active once motion permission is granted.

        ``permissions`` overrides the controller's provider for this call only.
        Raises PermissionDenied and stays Idle when access is refused.
        """
        if self._session is not None:
            logger.warning("Start ignored, session already active")
            return self._session

        if permissions is None:
            permissions = self.permissions
        if permissions is not None:
            try:
                granted = await permissions.request_permission()
            except Exception as e:
                logger.error("Motion permission request failed", error=str(e))
                raise PermissionDenied("motion permission request failed") from e
            if not granted:
                logger.warning("Motion permission denied")
                raise PermissionDenied("motion sensor permission denied")

        # another start may have completed while we awaited
        if self._session is not None:
            return self._session

        self._session = start_session(self._clock(), self.settings)
        metrics.session_active.set(1)

        if self.motion_source is not None:
            self.motion_source.subscribe(self.handle_motion)
        self._open_location_watch()

        logger.info("Session started", start_time=self._session.start_time.isoformat())
        return self._session

    def _open_location_watch(self) -> None:
        if self.location_source is None:
            self.handle_location_error(LocationUnavailable("geolocation not supported"))
            return
        try:
            self._watch_id = self.location_source.watch(
                self.handle_fix, self.handle_location_error, self.location_options
            )
        except Exception as e:
            self.handle_location_error(LocationUnavailable(f"location watch failed: {e}"))

    def _close_sources(self) -> None:
        if self.motion_source is not None:
            self.motion_source.unsubscribe(self.handle_motion)
        if self._watch_id is not None and self.location_source is not None:
            self.location_source.clear_watch(self._watch_id)
        self._watch_id = None

    def handle_motion(self, event: Any) -> bool:
        """Process one accelerometer event. Returns True when a step fired."""
        session = self._session
        if session is None or not session.is_active:
            return False
        try:
            reading = parse_sample(event)
        except MalformedSample as e:
            metrics.samples_dropped.inc()
            logger.debug("Malformed motion sample dropped", error=str(e))
            return False

        metrics.samples_processed.inc()
        stepped = on_sample(session, reading, self._clock())
        if stepped:
            metrics.steps_detected.inc()
            logger.debug("Step detected", steps=session.step_count)
        return stepped

    def handle_fix(self, fix: Any) -> bool:
        """Append one location fix. Returns True when it was recorded."""
        session = self._session
        if session is None or not session.is_active:
            return False
        try:
            on_fix(session, parse_fix(fix))
        except (LocationUnavailable, ValueError) as e:
            self.handle_location_error(e)
            return False
        return True

    def handle_location_error(self, error: Exception) -> None:
        metrics.location_warnings.inc()
        logger.warning("Location unavailable", error=str(error))

    def stop(self) -> Optional[Run]:
        """Leave Active and archive the run if anything was recorded.

        Safe to call when Idle.
        """
        session = self._session
        if session is None:
            return None
        self._session = None
        metrics.session_active.set(0)
        self._close_sources()

        run = stop_session(session, self._clock())
        if run is None:
            metrics.runs_discarded.inc()
            logger.info("Empty run discarded")
            return None
        return self.archive.append(run)

    def elapsed(self) -> str:
        if self._session is None:
            return format_elapsed(timedelta(0))
        return format_elapsed(self._clock() - self._session.start_time)

    def status(self) -> SessionStatus:
        steps = self.step_count
        return SessionStatus(
            active=self.active,
            steps=steps,
            distance_km=distance_km(steps, self.settings.step_length_m),
            distance_text=format_distance(steps, self.settings.step_length_m),
            elapsed=self.elapsed(),
        )

    async def ticker(self, interval: Optional[float] = None) -> AsyncIterator[SessionStatus]:
        """Yield live status every ``interval`` seconds until the session stops."""
        if interval is None:
            interval = self.settings.tick_interval_seconds
        while self.active:
            yield self.status()
            await asyncio.sleep(interval)
