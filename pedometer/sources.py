"""Collaborator contracts for motion, location and permission sources.

The push implementations deliver events synchronously on the caller's
thread, which is the event loop in the HTTP service.
"""

import itertools
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

import structlog

logger = structlog.get_logger(__name__)

MotionHandler = Callable[[Any], None]
FixHandler = Callable[[Any], None]
ErrorHandler = Callable[[Exception], None]


@dataclass(frozen=True)
class LocationOptions:
    enable_high_accuracy: bool = True
    timeout_ms: int = 5000
    maximum_age_ms: int = 0


class MotionSource(Protocol):
    def subscribe(self, handler: MotionHandler) -> None:
        ...

    def unsubscribe(self, handler: MotionHandler) -> None:
        ...


class LocationSource(Protocol):
    def watch(
        self, on_fix: FixHandler, on_error: ErrorHandler, options: LocationOptions
    ) -> int:
        ...

    def clear_watch(self, watch_id: int) -> None:
        ...


class PermissionProvider(Protocol):
    async def request_permission(self) -> bool:
        ...


class StaticPermission:
    """Permission answer fixed up front, for platforms without a prompt."""

    def __init__(self, granted: bool = True):
        self.granted = granted

    async def request_permission(self) -> bool:
        return self.granted


class PushMotionSource:
    """Fans pushed motion events out to current subscribers."""

    def __init__(self):
        self._handlers: List[MotionHandler] = []

    def subscribe(self, handler: MotionHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: MotionHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def push(self, event: Any) -> int:
        """Deliver ``event``; returns how many handlers received it."""
        handlers = list(self._handlers)
        for handler in handlers:
            handler(event)
        return len(handlers)


class PushLocationSource:
    """Long-lived fix subscriptions fed by ``push`` and ``fail``."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._watches: Dict[int, Tuple[FixHandler, ErrorHandler, LocationOptions]] = {}

    def watch(
        self, on_fix: FixHandler, on_error: ErrorHandler, options: LocationOptions
    ) -> int:
        watch_id = next(self._ids)
        self._watches[watch_id] = (on_fix, on_error, options)
        logger.debug("Location watch opened", watch_id=watch_id, options=options)
        return watch_id

    def clear_watch(self, watch_id: int) -> None:
        if self._watches.pop(watch_id, None) is not None:
            logger.debug("Location watch cleared", watch_id=watch_id)

    @property
    def watch_count(self) -> int:
        return len(self._watches)

    def options_for(self, watch_id: int) -> Optional[LocationOptions]:
        entry = self._watches.get(watch_id)
        return entry[2] if entry else None

    def push(self, fix: Any) -> int:
        watches = list(self._watches.values())
        for on_fix, _, _ in watches:
            on_fix(fix)
        return len(watches)

    def fail(self, error: Exception) -> int:
        watches = list(self._watches.values())
        for _, on_error, _ in watches:
            on_error(error)
        return len(watches)
