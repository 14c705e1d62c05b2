"""Append-only buffer of GPS fixes for the active session."""

import math
from typing import List

from .models import GeoPoint


class PathAccumulator:
    """Keeps fixes in arrival order.

    Fixes are neither deduplicated nor resequenced; GPS jitter is stored as-is.
    """

    def __init__(self):
        self._points: List[GeoPoint] = []

    def append(self, point: GeoPoint) -> None:
        if not (math.isfinite(point.lat) and math.isfinite(point.lng)):
            raise ValueError(f"non-finite coordinates: {point.lat}, {point.lng}")
        self._points.append(point)

    def points(self) -> tuple[GeoPoint, ...]:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __bool__(self) -> bool:
        return bool(self._points)
