"""Gravity removal for raw accelerometer samples."""

from typing import Tuple

import numpy as np

from .models import AccelerometerReading

DEFAULT_ALPHA = 0.8


def as_vector(reading: AccelerometerReading) -> np.ndarray:
    return np.array([reading.x, reading.y, reading.z], dtype=float)


def filter_sample(
    gravity: np.ndarray, sample: np.ndarray, alpha: float = DEFAULT_ALPHA
) -> Tuple[np.ndarray, np.ndarray]:
    """
    One step of the low-pass / high-pass pair.

    Returns the updated gravity estimate ``alpha * g + (1 - alpha) * sample``
    and the linear acceleration ``sample - g'``.
    """
    new_gravity = alpha * gravity + (1.0 - alpha) * sample
    return new_gravity, sample - new_gravity


class MotionFilter:
    """Separates the quasi-static gravity vector from motion.

    A larger ``alpha`` tracks gravity more slowly and rejects more
    low-frequency noise.
    """

    def __init__(self, alpha: float = DEFAULT_ALPHA):
        if not 0.0 < alpha < 1.0:
            raise ValueError(f"alpha must be in (0, 1), got {alpha}")
        self.alpha = alpha
        self._gravity = np.zeros(3)

    @property
    def gravity(self) -> np.ndarray:
        return self._gravity.copy()

    def reset(self) -> None:
        self._gravity = np.zeros(3)

    def update(self, reading: AccelerometerReading) -> np.ndarray:
        """Feed one raw sample and return its linear acceleration."""
        self._gravity, linear = filter_sample(self._gravity, as_vector(reading), self.alpha)
        return linear
