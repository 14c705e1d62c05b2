"""Threshold peak detector with a refractory period."""

from datetime import datetime, timedelta
from typing import Optional, Tuple

import numpy as np

STEP_THRESHOLD_MS2 = 2.5
MIN_STEP_DELAY = timedelta(milliseconds=300)


class StepDetector:
    """Registers a step when linear acceleration crosses the threshold.

    ``threshold_ms2`` trades sensitivity against false positives.
    ``min_step_delay`` caps the supported cadence (300 ms is about 3.3 Hz):
    spikes closer together than that count once. Sustained vibration above
    the threshold, e.g. in a vehicle, is still counted.
    """

    def __init__(
        self,
        threshold_ms2: float = STEP_THRESHOLD_MS2,
        min_step_delay: timedelta = MIN_STEP_DELAY,
    ):
        self.threshold_ms2 = threshold_ms2
        self.min_step_delay = min_step_delay

    def detect(
        self,
        linear: np.ndarray,
        now: datetime,
        last_step_time: Optional[datetime],
    ) -> Tuple[bool, Optional[datetime]]:
        magnitude = float(np.linalg.norm(linear))
        if magnitude <= self.threshold_ms2:
            return False, last_step_time
        if last_step_time is not None and now - last_step_time <= self.min_step_delay:
            return False, last_step_time
        return True, now
