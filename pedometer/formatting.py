"""Display helpers for elapsed time and step-based distance."""

from datetime import timedelta

STEP_LENGTH_M = 0.762


def seconds_to_hhmmss(total_seconds: int) -> str:
    """
    Convert total seconds (int) -> 'HH:MM:SS'.
    Example: 2732 -> '00:45:32'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_elapsed(elapsed: timedelta) -> str:
    """Whole elapsed seconds as HH:MM:SS; negative spans clamp to zero."""
    total = int(elapsed.total_seconds())
    return seconds_to_hhmmss(max(total, 0))


def distance_km(steps: int, step_length_m: float = STEP_LENGTH_M) -> float:
    return steps * step_length_m / 1000


def format_distance(steps: int, step_length_m: float = STEP_LENGTH_M) -> str:
    """
    Distance text as shown next to the step counter.
    Example: 1000 -> '0.76 km'
    """
    return f"{distance_km(steps, step_length_m):.2f} km"
