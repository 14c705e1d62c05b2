"""Error taxonomy for the pedometer core."""


class PedometerError(Exception):
    """Base class for pedometer errors."""


class PermissionDenied(PedometerError):
    """Motion sensor access was refused; the session did not start."""


class LocationUnavailable(PedometerError):
    """No location capability, or the location watch reported a failure."""


class MalformedSample(PedometerError):
    """A motion event is missing axis data or carries non-finite values."""


class ArchiveCorrupted(PedometerError):
    """The persisted run archive could not be decoded."""
