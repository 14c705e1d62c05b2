"""Prometheus metrics for step detection and the run archive"""
from prometheus_client import Counter, Gauge

# Counters
samples_processed = Counter(
    'pedometer_samples_processed_total',
    'Total accelerometer samples run through the motion filter'
)

samples_dropped = Counter(
    'pedometer_samples_dropped_total',
    'Total malformed accelerometer samples dropped'
)

steps_detected = Counter(
    'pedometer_steps_detected_total',
    'Total steps registered by the step detector'
)

location_warnings = Counter(
    'pedometer_location_warnings_total',
    'Total non-fatal location failures'
)

runs_archived = Counter(
    'pedometer_runs_archived_total',
    'Total runs written to the archive'
)

runs_discarded = Counter(
    'pedometer_runs_discarded_total',
    'Total empty sessions stopped without archiving'
)

runs_deleted = Counter(
    'pedometer_runs_deleted_total',
    'Total runs removed from the archive'
)

# Gauges
session_active = Gauge(
    'pedometer_session_active',
    'Whether a tracking session is currently active'
)
