# gaze_stream/config/constants.py
"""Tuning constants for the reading-gaze stream processor."""

from __future__ import annotations


class BufferConstants:
    """Retention limits of the sample buffer."""

    # ~5 minutes at 30 Hz
    MAX_CAPACITY: int = 9000

    # Fraction of the oldest samples dropped per trim
    TRIM_FRACTION: float = 0.1

    # Already-processed samples revisited by every incremental batch
    REPROCESS_OVERLAP: int = 2

    # Ingested samples between two diagnostic log lines
    DIAGNOSTIC_INTERVAL: int = 1000


class SmoothingConstants:
    """Gaussian kernel (sigma ~ 1) used for incremental smoothing."""

    KERNEL: tuple = (0.0545, 0.2442, 0.4026, 0.2442, 0.0545)


class ClassificationConstants:
    """Sensor movement codes and the velocity fallback."""

    SENSOR_FIXATION_STATE: int = 0
    SENSOR_SACCADE_STATE: int = 2

    # position-units per ms (0.5 px/ms = 500 px/s)
    FALLBACK_VELOCITY_THRESHOLD: float = 0.5


class DetectorConstants:
    """Return-sweep detector thresholds."""

    # Minimum valley depth (position-units per ms)
    VALLEY_VELOCITY_THRESHOLD: float = -0.4

    # Max separation between position peak and velocity valley (ms)
    CASCADE_WINDOW_MS: float = 600.0

    # Cooldown after a fired event (ms)
    REFRACTORY_MS: float = 500.0

    # Lifetime of an event waiting for reading context (ms)
    PENDING_TIMEOUT_MS: float = 1000.0

    # Below the lowest valid line so the first transition can fire
    INITIAL_MAX_LINE: int = -1


class SpeedConstants:
    """Reading-speed estimator parameters."""

    UPDATE_DELAY_MS: float = 100.0
    MAX_SCAN_SAMPLES: int = 800
    MIN_LINE_DURATION_MS: float = 100.0


class LineCounterConstants:
    """Offline extrema-pairing line counter."""

    MIN_SAMPLES: int = 10
    SIGMA: float = 3.0
    EXTREMA_WINDOW: int = 10
    AMPLITUDE_THRESHOLD: float = 50.0
    MIN_RISE_DURATION_MS: float = 200.0
    MIN_PEAK_SPACING_MS: float = 500.0


class ValidationMessages:
    """Standard validation and error messages."""

    INVALID_CAPACITY = "max_capacity must be >= 10"
    INVALID_TRIM_FRACTION = "trim_fraction must be in (0, 1)"
    INVALID_OVERLAP = "reprocess_overlap must be >= 0"
    INVALID_KERNEL = "kernel must have an odd number of non-negative weights"
    INVALID_VALLEY_THRESHOLD = "valley_velocity_threshold must be negative"
    INVALID_WINDOW = "timing windows must be positive"
    INVALID_SCAN = "max_scan_samples must be >= 1"
    UNKNOWN_CONTEXT_FIELD = "Unknown context field(s): {}"
