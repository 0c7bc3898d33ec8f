# gaze_stream/config/config.py
"""
Configuration classes for the gaze stream processor.

This module defines every tunable parameter for:
  - sample retention (capacity, trim policy)
  - smoothing (kernel weights)
  - movement classification (sensor codes, velocity fallback)
  - return-sweep detection (thresholds, timing guards)
  - reading-speed estimation (deferral, scan bounds)

Example:
    >>> from gaze_stream.config import StreamConfig, DetectorConfig
    >>>
    >>> # Default configuration
    >>> cfg = StreamConfig()
    >>>
    >>> # Stricter detector
    >>> cfg = StreamConfig(
    ...     detector=DetectorConfig(valley_velocity_threshold=-0.6, refractory_ms=700.0)
    ... )
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .constants import (
    BufferConstants,
    SmoothingConstants,
    ClassificationConstants,
    DetectorConstants,
    SpeedConstants,
    ValidationMessages,
)


@dataclass
class BufferConfig:
    """
    Retention policy of the sample buffer.
    """

    # Hard upper bound of retained samples
    max_capacity: int = BufferConstants.MAX_CAPACITY

    # Oldest fraction removed in one batch on overflow
    trim_fraction: float = BufferConstants.TRIM_FRACTION

    # Samples before the preprocessing cursor revisited by each batch
    reprocess_overlap: int = BufferConstants.REPROCESS_OVERLAP

    # Ingested samples between diagnostic log lines (0 disables them)
    diagnostic_interval: int = BufferConstants.DIAGNOSTIC_INTERVAL

    def __post_init__(self) -> None:
        if self.max_capacity < 10:
            raise ValueError(ValidationMessages.INVALID_CAPACITY)
        if not 0.0 < self.trim_fraction < 1.0:
            raise ValueError(ValidationMessages.INVALID_TRIM_FRACTION)
        if self.reprocess_overlap < 0:
            raise ValueError(ValidationMessages.INVALID_OVERLAP)


@dataclass
class SmoothingConfig:
    """
    Weighted moving average applied to the working position.
    """

    kernel: Tuple[float, ...] = SmoothingConstants.KERNEL

    def __post_init__(self) -> None:
        self.kernel = tuple(float(w) for w in self.kernel)
        if len(self.kernel) % 2 == 0 or any(w < 0 for w in self.kernel) or sum(self.kernel) <= 0:
            raise ValueError(ValidationMessages.INVALID_KERNEL)

    @property
    def radius(self) -> int:
        return len(self.kernel) // 2


@dataclass
class ClassificationConfig:
    """
    Mapping of sensor movement codes to sample classes.
    """

    fixation_state: int = ClassificationConstants.SENSOR_FIXATION_STATE
    saccade_state: int = ClassificationConstants.SENSOR_SACCADE_STATE

    # When the sensor gives no usable code, speeds below this value are
    # fixations and anything else a saccade. None keeps such samples Unknown.
    fallback_velocity_threshold: Optional[float] = ClassificationConstants.FALLBACK_VELOCITY_THRESHOLD


@dataclass
class DetectorConfig:
    """
    Thresholds and timing guards of the return-sweep detector.
    """

    # Velocity valley must be deeper than this (position-units per ms)
    valley_velocity_threshold: float = DetectorConstants.VALLEY_VELOCITY_THRESHOLD

    # |valley time - peak time| must stay below this
    cascade_window_ms: float = DetectorConstants.CASCADE_WINDOW_MS

    # Minimum time between two fired events
    refractory_ms: float = DetectorConstants.REFRACTORY_MS

    # How long a context-less trigger waits for its line annotation
    pending_timeout_ms: float = DetectorConstants.PENDING_TIMEOUT_MS

    # Monotonic-line guard floor
    initial_max_line: int = DetectorConstants.INITIAL_MAX_LINE

    def __post_init__(self) -> None:
        if self.valley_velocity_threshold >= 0:
            raise ValueError(ValidationMessages.INVALID_VALLEY_THRESHOLD)
        if min(self.cascade_window_ms, self.refractory_ms, self.pending_timeout_ms) <= 0:
            raise ValueError(ValidationMessages.INVALID_WINDOW)


@dataclass
class SpeedConfig:
    """
    Reading-speed (WPM) estimator parameters.
    """

    # Delay between a fired event and its speed update
    update_delay_ms: float = SpeedConstants.UPDATE_DELAY_MS

    # Backward scan bound when the previous event is not for the previous line
    max_scan_samples: int = SpeedConstants.MAX_SCAN_SAMPLES

    # Shorter line durations are ignored
    min_line_duration_ms: float = SpeedConstants.MIN_LINE_DURATION_MS

    def __post_init__(self) -> None:
        if self.max_scan_samples < 1:
            raise ValueError(ValidationMessages.INVALID_SCAN)
        if self.update_delay_ms < 0 or self.min_line_duration_ms < 0:
            raise ValueError(ValidationMessages.INVALID_WINDOW)


@dataclass
class StreamConfig:
    """Aggregated configuration of a :class:`GazeStreamProcessor`."""

    buffer: BufferConfig = field(default_factory=BufferConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    speed: SpeedConfig = field(default_factory=SpeedConfig)
