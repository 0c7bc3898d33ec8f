"""Configuration and constants for the gaze stream processor."""

from .config import (
    BufferConfig,
    SmoothingConfig,
    ClassificationConfig,
    DetectorConfig,
    SpeedConfig,
    StreamConfig,
)
from .constants import (
    BufferConstants,
    SmoothingConstants,
    ClassificationConstants,
    DetectorConstants,
    SpeedConstants,
    LineCounterConstants,
    ValidationMessages,
)

__all__ = [
    "BufferConfig",
    "SmoothingConfig",
    "ClassificationConfig",
    "DetectorConfig",
    "SpeedConfig",
    "StreamConfig",
    "BufferConstants",
    "SmoothingConstants",
    "ClassificationConstants",
    "DetectorConstants",
    "SpeedConstants",
    "LineCounterConstants",
    "ValidationMessages",
]
