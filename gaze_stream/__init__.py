"""
Gaze stream package.

Contains:
- Bounded sample buffer with reading-context annotation
- Incremental gap filling, smoothing and velocity estimation
- Return-sweep (line-advance) detection
- Reading-speed (WPM) estimation
- Replay of recorded sessions
"""

from .config import (
    StreamConfig,
    BufferConfig,
    SmoothingConfig,
    ClassificationConfig,
    DetectorConfig,
    SpeedConfig,
)
from .domain import (
    RawGaze,
    Sample,
    ReadingContext,
    SampleClassification,
    LineAdvanceEvent,
    TriggerKind,
    SpeedLogEntry,
    LineLayout,
)
from .errors import GazeStreamError, IngestionError
from .scheduling import DeferredScheduler, ThreadedTimerScheduler, ManualScheduler
from .engine import GazeStreamProcessor
from .io.observers import LineAdvanceObserver, EventRecorder, ConsoleReporter
from .io.pipeline import ReplayPipeline, ReplayResult

__all__ = [
    "StreamConfig",
    "BufferConfig",
    "SmoothingConfig",
    "ClassificationConfig",
    "DetectorConfig",
    "SpeedConfig",
    "RawGaze",
    "Sample",
    "ReadingContext",
    "SampleClassification",
    "LineAdvanceEvent",
    "TriggerKind",
    "SpeedLogEntry",
    "LineLayout",
    "GazeStreamError",
    "IngestionError",
    "DeferredScheduler",
    "ThreadedTimerScheduler",
    "ManualScheduler",
    "GazeStreamProcessor",
    "LineAdvanceObserver",
    "EventRecorder",
    "ConsoleReporter",
    "ReplayPipeline",
    "ReplayResult",
]
