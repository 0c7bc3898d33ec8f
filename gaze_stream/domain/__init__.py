"""Domain models for streamed reading-gaze samples and derived events."""

from .dataset import (
    RawGaze,
    Sample,
    ReadingContext,
    SampleClassification,
    ProcessingStage,
    is_missing,
)
from .events import LineAdvanceEvent, PendingEvent, SpeedLogEntry, TriggerKind
from .layout import LineLayout

__all__ = [
    "RawGaze",
    "Sample",
    "ReadingContext",
    "SampleClassification",
    "ProcessingStage",
    "is_missing",
    "LineAdvanceEvent",
    "PendingEvent",
    "SpeedLogEntry",
    "TriggerKind",
    "LineLayout",
]
