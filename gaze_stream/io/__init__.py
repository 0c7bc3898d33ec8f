"""I/O utilities: observers, tabular export and session replay."""

from .export import (
    samples_to_frame,
    events_to_frame,
    speed_log_to_frame,
    read_tsv,
    write_tsv,
)
from .observers import (
    LineAdvanceObserver,
    CallbackObserver,
    EventRecorder,
    ConsoleReporter,
    EventChannel,
)

__all__ = [
    "samples_to_frame",
    "events_to_frame",
    "speed_log_to_frame",
    "read_tsv",
    "write_tsv",
    "LineAdvanceObserver",
    "CallbackObserver",
    "EventRecorder",
    "ConsoleReporter",
    "EventChannel",
]
