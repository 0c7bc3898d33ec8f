"""Events and derived records produced by the detector and speed estimator."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TriggerKind(Enum):
    """How a line-advance event was confirmed."""

    # peak/valley cascade on a sample that carried its line annotation
    CASCADE = "cascade"
    # cascade queued without context and confirmed by a later line change
    DEFERRED_CONTEXT = "deferred_context"


@dataclass(frozen=True)
class LineAdvanceEvent:
    """The reader completed ``line`` and swept to the next one."""

    time: int
    line: int
    trigger_kind: TriggerKind
    velocity: float


@dataclass(frozen=True)
class PendingEvent:
    """Cascade waiting for the reading context to catch up."""

    time: int
    velocity: float


@dataclass(frozen=True)
class SpeedLogEntry:
    """One accepted reading-speed update."""

    time: int
    line: int
    words: int
    duration_ms: float
    wpm: int
