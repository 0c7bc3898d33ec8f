"""Data structures for streamed gaze samples.

A sample exists in two versions: the immutable :class:`RawGaze` reported by
the tracker and the :class:`Sample` record that the processing stages fill in
place. ``Sample.stage`` tells how far a record has been processed; each stage
module documents the fields it writes.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


class SampleClassification(Enum):
    """Eye movement class of a single sample."""

    UNKNOWN = "Unknown"
    FIXATION = "Fixation"
    SACCADE = "Saccade"


class ProcessingStage(IntEnum):
    """Last pipeline stage that wrote to a sample."""

    RAW = 0
    INTERPOLATED = 1
    SMOOTHED = 2
    DIFFERENTIATED = 3
    CLASSIFIED = 4


@dataclass(frozen=True)
class RawGaze:
    """One observation as delivered by the tracker callback."""

    timestamp: float
    x: float
    y: float
    movement_state: Optional[int] = None


def is_missing(x, y) -> bool:
    """True for non-numeric or non-finite coordinates and the (0, 0) dropout."""
    if isinstance(x, bool) or isinstance(y, bool):
        return True
    if not isinstance(x, numbers.Real) or not isinstance(y, numbers.Real):
        return True
    if not (math.isfinite(x) and math.isfinite(y)):
        return True
    return x == 0 and y == 0


def _working_value(value) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return float("nan")
    return value


@dataclass(frozen=True)
class ReadingContext:
    """Reading position reported by the presentation layer."""

    line: Optional[int] = None
    paragraph: Optional[int] = None
    word: Optional[int] = None


@dataclass
class Sample:
    """Single gaze observation relative to the session origin."""

    t: int
    x: float
    y: float
    raw: Optional[RawGaze] = None

    gx: Optional[float] = None
    gy: Optional[float] = None
    vx: Optional[float] = None
    vy: Optional[float] = None

    line: Optional[int] = None
    paragraph: Optional[int] = None
    word: Optional[int] = None

    classification: SampleClassification = SampleClassification.UNKNOWN
    fired_event: bool = False
    interpolated: bool = False
    stage: ProcessingStage = field(default=ProcessingStage.RAW)

    @classmethod
    def from_raw(cls, raw: RawGaze, t: int, context: ReadingContext) -> "Sample":
        return cls(
            t=t,
            x=_working_value(raw.x),
            y=_working_value(raw.y),
            raw=raw,
            line=context.line,
            paragraph=context.paragraph,
            word=context.word,
        )

    @property
    def raw_missing(self) -> bool:
        """Whether the tracker reported no usable position for this sample."""
        if self.raw is None:
            return is_missing(self.x, self.y)
        return is_missing(self.raw.x, self.raw.y)

    @property
    def movement_state(self) -> Optional[int]:
        return self.raw.movement_state if self.raw is not None else None
