# gaze_stream/speed.py
"""Words-per-minute estimate from confirmed line-advance events.

Every accepted event contributes the word count of the completed line and
the time spent on it. The estimate is the cumulative ratio over the whole
session, so a new content unit does not reset it; only a full reset does.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .config import SpeedConfig
from .domain.dataset import Sample
from .domain.events import LineAdvanceEvent, SpeedLogEntry
from .domain.layout import LineLayout


logger = logging.getLogger(__name__)

LineGeometry = Union[Mapping[int, int], Iterable[LineLayout]]


@dataclass
class SpeedState:
    word_sum: int = 0
    time_sum: float = 0.0
    last_event_line: Optional[int] = None
    last_event_time: Optional[int] = None
    wpm: int = 0
    # first event of a content unit only anchors the timing
    warming_up: bool = True
    log: List[SpeedLogEntry] = field(default_factory=list)


def words_per_minute(word_sum: int, time_sum_ms: float) -> int:
    if time_sum_ms <= 0:
        return 0
    value = Decimal(word_sum) / (Decimal(str(time_sum_ms)) / Decimal(60000))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ReadingSpeedEstimator:
    """Cumulative reading-speed estimator.

    Skips the warm-up event of each content unit, line 0, lines without
    known geometry and durations below ``min_line_duration_ms``.
    """

    def __init__(self, config: Optional[SpeedConfig] = None) -> None:
        self.config = config or SpeedConfig()
        self.state = SpeedState()
        self._line_words: Dict[int, int] = {}

    def set_line_geometry(self, geometry: LineGeometry) -> None:
        if isinstance(geometry, Mapping):
            self._line_words = {int(k): int(v) for k, v in geometry.items()}
        else:
            self._line_words = {layout.index: layout.word_count for layout in geometry}

    def words_for(self, line: int) -> Optional[int]:
        return self._line_words.get(line)

    def begin_unit(self) -> None:
        self.state.warming_up = True
        self.state.last_event_line = None
        self.state.last_event_time = None

    def restart_clock(self) -> None:
        self.state.last_event_time = None

    def reset(self) -> None:
        self.state = SpeedState()
        self._line_words = {}

    @property
    def wpm(self) -> int:
        return self.state.wpm

    def update(
        self,
        event: LineAdvanceEvent,
        samples: Sequence[Sample],
        search_floor: int = 0,
    ) -> Optional[SpeedLogEntry]:
        """Fold one event into the estimate; returns the log entry if accepted."""
        state = self.state
        line = event.line
        previous_line, previous_time = state.last_event_line, state.last_event_time
        state.last_event_line, state.last_event_time = line, event.time

        if state.warming_up:
            state.warming_up = False
            logger.debug("Speed warm-up event for line %s", line)
            return None
        if line == 0:
            return None
        words = self.words_for(line)
        if not words:
            logger.debug("No geometry for line %s", line)
            return None

        if previous_line == line - 1 and previous_time is not None:
            duration = event.time - previous_time
        else:
            duration = self._scan_duration(event, samples, search_floor)
        if duration is None or duration < self.config.min_line_duration_ms:
            return None

        state.word_sum += words
        state.time_sum += duration
        state.wpm = words_per_minute(state.word_sum, state.time_sum)
        entry = SpeedLogEntry(time=event.time, line=line, words=words, duration_ms=float(duration), wpm=state.wpm)
        state.log.append(entry)
        logger.debug("Line %s: %s words in %s ms -> %s wpm", line, words, duration, state.wpm)
        return entry

    def _scan_duration(self, event: LineAdvanceEvent, samples: Sequence[Sample], search_floor: int) -> Optional[float]:
        lower = max(search_floor, len(samples) - self.config.max_scan_samples, 0)
        first = None
        for idx in range(len(samples) - 1, lower - 1, -1):
            if samples[idx].line == event.line:
                first = idx
        if first is None:
            return None
        return event.time - samples[first].t
