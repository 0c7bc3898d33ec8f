# gaze_stream/detection/return_sweep.py
"""
Return-sweep (line-advance) detection on the smoothed gaze stream.

A return sweep is the fast leftward saccade that follows reading to the end
of a line. On the smoothed horizontal position it shows up as a cascade: a
position peak (rightmost point of the line) followed closely by a deep
valley in horizontal velocity. The detector looks at the newest sample and
its two predecessors only, so a decision is made one sample after the
valley.

Guards, in the order they are applied:
  - no event before the first content was displayed
  - refractory cooldown after the previous event
  - the valley must lie within the cascade window of the last peak
  - the triggering sample must carry a line annotation; without one the
    trigger is parked as a pending event until a line change confirms it
  - line 0 never fires, and lines must strictly increase within a content
    unit (monotonic-line guard)

Writes: ``Sample.fired_event`` on the trigger sample.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config import DetectorConfig
from ..domain.dataset import Sample
from ..domain.events import LineAdvanceEvent, PendingEvent, TriggerKind


logger = logging.getLogger(__name__)


@dataclass
class DetectorState:
    """Long-lived detector state of one reading session."""

    # 0 means no peak since the last event
    last_position_peak_time: int = 0
    last_event_time: Optional[int] = None
    max_line_reached: int = -1
    pending_event: Optional[PendingEvent] = None
    first_content_time: int = 0


class ReturnSweepDetector:
    """Stateful peak/valley cascade detector."""

    def __init__(self, config: Optional[DetectorConfig] = None) -> None:
        self.config = config or DetectorConfig()
        self.state = DetectorState(max_line_reached=self.config.initial_max_line)

    def reset_triggers(self) -> None:
        """Clear the transient guards for a new content unit."""
        self.state = DetectorState(
            max_line_reached=self.config.initial_max_line,
            first_content_time=self.state.first_content_time,
        )

    def reset(self) -> None:
        self.state = DetectorState(max_line_reached=self.config.initial_max_line)

    def mark_content_start(self, t: int) -> None:
        self.state.first_content_time = int(t)

    def restart_clock(self) -> None:
        """Drop the time anchors after the host clock restarted.

        Line progress is kept; only values measured on the old clock go.
        """
        state = self.state
        state.last_position_peak_time = 0
        state.last_event_time = None
        state.pending_event = None
        state.first_content_time = 0

    def process(self, samples: List[Sample], idx: int) -> Optional[LineAdvanceEvent]:
        """Evaluate ``samples[idx]`` as the newest sample of the stream.

        Returns the fired event, if any.
        """
        if idx < 1:
            return None
        current = samples[idx]
        previous = samples[idx - 1]
        if idx >= 2:
            self._update_peak(samples[idx - 2], previous, current)

        event = self._resolve_pending(previous, current)
        if event is not None or idx < 2:
            return event
        return self._check_cascade(samples[idx - 2], previous, current)

    def _update_peak(self, older: Sample, previous: Sample, current: Sample) -> None:
        sx2, sx1, sx0 = older.gx, previous.gx, current.gx
        if sx2 is not None and sx1 is not None and sx0 is not None:
            if sx1 >= sx2 and sx1 > sx0:
                self.state.last_position_peak_time = previous.t
                return
        v1, v0 = previous.vx, current.vx
        # plateau peak: velocity turns negative without a strict maximum
        if v1 is not None and v0 is not None and v1 >= 0 and v0 < 0:
            self.state.last_position_peak_time = previous.t

    def _is_valley(self, older: Sample, previous: Sample, current: Sample) -> bool:
        v2, v1, v0 = older.vx, previous.vx, current.vx
        if v2 is None or v1 is None or v0 is None:
            return False
        return v2 > v1 and v1 < v0 and v1 < self.config.valley_velocity_threshold

    def _in_cooldown(self, t: int) -> bool:
        last = self.state.last_event_time
        if last is None:
            return False
        return 0 <= t - last < self.config.refractory_ms

    def _check_cascade(self, older: Sample, previous: Sample, current: Sample) -> Optional[LineAdvanceEvent]:
        if not self._is_valley(older, previous, current):
            return None

        state = self.state
        if current.t < state.first_content_time:
            return None
        if self._in_cooldown(current.t):
            logger.debug("Valley at t=%s rejected: cooldown", current.t)
            return None

        elapsed = previous.t - state.last_position_peak_time
        if not abs(elapsed) < self.config.cascade_window_ms:
            logger.debug("Valley at t=%s rejected: %s ms after last peak", current.t, elapsed)
            return None

        line = current.line
        if line is None:
            state.pending_event = PendingEvent(time=current.t, velocity=previous.vx)
            logger.debug("Valley at t=%s has no line context; pending", current.t)
            return None
        if line == 0:
            return None
        if line <= state.max_line_reached:
            logger.debug("Valley at t=%s rejected: line %s <= %s", current.t, line, state.max_line_reached)
            return None

        return self._fire(current, line, TriggerKind.CASCADE, previous.vx)

    def _resolve_pending(self, previous: Sample, current: Sample) -> Optional[LineAdvanceEvent]:
        pending = self.state.pending_event
        if pending is None:
            return None
        age = current.t - pending.time
        if age < 0 or age > self.config.pending_timeout_ms:
            logger.debug("Pending trigger from t=%s expired", pending.time)
            self.state.pending_event = None
            return None
        line = current.line
        if line is None or line == previous.line:
            return None

        # the first annotated line change decides the pending trigger
        self.state.pending_event = None
        if line == 0 or line <= self.state.max_line_reached or self._in_cooldown(current.t):
            logger.debug("Pending trigger from t=%s dropped at line %s", pending.time, line)
            return None
        return self._fire(current, line, TriggerKind.DEFERRED_CONTEXT, pending.velocity)

    def _fire(self, sample: Sample, line: int, kind: TriggerKind, velocity: float) -> LineAdvanceEvent:
        state = self.state
        target_line = line - 1 if line > 0 else 0
        state.last_event_time = sample.t
        state.max_line_reached = line
        state.last_position_peak_time = 0
        state.pending_event = None
        sample.fired_event = True
        logger.debug("Line %s completed at t=%s (%s, v=%.3f)", target_line, sample.t, kind.value, velocity)
        return LineAdvanceEvent(time=sample.t, line=target_line, trigger_kind=kind, velocity=velocity)
