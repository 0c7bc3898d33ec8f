"""Streaming orchestration of the reading-gaze processor."""
from __future__ import annotations

import dataclasses
import logging
import math
import threading
from typing import List, Optional

import pandas as pd

from .buffer import SampleBuffer
from .config import StreamConfig, ValidationMessages
from .detection import DetectorState, ReturnSweepDetector, count_lines
from .domain.dataset import RawGaze, ReadingContext, Sample, SampleClassification
from .domain.events import LineAdvanceEvent, SpeedLogEntry
from .errors import IngestionError
from .io.export import samples_to_frame
from .io.observers import EventChannel, LineAdvanceObserver, ObserverLike
from .scheduling import DeferredScheduler, ThreadedTimerScheduler
from .speed import LineGeometry, ReadingSpeedEstimator, SpeedState
from .stages import (
    GapFillingStage,
    NoiseReductionStage,
    VelocityComputationStage,
    MovementClassificationStage,
    IStreamStage,
)


logger = logging.getLogger(__name__)

PREPROCESS_CURSOR = "preprocess"
CONSUME_CURSOR = "consume"
SEARCH_FLOOR_CURSOR = "search_floor"

CONTEXT_FIELDS = frozenset(f.name for f in dataclasses.fields(ReadingContext))


class GazeStreamProcessor:
    """Owns one reading session's stream: buffer, detector and speed estimate.

    ``ingest`` does all per-sample work synchronously: it timestamps and
    annotates the sample, runs the preprocessing stages over the unprocessed
    suffix and feeds every new sample to the detector. Fired events are
    delivered to observers right away; the reading-speed update is handed to
    the scheduler and never awaited.

    Faults in the analysis stages are logged and skipped; the raw sample
    stays in the buffer. Only a buffer that cannot store anything, even after
    reinitialisation, raises :class:`IngestionError`.

    One instance per session; pass it to the collaborators that need it.
    """

    def __init__(
        self,
        config: Optional[StreamConfig] = None,
        stages: Optional[List[IStreamStage]] = None,
        scheduler: Optional[DeferredScheduler] = None,
    ) -> None:
        self.config = config or StreamConfig()
        self.stages: List[IStreamStage] = stages or [
            GapFillingStage(),
            NoiseReductionStage(),
            VelocityComputationStage(),
            MovementClassificationStage(),
        ]
        self.scheduler = scheduler or ThreadedTimerScheduler()
        self.detector = ReturnSweepDetector(self.config.detector)
        self.speed = ReadingSpeedEstimator(self.config.speed)
        self.channel = EventChannel()

        self._lock = threading.RLock()
        self._buffer = self._new_buffer()
        self._origin: Optional[float] = None
        self._last_t = 0
        self._context = ReadingContext()
        self._ingested = 0
        self._unit_generation = 0
        self._unit_events: List[LineAdvanceEvent] = []
        self._session_events: List[LineAdvanceEvent] = []

    def _new_buffer(self) -> SampleBuffer:
        buffer = SampleBuffer(self.config.buffer)
        for name in (PREPROCESS_CURSOR, CONSUME_CURSOR, SEARCH_FLOOR_CURSOR):
            buffer.register_cursor(name)
        return buffer

    # ------------------------------------------------------------------
    # inputs
    # ------------------------------------------------------------------

    def ingest(self, raw: RawGaze) -> None:
        """Record one tracker sample and run the per-sample analysis."""
        with self._lock:
            try:
                sample = self._annotate(raw)
            except Exception:
                logger.exception("Could not timestamp sample %r; recording emergency entry", raw)
                sample = self._emergency_sample(raw)

            try:
                self._buffer.append(sample)
            except Exception as exc:
                self._reinitialise_buffer(sample, exc)
                return

            self._last_t = sample.t
            self._ingested += 1
            self._log_diagnostics()

            try:
                self._process_pending()
            except Exception:
                logger.exception("Analysis failed at t=%s; raw sample kept", sample.t)
                end = len(self._buffer)
                self._buffer.set_cursor(PREPROCESS_CURSOR, end)
                self._buffer.set_cursor(CONSUME_CURSOR, end)

    def ingest_gaze(self, timestamp: float, x: float, y: float, movement_state: Optional[int] = None) -> None:
        self.ingest(RawGaze(timestamp=timestamp, x=x, y=y, movement_state=movement_state))

    def set_context(self, **fields) -> None:
        """Update the reading position stamped onto subsequent samples.

        Only the named fields change; passing ``None`` clears a field.
        """
        unknown = set(fields) - CONTEXT_FIELDS
        if unknown:
            raise ValueError(ValidationMessages.UNKNOWN_CONTEXT_FIELD.format(", ".join(sorted(unknown))))
        with self._lock:
            self._context = dataclasses.replace(self._context, **fields)

    def mark_content_start(self, t: Optional[int] = None) -> None:
        """Allow events from ``t`` on (default: the latest sample time)."""
        with self._lock:
            self.detector.mark_content_start(self._last_t if t is None else t)

    def set_line_geometry(self, geometry: LineGeometry) -> None:
        """Word counts per line, as ``{line: words}`` or ``LineLayout`` records."""
        with self._lock:
            self.speed.set_line_geometry(geometry)

    def register_observer(self, observer: ObserverLike) -> LineAdvanceObserver:
        return self.channel.register(observer)

    def unregister_observer(self, observer: ObserverLike) -> None:
        self.channel.unregister(observer)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def reset_triggers(self) -> None:
        """Start a new content unit; cumulative reading speed is kept."""
        with self._lock:
            self.detector.reset_triggers()
            self.speed.begin_unit()
            self._unit_events = []
            self._unit_generation += 1
            self._buffer.set_cursor(SEARCH_FLOOR_CURSOR, len(self._buffer))
            logger.info("Triggers reset for content unit %s", self._unit_generation)

    def reset(self) -> None:
        """Forget the whole session, including the clock origin."""
        with self._lock:
            self.scheduler.cancel_all()
            self._buffer.clear()
            self._origin = None
            self._last_t = 0
            self._context = ReadingContext()
            self._ingested = 0
            self._unit_generation += 1
            self._unit_events = []
            self._session_events = []
            self.detector.reset()
            self.speed.reset()
            logger.info("Gaze stream reset")

    def clear_buffer(self) -> None:
        """Free consumed samples; the clock and all derived state continue."""
        with self._lock:
            self._buffer.clear()
            logger.debug("Sample buffer cleared at t=%s", self._last_t)

    def close(self) -> None:
        self.scheduler.shutdown()

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def samples(self) -> List[Sample]:
        with self._lock:
            return self._buffer.snapshot()

    def get_fixations(self) -> List[Sample]:
        with self._lock:
            return [s for s in self._buffer if s.classification is SampleClassification.FIXATION]

    def to_frame(self) -> pd.DataFrame:
        return samples_to_frame(self.samples)

    def count_lines(self) -> int:
        return count_lines(self.samples)

    @property
    def events(self) -> List[LineAdvanceEvent]:
        """Events of the current content unit."""
        with self._lock:
            return list(self._unit_events)

    @property
    def session_events(self) -> List[LineAdvanceEvent]:
        with self._lock:
            return list(self._session_events)

    @property
    def wpm(self) -> int:
        return self.speed.wpm

    @property
    def speed_log(self) -> List[SpeedLogEntry]:
        with self._lock:
            return list(self.speed.state.log)

    @property
    def speed_state(self) -> SpeedState:
        return self.speed.state

    @property
    def detector_state(self) -> DetectorState:
        return self.detector.state

    @property
    def context(self) -> ReadingContext:
        return self._context

    @property
    def time_origin(self) -> Optional[float]:
        return self._origin

    @property
    def cursors(self):
        return self._buffer.cursors

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _annotate(self, raw: RawGaze) -> Sample:
        timestamp = float(raw.timestamp)
        if not math.isfinite(timestamp):
            raise ValueError(f"Non-finite timestamp: {raw.timestamp!r}")
        if self._origin is None or timestamp < self._origin:
            if self._origin is not None:
                logger.info("Timestamp %.0f precedes session origin %.0f; restarting clock", timestamp, self._origin)
                self.detector.restart_clock()
                self.speed.restart_clock()
            self._origin = timestamp
        t = int(math.floor(timestamp - self._origin))
        return Sample.from_raw(raw, t, self._context)

    def _emergency_sample(self, raw) -> Sample:
        return Sample(
            t=self._last_t,
            x=float("nan"),
            y=float("nan"),
            raw=raw if isinstance(raw, RawGaze) else None,
            line=self._context.line,
            paragraph=self._context.paragraph,
            word=self._context.word,
        )

    def _reinitialise_buffer(self, sample: Sample, cause: Exception) -> None:
        logger.error("Sample buffer unusable (%s); reinitialising", cause)
        try:
            self._buffer = self._new_buffer()
            emergency = self._emergency_sample(sample.raw)
            emergency.t = sample.t
            self._buffer.append(emergency)
            for name in (PREPROCESS_CURSOR, CONSUME_CURSOR, SEARCH_FLOOR_CURSOR):
                self._buffer.set_cursor(name, len(self._buffer))
            self._last_t = emergency.t
            self._ingested += 1
        except Exception as exc:
            raise IngestionError("Sample buffer failed after reinitialisation") from exc

    def _log_diagnostics(self) -> None:
        interval = self.config.buffer.diagnostic_interval
        if interval and self._ingested % interval == 0:
            logger.info(
                "Ingested %s samples (buffer=%s, trimmed=%s, events=%s, wpm=%s)",
                self._ingested,
                len(self._buffer),
                self._buffer.trimmed_total,
                len(self._session_events),
                self.speed.wpm,
            )

    def _process_pending(self) -> None:
        buffer = self._buffer
        samples = buffer.samples
        start = max(0, buffer.cursor(PREPROCESS_CURSOR) - self.config.buffer.reprocess_overlap)
        if start < len(samples):
            for stage in self.stages:
                stage.process(samples, start, self.config)
        buffer.set_cursor(PREPROCESS_CURSOR, len(samples))

        while True:
            buffer = self._buffer
            idx = buffer.cursor(CONSUME_CURSOR)
            if idx >= len(buffer):
                break
            buffer.set_cursor(CONSUME_CURSOR, idx + 1)
            event = self.detector.process(buffer.samples, idx)
            if event is not None:
                self._dispatch(event)

    def _dispatch(self, event: LineAdvanceEvent) -> None:
        self._unit_events.append(event)
        self._session_events.append(event)
        generation = self._unit_generation
        self.scheduler.schedule(
            self.config.speed.update_delay_ms,
            lambda: self._apply_speed_update(event, generation),
        )
        self.channel.publish_line_advance(event)

    def _apply_speed_update(self, event: LineAdvanceEvent, generation: int) -> None:
        with self._lock:
            if generation != self._unit_generation:
                logger.debug("Dropping speed update for line %s from a previous content unit", event.line)
                return
            entry = self.speed.update(event, self._buffer.samples, self._buffer.cursor(SEARCH_FLOOR_CURSOR))
        if entry is not None:
            self.channel.publish_speed_update(entry)
