# gaze_stream/io/pipeline.py
"""Replay of recorded gaze sessions through the stream processor.

Feeds a recorded TSV row by row into a fresh :class:`GazeStreamProcessor`,
exactly as a live tracker callback would, and collects what the collaborators
would have seen: the processed samples, the fired events and the reading
speed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from ..config import StreamConfig
from ..domain.dataset import RawGaze
from ..domain.events import LineAdvanceEvent, SpeedLogEntry
from ..engine import GazeStreamProcessor
from ..scheduling import ManualScheduler
from .export import read_tsv
from .observers import ObserverLike


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("timestamp_ms", "x", "y")
CONTEXT_COLUMNS = ("line", "paragraph", "word")


@dataclass
class ReplayResult:
    """Everything a replayed session produced."""

    samples: pd.DataFrame
    events: List[LineAdvanceEvent]
    speed_log: List[SpeedLogEntry]
    wpm: int
    line_count: int


def _optional_int(value) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def _optional_float(value) -> float:
    if value is None or pd.isna(value):
        return float("nan")
    return float(value)


class ReplayPipeline:
    """Orchestrates the replay of one recorded session.

    Responsibilities:
        - Validate the input columns
        - Drive a processor with a deterministic scheduler
        - Forward context changes and start a new content unit on paragraph changes
        - Hand every registered observer to the processor

    Example:
        >>> pipeline = ReplayPipeline(line_words={1: 9, 2: 11})
        >>> pipeline.register_observer(ConsoleReporter())
        >>> result = pipeline.run_file("session.tsv")
        >>> result.wpm
    """

    def __init__(
        self,
        config: Optional[StreamConfig] = None,
        line_words: Optional[Mapping[int, int]] = None,
        reset_on_paragraph: bool = True,
    ):
        self.config = config or StreamConfig()
        self.line_words = dict(line_words or {})
        self.reset_on_paragraph = reset_on_paragraph
        self._observers: List[Any] = []

    def register_observer(self, observer: ObserverLike) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: ObserverLike) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def run_file(self, input_path: str) -> ReplayResult:
        return self.run(read_tsv(input_path))

    def run(self, frame: pd.DataFrame) -> ReplayResult:
        missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
        if missing:
            raise ValueError(f"Input must contain columns: {', '.join(missing)}")

        scheduler = ManualScheduler()
        processor = GazeStreamProcessor(self.config, scheduler=scheduler)
        for observer in self._observers:
            processor.register_observer(observer)
        if self.line_words:
            processor.set_line_geometry(self.line_words)

        context_columns = [c for c in CONTEXT_COLUMNS if c in frame.columns]
        has_state = "movement_state" in frame.columns
        paragraph = None

        try:
            for row in frame.to_dict(orient="records"):
                if context_columns:
                    context: Dict[str, Optional[int]] = {c: _optional_int(row[c]) for c in context_columns}
                    new_paragraph = context.get("paragraph")
                    if (
                        self.reset_on_paragraph
                        and paragraph is not None
                        and new_paragraph is not None
                        and new_paragraph != paragraph
                    ):
                        processor.reset_triggers()
                    if new_paragraph is not None:
                        paragraph = new_paragraph
                    processor.set_context(**context)

                processor.ingest(
                    RawGaze(
                        timestamp=float(row["timestamp_ms"]),
                        x=_optional_float(row["x"]),
                        y=_optional_float(row["y"]),
                        movement_state=_optional_int(row["movement_state"]) if has_state else None,
                    )
                )
                scheduler.run_pending()

            result = ReplayResult(
                samples=processor.to_frame(),
                events=processor.session_events,
                speed_log=processor.speed_log,
                wpm=processor.wpm,
                line_count=processor.count_lines(),
            )
        finally:
            processor.close()

        logger.info(
            "Replayed %s samples: %s line events, %s wpm",
            len(frame),
            len(result.events),
            result.wpm,
        )
        return result
