# gaze_stream/io/export.py
from __future__ import annotations

from typing import List, Sequence

import numpy as np
import pandas as pd

from ..domain.dataset import Sample
from ..domain.events import LineAdvanceEvent, SpeedLogEntry


SAMPLE_COLUMNS: List[str] = [
    "time_ms",
    "raw_x",
    "raw_y",
    "x",
    "y",
    "smooth_x",
    "smooth_y",
    "vel_x",
    "vel_y",
    "type",
    "line_index",
    "paragraph_index",
    "word_index",
    "interpolated",
    "fired_event",
]

EVENT_COLUMNS: List[str] = ["time_ms", "line", "trigger_kind", "velocity"]
SPEED_COLUMNS: List[str] = ["time_ms", "line", "words", "duration_ms", "wpm"]

_NULLABLE_INT_COLUMNS = ("line_index", "paragraph_index", "word_index")


def _num(value) -> float:
    return np.nan if value is None else value


def samples_to_frame(samples: Sequence[Sample]) -> pd.DataFrame:
    """
    Sample history as a DataFrame, one row per sample.

    Missing derived values become NaN, missing context becomes <NA>.
    """
    rows = []
    for s in samples:
        rows.append(
            {
                "time_ms": s.t,
                "raw_x": _num(s.raw.x) if s.raw is not None else np.nan,
                "raw_y": _num(s.raw.y) if s.raw is not None else np.nan,
                "x": s.x,
                "y": s.y,
                "smooth_x": _num(s.gx),
                "smooth_y": _num(s.gy),
                "vel_x": _num(s.vx),
                "vel_y": _num(s.vy),
                "type": s.classification.value,
                "line_index": s.line,
                "paragraph_index": s.paragraph,
                "word_index": s.word,
                "interpolated": s.interpolated,
                "fired_event": s.fired_event,
            }
        )
    df = pd.DataFrame(rows, columns=SAMPLE_COLUMNS)
    for col in _NULLABLE_INT_COLUMNS:
        df[col] = df[col].astype("Int64")
    return df


def events_to_frame(events: Sequence[LineAdvanceEvent]) -> pd.DataFrame:
    return pd.DataFrame(
        [(e.time, e.line, e.trigger_kind.value, e.velocity) for e in events],
        columns=EVENT_COLUMNS,
    )


def speed_log_to_frame(entries: Sequence[SpeedLogEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [(e.time, e.line, e.words, e.duration_ms, e.wpm) for e in entries],
        columns=SPEED_COLUMNS,
    )


def read_tsv(path: str) -> pd.DataFrame:
    """
    Read a recorded gaze stream (tab separated, header row).
    """
    return pd.read_csv(path, sep="\t", low_memory=False)


def write_tsv(df: pd.DataFrame, path: str) -> None:
    df.to_csv(path, sep="\t", index=False)
