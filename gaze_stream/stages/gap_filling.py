"""Gap fill-in stage.

Writes: ``x``, ``y``, ``interpolated``, ``stage``.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from .base import IStreamStage
from ..config import StreamConfig
from ..domain.dataset import ProcessingStage, Sample


def _nearest_valid(samples: List[Sample], idx: int, step: int) -> Optional[int]:
    j = idx + step
    while 0 <= j < len(samples):
        if not samples[j].raw_missing:
            return j
        j += step
    return None


def _interpolate(start: Sample, end: Sample, target: Sample) -> Tuple[float, float]:
    total = end.t - start.t
    if total <= 0:
        return start.x, start.y
    fraction = min(1.0, max(0.0, (target.t - start.t) / total))
    x = start.x + (end.x - start.x) * fraction
    y = start.y + (end.y - start.y) * fraction
    return x, y


class GapFillingStage(IStreamStage):
    """Replace dropout positions with values from the nearest valid neighbours.

    Validity is judged on the raw tracker values, so a sample filled in an
    earlier batch is never used as an interpolation anchor. With valid
    samples on both sides the position is interpolated by time; with only one
    side it is held at that side's value. A sample with no valid neighbour
    keeps its raw position.
    """

    def process(self, samples: List[Sample], start: int, config: StreamConfig) -> None:
        for idx in range(start, len(samples)):
            sample = samples[idx]
            sample.stage = ProcessingStage.INTERPOLATED
            if not sample.raw_missing:
                continue
            prev_idx = _nearest_valid(samples, idx, -1)
            next_idx = _nearest_valid(samples, idx, 1)
            if prev_idx is not None and next_idx is not None:
                sample.x, sample.y = _interpolate(samples[prev_idx], samples[next_idx], sample)
            elif prev_idx is not None:
                sample.x, sample.y = samples[prev_idx].x, samples[prev_idx].y
            elif next_idx is not None:
                sample.x, sample.y = samples[next_idx].x, samples[next_idx].y
            else:
                continue
            sample.interpolated = True
