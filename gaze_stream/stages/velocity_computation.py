"""Velocity computation stage.

Writes: ``vx``, ``vy``, ``stage``.
"""
from __future__ import annotations

from typing import List

from .base import IStreamStage
from ..config import StreamConfig
from ..domain.dataset import ProcessingStage, Sample


class VelocityComputationStage(IStreamStage):
    """First difference of the smoothed position per millisecond.

    Zero for the first buffered sample and whenever the timestamp does not
    advance.
    """

    def process(self, samples: List[Sample], start: int, config: StreamConfig) -> None:
        for idx in range(start, len(samples)):
            sample = samples[idx]
            sample.vx, sample.vy = 0.0, 0.0
            if idx > 0:
                prev = samples[idx - 1]
                dt = sample.t - prev.t
                if dt > 0 and prev.gx is not None and sample.gx is not None:
                    sample.vx = (sample.gx - prev.gx) / dt
                    sample.vy = (sample.gy - prev.gy) / dt
            sample.stage = ProcessingStage.DIFFERENTIATED
