"""Noise reduction stage.

Writes: ``gx``, ``gy``, ``stage``.
"""
from __future__ import annotations

from typing import List, Optional

from .base import IStreamStage
from ..config import StreamConfig
from ..domain.dataset import ProcessingStage, Sample
from ..noise import ISmoothingStrategy, WeightedKernelSmoothing


class NoiseReductionStage(IStreamStage):
    """Apply the smoothing strategy to the working positions."""

    def __init__(self, strategy: Optional[ISmoothingStrategy] = None) -> None:
        self.strategy = strategy

    def process(self, samples: List[Sample], start: int, config: StreamConfig) -> None:
        strategy = self.strategy or WeightedKernelSmoothing(config.smoothing.kernel)
        strategy.apply(samples, start)
        for sample in samples[start:]:
            sample.stage = ProcessingStage.SMOOTHED
