"""Movement classification stage.

Writes: ``classification``, ``stage``.
"""
from __future__ import annotations

import math
from typing import List

from .base import IStreamStage
from ..config import StreamConfig
from ..domain.dataset import ProcessingStage, Sample, SampleClassification


class MovementClassificationStage(IStreamStage):
    """Label samples from the tracker's movement state.

    Samples without a usable state fall back to a velocity threshold on the
    smoothed speed when one is configured.
    """

    def process(self, samples: List[Sample], start: int, config: StreamConfig) -> None:
        cfg = config.classification
        for sample in samples[start:]:
            state = sample.movement_state
            if state == cfg.fixation_state:
                label = SampleClassification.FIXATION
            elif state == cfg.saccade_state:
                label = SampleClassification.SACCADE
            else:
                label = SampleClassification.UNKNOWN

            if label is SampleClassification.UNKNOWN and cfg.fallback_velocity_threshold is not None:
                speed = math.hypot(sample.vx or 0.0, sample.vy or 0.0)
                if math.isfinite(speed):
                    if speed < cfg.fallback_velocity_threshold:
                        label = SampleClassification.FIXATION
                    else:
                        label = SampleClassification.SACCADE

            sample.classification = label
            sample.stage = ProcessingStage.CLASSIFIED
