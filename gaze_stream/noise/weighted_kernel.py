"""Centered weighted moving average."""
from __future__ import annotations

from typing import List, Sequence

from .base import ISmoothingStrategy
from ..config import SmoothingConstants
from ..domain.dataset import Sample


class WeightedKernelSmoothing(ISmoothingStrategy):
    """Convolve the working positions with a fixed, centered kernel.

    Near either end of the buffer only the in-range taps are used and the
    result is divided by their weight sum, so a constant series stays
    constant everywhere.
    """

    def __init__(self, kernel: Sequence[float] = SmoothingConstants.KERNEL) -> None:
        self.kernel = tuple(float(w) for w in kernel)
        self.radius = len(self.kernel) // 2

    def apply(self, samples: List[Sample], start: int = 0) -> None:
        n = len(samples)
        for idx in range(start, n):
            sum_x = sum_y = weight = 0.0
            for k, w in enumerate(self.kernel):
                j = idx + k - self.radius
                if 0 <= j < n:
                    sum_x += samples[j].x * w
                    sum_y += samples[j].y * w
                    weight += w
            sample = samples[idx]
            if weight <= 0:
                sample.gx, sample.gy = sample.x, sample.y
                continue
            sample.gx = sum_x / weight
            sample.gy = sum_y / weight
