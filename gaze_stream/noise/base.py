"""Smoothing strategies for the preprocessing chain."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..domain.dataset import Sample


class ISmoothingStrategy(ABC):
    """Strategy interface for gaze smoothing."""

    @abstractmethod
    def apply(self, samples: List[Sample], start: int = 0) -> None:
        """Write smoothed positions for ``samples[start:]``."""
        raise NotImplementedError
