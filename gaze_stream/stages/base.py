"""Base class for each step of the incremental preprocessing chain."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..config import StreamConfig
from ..domain.dataset import Sample


class IStreamStage(ABC):
    """Abstract processing stage.

    A stage rewrites ``samples[start:]`` in place. ``start`` already includes
    the overlap with the previous batch, so a stage never needs to look at
    cursors itself; it may read samples before ``start`` as neighbours.
    """

    @abstractmethod
    def process(self, samples: List[Sample], start: int, config: StreamConfig) -> None:
        """Mutate the samples from ``start`` onwards according to the stage's behaviour."""
        raise NotImplementedError
