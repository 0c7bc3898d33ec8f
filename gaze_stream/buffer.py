# gaze_stream/buffer.py
"""Capacity-bounded, append-only sample store with named cursors."""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterator, List

from .config import BufferConfig
from .domain.dataset import Sample


logger = logging.getLogger(__name__)


class SampleBuffer:
    """Ordered store of ingested samples.

    Consumers keep their progress in named cursors (plain indices into the
    buffer). When an append pushes the buffer over capacity, the oldest
    ``trim_fraction`` of the samples is dropped in one batch and every cursor
    is shifted by the same count, so after any trim
    ``0 <= cursor <= len(buffer)`` holds for all of them.
    """

    def __init__(self, config: BufferConfig | None = None) -> None:
        self.config = config or BufferConfig()
        self._samples: List[Sample] = []
        self._cursors: Dict[str, int] = {}
        self.trimmed_total = 0

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, index):
        return self._samples[index]

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    @property
    def samples(self) -> List[Sample]:
        """Live sample list; stages mutate records through it."""
        return self._samples

    def snapshot(self) -> List[Sample]:
        return list(self._samples)

    # cursors

    def register_cursor(self, name: str, position: int = 0) -> None:
        self._cursors[name] = self._clamp(position)

    def cursor(self, name: str) -> int:
        return self._cursors[name]

    def set_cursor(self, name: str, position: int) -> None:
        if name not in self._cursors:
            raise KeyError(f"Unknown cursor: {name}")
        self._cursors[name] = self._clamp(position)

    @property
    def cursors(self) -> Dict[str, int]:
        return dict(self._cursors)

    def _clamp(self, position: int) -> int:
        return max(0, min(int(position), len(self._samples)))

    # storage

    def append(self, sample: Sample) -> int:
        """Append one sample and return how many old samples were trimmed."""
        self._samples.append(sample)
        if len(self._samples) > self.config.max_capacity:
            return self.trim()
        return 0

    def trim(self) -> int:
        n_drop = max(1, math.ceil(len(self._samples) * self.config.trim_fraction))
        del self._samples[:n_drop]
        for name, position in self._cursors.items():
            self._cursors[name] = self._clamp(position - n_drop)
        self.trimmed_total += n_drop
        logger.debug("Trimmed %s samples (buffer=%s, cursors=%s)", n_drop, len(self._samples), self._cursors)
        return n_drop

    def clear(self) -> None:
        """Drop every sample and rewind all cursors."""
        self._samples.clear()
        for name in self._cursors:
            self._cursors[name] = 0
