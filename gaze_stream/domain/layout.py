"""Line geometry supplied by the text layout collaborator."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class LineLayout:
    """A laid-out text line and the words it holds."""

    index: int
    start_index: int
    end_index: int
    word_indices: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def word_count(self) -> int:
        if self.word_indices:
            return len(self.word_indices)
        return max(0, self.end_index - self.start_index + 1)

    @classmethod
    def from_word_indices(cls, index: int, word_indices) -> "LineLayout":
        indices = tuple(int(i) for i in word_indices)
        if not indices:
            raise ValueError(f"Line {index} has no words")
        return cls(index=index, start_index=indices[0], end_index=indices[-1], word_indices=indices)
