"""Offline line counting by extrema pairing.

Counts reading lines in a finished recording: the horizontal position is
smoothed with a wide Gaussian, strict local maxima and minima are located,
and a maximum counts as the end of a line when it rises far enough above the
preceding minimum, the rise takes long enough to be reading rather than a
saccade, and it is well separated from the previous accepted line end.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from ..config import LineCounterConstants
from ..domain.dataset import Sample


@dataclass(frozen=True)
class LinePeak:
    """Accepted end-of-line maximum."""

    index: int
    value: float
    t: int


def gaussian_smooth(values: np.ndarray, sigma: float = LineCounterConstants.SIGMA) -> np.ndarray:
    """Gaussian smoothing, renormalised where the kernel leaves the series."""
    radius = int(math.ceil(3 * sigma))
    offsets = np.arange(-radius, radius + 1, dtype=float)
    kernel = np.exp(-(offsets ** 2) / (2 * sigma * sigma))
    kernel /= kernel.sum()
    n = len(values)
    weighted = np.convolve(values, kernel, mode="full")[radius:radius + n]
    coverage = np.convolve(np.ones(n), kernel, mode="full")[radius:radius + n]
    return weighted / coverage


def find_extrema(values: np.ndarray, window: int) -> Tuple[List[int], List[int]]:
    """Indices that are strictly above (maxima) or below (minima) every
    neighbour within ``window`` samples on both sides."""
    maxima: List[int] = []
    minima: List[int] = []
    for i in range(window, len(values) - window):
        left = values[i - window:i]
        right = values[i + 1:i + window + 1]
        if np.all(values[i] > left) and np.all(values[i] > right):
            maxima.append(i)
        elif np.all(values[i] < left) and np.all(values[i] < right):
            minima.append(i)
    return maxima, minima


def find_line_peaks(
    samples: Sequence[Sample],
    amplitude_threshold: float = LineCounterConstants.AMPLITUDE_THRESHOLD,
    min_rise_ms: float = LineCounterConstants.MIN_RISE_DURATION_MS,
    min_spacing_ms: float = LineCounterConstants.MIN_PEAK_SPACING_MS,
) -> List[LinePeak]:
    if len(samples) < LineCounterConstants.MIN_SAMPLES:
        return []

    x = np.array([s.x for s in samples], dtype=float)
    times = np.array([s.t for s in samples], dtype=np.int64)
    smoothed = gaussian_smooth(x)
    maxima, minima = find_extrema(smoothed, LineCounterConstants.EXTREMA_WINDOW)

    peaks: List[LinePeak] = []
    for i in maxima:
        preceding = [j for j in minima if times[j] < times[i]]
        if not preceding:
            continue
        j = preceding[-1]
        amplitude = smoothed[i] - smoothed[j]
        rise = times[i] - times[j]
        if amplitude > amplitude_threshold and rise > min_rise_ms:
            if not peaks or times[i] - peaks[-1].t > min_spacing_ms:
                peaks.append(LinePeak(index=i, value=float(smoothed[i]), t=int(times[i])))
    return peaks


def count_lines(samples: Sequence[Sample]) -> int:
    return len(find_line_peaks(samples))
