"""Smoothing strategy implementations."""

from .base import ISmoothingStrategy
from .weighted_kernel import WeightedKernelSmoothing

__all__ = [
    "ISmoothingStrategy",
    "WeightedKernelSmoothing",
]
