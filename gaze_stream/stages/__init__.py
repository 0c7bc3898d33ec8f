"""Pipeline stages composing the incremental preprocessing chain."""

from .base import IStreamStage
from .gap_filling import GapFillingStage
from .noise_reduction import NoiseReductionStage
from .velocity_computation import VelocityComputationStage
from .classification import MovementClassificationStage

__all__ = [
    "IStreamStage",
    "GapFillingStage",
    "NoiseReductionStage",
    "VelocityComputationStage",
    "MovementClassificationStage",
]
