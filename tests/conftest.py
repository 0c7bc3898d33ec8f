from typing import List, Optional

import pytest

from gaze_stream.domain.dataset import Sample
from gaze_stream.engine import GazeStreamProcessor
from gaze_stream.scheduling import ManualScheduler


def kinematic_sample(t: int, gx: float, vx: float, line: Optional[int]) -> Sample:
    """Sample with smoothed position and velocity already filled in."""
    return Sample(t=t, x=gx, y=0.0, gx=gx, gy=0.0, vx=vx, vy=0.0, line=line)


@pytest.fixture
def make_sweep():
    """Five samples forming one return sweep.

    The position peaks on the third sample and the velocity valley
    (-2.0) sits on the fourth, so a detector fires on the fifth sample,
    i.e. at ``t0 + 4 * step_ms``.
    """

    def _make(t0: int, line_before: Optional[int], line_after: Optional[int], step_ms: int = 33) -> List[Sample]:
        return [
            kinematic_sample(t0, 100.0, 0.0, line_before),
            kinematic_sample(t0 + step_ms, 120.0, 0.6, line_before),
            kinematic_sample(t0 + 2 * step_ms, 130.0, 0.3, line_before),
            kinematic_sample(t0 + 3 * step_ms, 60.0, -2.0, line_after),
            kinematic_sample(t0 + 4 * step_ms, 50.0, -0.3, line_after),
        ]

    return _make


@pytest.fixture
def make_reading():
    """Slow rightward reading samples without any valley."""

    def _make(t0: int, n: int, line: Optional[int], step_ms: int = 33) -> List[Sample]:
        return [kinematic_sample(t0 + i * step_ms, 100.0 + i, 0.1, line) for i in range(n)]

    return _make


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def processor(scheduler):
    proc = GazeStreamProcessor(scheduler=scheduler)
    yield proc
    proc.close()
