"""Line-advance detection: streaming cascade detector and offline counter."""

from .return_sweep import DetectorState, ReturnSweepDetector
from .line_counter import LinePeak, count_lines, find_line_peaks, gaussian_smooth

__all__ = [
    "DetectorState",
    "ReturnSweepDetector",
    "LinePeak",
    "count_lines",
    "find_line_peaks",
    "gaussian_smooth",
]
