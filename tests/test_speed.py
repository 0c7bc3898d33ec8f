"""
Tests for the reading-speed estimator.
"""
import pytest

from gaze_stream.config import SpeedConfig
from gaze_stream.domain.dataset import Sample
from gaze_stream.domain.events import LineAdvanceEvent, TriggerKind
from gaze_stream.domain.layout import LineLayout
from gaze_stream.speed import ReadingSpeedEstimator, words_per_minute


def event(time, line):
    return LineAdvanceEvent(time=time, line=line, trigger_kind=TriggerKind.CASCADE, velocity=-1.0)


def reading_samples():
    """Line 1 for the first second, line 2 afterwards (100 ms steps)."""
    return [Sample(t=t, x=1.0, y=1.0, line=1 if t < 1000 else 2) for t in range(0, 3500, 100)]


@pytest.fixture
def estimator():
    est = ReadingSpeedEstimator()
    est.set_line_geometry({1: 10, 2: 10, 3: 12})
    return est


def test_words_per_minute_rounds_half_up():
    assert words_per_minute(5, 120000.0) == 3
    assert words_per_minute(10, 3500.0) == 171
    assert words_per_minute(10, 0.0) == 0


def test_first_event_is_warm_up(estimator):
    assert estimator.update(event(1000, 1), []) is None
    assert estimator.wpm == 0
    assert estimator.state.last_event_line == 1
    assert estimator.state.warming_up is False


def test_consecutive_lines_use_previous_event(estimator):
    estimator.update(event(1000, 0), [])
    entry = estimator.update(event(4000, 1), [])
    assert entry is not None
    assert entry.duration_ms == 3000.0
    assert entry.words == 10
    assert entry.wpm == 200

    entry = estimator.update(event(7000, 2), [])
    assert entry.wpm == 200
    assert estimator.state.word_sum == 20
    assert estimator.state.time_sum == 6000.0
    assert len(estimator.state.log) == 2


def test_non_consecutive_line_scans_samples(estimator):
    estimator.update(event(0, 5), [])
    entry = estimator.update(event(3500, 2), reading_samples())
    assert entry.duration_ms == 2500.0
    assert entry.wpm == 240


def test_scan_limited_to_recent_samples():
    est = ReadingSpeedEstimator(SpeedConfig(max_scan_samples=5))
    est.set_line_geometry({2: 10})
    est.update(event(0, 5), [])
    entry = est.update(event(3500, 2), reading_samples())
    assert entry.duration_ms == 500.0
    assert entry.wpm == 1200


def test_scan_stops_at_search_floor(estimator):
    estimator.update(event(0, 5), [])
    entry = estimator.update(event(3500, 2), reading_samples(), search_floor=20)
    assert entry.duration_ms == 1500.0
    assert entry.wpm == 400


def test_scan_without_matching_line(estimator):
    estimator.update(event(0, 5), [])
    assert estimator.update(event(3500, 3), reading_samples()) is None
    assert estimator.wpm == 0


def test_short_duration_ignored(estimator):
    estimator.update(event(1000, 0), [])
    assert estimator.update(event(1050, 1), []) is None
    assert estimator.state.word_sum == 0


def test_line_zero_and_unknown_geometry_ignored(estimator):
    estimator.update(event(0, 0), [])
    assert estimator.update(event(3000, 0), []) is None
    assert estimator.update(event(6000, 7), []) is None
    assert estimator.wpm == 0


def test_begin_unit_keeps_cumulative_estimate(estimator):
    estimator.update(event(1000, 0), [])
    estimator.update(event(4000, 1), [])
    estimator.begin_unit()

    assert estimator.update(event(9000, 2), []) is None
    assert estimator.wpm == 200
    entry = estimator.update(event(12000, 3), [])
    assert entry.duration_ms == 3000.0
    # (10 + 12) words in 6 s
    assert entry.wpm == 220


def test_reset_clears_state_and_geometry(estimator):
    estimator.update(event(1000, 0), [])
    estimator.update(event(4000, 1), [])
    estimator.reset()
    assert estimator.wpm == 0
    assert estimator.state.log == []
    assert estimator.words_for(1) is None


def test_geometry_from_layouts():
    est = ReadingSpeedEstimator()
    est.set_line_geometry([LineLayout.from_word_indices(1, [0, 1, 2, 3]), LineLayout.from_word_indices(2, [4, 5])])
    assert est.words_for(1) == 4
    assert est.words_for(2) == 2
    assert est.words_for(3) is None
