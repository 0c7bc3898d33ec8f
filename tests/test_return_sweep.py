"""
Tests for the streaming return-sweep detector.
"""
from gaze_stream.config import DetectorConfig
from gaze_stream.detection import ReturnSweepDetector
from gaze_stream.domain.events import TriggerKind

from conftest import kinematic_sample


def feed(detector, samples):
    """Stream samples one by one, return the fired events."""
    stream = []
    events = []
    for sample in samples:
        stream.append(sample)
        event = detector.process(stream, len(stream) - 1)
        if event is not None:
            events.append(event)
    return events


class TestCascade:
    """Peak/valley cascade and its global gates."""

    def test_sweep_fires_for_completed_line(self, make_sweep):
        detector = ReturnSweepDetector()
        samples = make_sweep(0, 1, 2)
        events = feed(detector, samples)

        assert len(events) == 1
        event = events[0]
        assert event.line == 1
        assert event.time == 132
        assert event.trigger_kind is TriggerKind.CASCADE
        assert event.velocity == -2.0
        assert samples[-1].fired_event is True
        assert detector.state.max_line_reached == 2
        assert detector.state.last_event_time == 132
        assert detector.state.last_position_peak_time == 0

    def test_peak_time_recorded(self, make_sweep):
        detector = ReturnSweepDetector()
        feed(detector, make_sweep(0, 1, 1)[:4])
        # strict maximum at the third sample
        assert detector.state.last_position_peak_time == 66

    def test_plateau_peak_recorded(self):
        detector = ReturnSweepDetector()
        samples = [
            kinematic_sample(0, 100.0, 0.2, 1),
            kinematic_sample(33, 100.0, 0.0, 1),
            kinematic_sample(66, 100.0, -0.1, 1),
        ]
        feed(detector, samples)
        assert detector.state.last_position_peak_time == 33

    def test_shallow_valley_ignored(self):
        detector = ReturnSweepDetector()
        samples = [
            kinematic_sample(0, 100.0, 0.3, 2),
            kinematic_sample(33, 110.0, -0.3, 2),
            kinematic_sample(66, 105.0, -0.1, 2),
        ]
        assert feed(detector, samples) == []

    def test_no_event_before_content_start(self, make_sweep):
        detector = ReturnSweepDetector()
        detector.mark_content_start(1000)
        assert feed(detector, make_sweep(0, 1, 2)) == []

    def test_cooldown_rejects_second_sweep(self, make_sweep, make_reading):
        detector = ReturnSweepDetector()
        samples = make_sweep(0, 0, 1) + make_reading(165, 4, 1) + make_sweep(300, 1, 2)
        events = feed(detector, samples)
        assert [e.time for e in events] == [132]

    def test_sweeps_outside_cooldown_both_fire(self, make_sweep, make_reading):
        detector = ReturnSweepDetector()
        samples = make_sweep(0, 0, 1) + make_reading(165, 16, 1) + make_sweep(700, 1, 2)
        events = feed(detector, samples)
        assert [e.time for e in events] == [132, 832]
        assert [e.line for e in events] == [0, 1]
        assert events[1].time - events[0].time >= 500


def _peak_then_valley(valley_t: int):
    """Peak at t=33, slowly drifting plateau, valley at ``valley_t``."""
    samples = [
        kinematic_sample(0, 100.0, 0.5, 1),
        kinematic_sample(33, 130.0, 0.5, 1),
        kinematic_sample(66, 125.0, -0.1, 1),
    ]
    t = 99
    k = 0
    while t < valley_t:
        samples.append(kinematic_sample(t, 120.0 - 0.01 * k, -0.01, 1))
        t += 33
        k += 1
    samples.append(kinematic_sample(t, 100.0, -2.0, 2))
    samples.append(kinematic_sample(t + 33, 90.0, -0.3, 2))
    return samples


def test_valley_within_cascade_window_fires():
    events = feed(ReturnSweepDetector(), _peak_then_valley(400))
    assert len(events) == 1
    assert events[0].line == 1


def test_valley_too_long_after_peak_does_not_fire():
    detector = ReturnSweepDetector()
    events = feed(detector, _peak_then_valley(700))
    assert events == []
    assert detector.state.last_position_peak_time == 33


class TestLineGuards:
    """Line-0 and monotonic-line guards."""

    def test_line_zero_never_fires(self, make_sweep):
        assert feed(ReturnSweepDetector(), make_sweep(0, 0, 0)) == []

    def test_monotonic_guard(self, make_sweep, make_reading):
        detector = ReturnSweepDetector()
        samples = (
            make_sweep(0, 1, 2)
            + make_reading(165, 20, 2)
            + make_sweep(1000, 1, 2)
            + make_reading(1165, 20, 2)
            + make_sweep(2000, 2, 3)
        )
        events = feed(detector, samples)
        assert [e.line for e in events] == [1, 2]

    def test_reset_triggers_restores_line_floor(self, make_sweep, make_reading):
        detector = ReturnSweepDetector()
        assert len(feed(detector, make_sweep(0, 4, 5))) == 1
        assert detector.state.max_line_reached == 5

        stream = make_sweep(0, 4, 5) + make_reading(165, 20, 5) + make_sweep(1000, 1, 2)
        detector = ReturnSweepDetector()
        assert len(feed(detector, stream)) == 1

        detector.reset_triggers()
        assert detector.state.max_line_reached == -1
        assert detector.state.last_event_time is None
        events = feed(detector, make_sweep(2000, 1, 2))
        assert len(events) == 1
        assert events[0].line == 1

    def test_reset_triggers_keeps_content_start(self):
        detector = ReturnSweepDetector()
        detector.mark_content_start(250)
        detector.reset_triggers()
        assert detector.state.first_content_time == 250
        detector.reset()
        assert detector.state.first_content_time == 0

    def test_custom_initial_line_floor(self, make_sweep):
        detector = ReturnSweepDetector(DetectorConfig(initial_max_line=3))
        assert feed(detector, make_sweep(0, 2, 3)) == []


class TestPendingEvents:
    """Triggers that arrive before their line annotation."""

    def test_missing_context_creates_pending_event(self, make_sweep):
        detector = ReturnSweepDetector()
        assert feed(detector, make_sweep(0, None, None)) == []
        pending = detector.state.pending_event
        assert pending is not None
        assert pending.time == 132
        assert pending.velocity == -2.0

    def test_pending_resolved_on_line_change(self, make_sweep):
        detector = ReturnSweepDetector()
        samples = make_sweep(0, None, None) + [kinematic_sample(165, 55.0, 0.1, 1)]
        events = feed(detector, samples)

        assert len(events) == 1
        assert events[0].trigger_kind is TriggerKind.DEFERRED_CONTEXT
        assert events[0].line == 0
        assert events[0].velocity == -2.0
        assert events[0].time == 165
        assert detector.state.pending_event is None
        assert samples[-1].fired_event is True

    def test_pending_expires(self, make_sweep, make_reading):
        detector = ReturnSweepDetector()
        samples = make_sweep(0, None, None) + make_reading(165, 31, None) + [kinematic_sample(1188, 90.0, 0.1, 1)]
        assert feed(detector, samples) == []
        assert detector.state.pending_event is None

    def test_pending_dropped_on_non_advancing_line(self, make_sweep):
        detector = ReturnSweepDetector()
        detector.state.max_line_reached = 4
        samples = make_sweep(0, None, None) + [kinematic_sample(165, 55.0, 0.1, 3)]
        assert feed(detector, samples) == []
        assert detector.state.pending_event is None


class TestClockRestart:
    """Host clock jumping back behind the last event."""

    def test_restart_clock_drops_time_anchors(self, make_sweep):
        detector = ReturnSweepDetector()
        feed(detector, make_sweep(5000, 1, 2))
        detector.mark_content_start(4000)
        detector.restart_clock()

        state = detector.state
        assert state.last_event_time is None
        assert state.last_position_peak_time == 0
        assert state.pending_event is None
        assert state.first_content_time == 0
        assert state.max_line_reached == 2

        events = feed(detector, make_sweep(0, 2, 3))
        assert [(e.time, e.line) for e in events] == [(132, 2)]

    def test_earlier_time_is_outside_cooldown(self, make_sweep):
        detector = ReturnSweepDetector()
        feed(detector, make_sweep(5000, 1, 2))
        events = feed(detector, make_sweep(0, 2, 3))
        assert [(e.time, e.line) for e in events] == [(132, 2)]

    def test_pending_from_later_time_is_discarded(self, make_sweep):
        detector = ReturnSweepDetector()
        feed(detector, make_sweep(5000, None, None))
        assert detector.state.pending_event is not None

        samples = [kinematic_sample(0, 100.0, 0.1, 2), kinematic_sample(33, 101.0, 0.1, 3)]
        assert feed(detector, samples) == []
        assert detector.state.pending_event is None
