"""
Tests for the bounded sample buffer and its cursors.
"""
import pytest

from gaze_stream.buffer import SampleBuffer
from gaze_stream.config import BufferConfig, StreamConfig
from gaze_stream.domain.dataset import Sample
from gaze_stream.engine import GazeStreamProcessor
from gaze_stream.scheduling import ManualScheduler


def fill(buffer, n, t0=0):
    trimmed = 0
    for i in range(n):
        trimmed += buffer.append(Sample(t=t0 + i, x=float(i), y=1.0))
    return trimmed


class TestTrim:

    def test_overflow_drops_oldest_tenth(self):
        buffer = SampleBuffer(BufferConfig(max_capacity=10))
        assert fill(buffer, 10) == 0
        assert buffer.append(Sample(t=10, x=10.0, y=1.0)) == 2
        assert len(buffer) == 9
        assert buffer[0].t == 2
        assert buffer[-1].t == 10
        assert buffer.trimmed_total == 2

    def test_cursors_shift_with_trim(self):
        buffer = SampleBuffer(BufferConfig(max_capacity=10))
        buffer.register_cursor("a")
        buffer.register_cursor("b")
        fill(buffer, 10)
        buffer.set_cursor("a", 7)
        buffer.set_cursor("b", 1)
        fill(buffer, 1, t0=10)

        assert buffer.cursor("a") == 5
        assert buffer.cursor("b") == 0

    def test_cursor_clamped_to_length(self):
        buffer = SampleBuffer(BufferConfig(max_capacity=10))
        buffer.register_cursor("a")
        fill(buffer, 3)
        buffer.set_cursor("a", 50)
        assert buffer.cursor("a") == 3
        buffer.set_cursor("a", -4)
        assert buffer.cursor("a") == 0

    def test_unknown_cursor(self):
        buffer = SampleBuffer()
        with pytest.raises(KeyError):
            buffer.set_cursor("missing", 0)

    def test_clear_rewinds_cursors(self):
        buffer = SampleBuffer(BufferConfig(max_capacity=10))
        buffer.register_cursor("a")
        fill(buffer, 5)
        buffer.set_cursor("a", 5)
        buffer.clear()
        assert len(buffer) == 0
        assert buffer.cursors == {"a": 0}

    def test_snapshot_is_a_copy(self):
        buffer = SampleBuffer()
        fill(buffer, 3)
        snap = buffer.snapshot()
        fill(buffer, 1, t0=3)
        assert len(snap) == 3
        assert len(buffer.samples) == 4


def test_processor_stays_within_capacity():
    config = StreamConfig(buffer=BufferConfig(max_capacity=100))
    processor = GazeStreamProcessor(config, scheduler=ManualScheduler())
    processor.set_context(line=1)
    for i in range(5000):
        processor.ingest_gaze(i * 33, 100.0 + (i % 40) * 5, 300.0)
        assert len(processor) <= 100
        for position in processor.cursors.values():
            assert 0 <= position <= len(processor)
    assert processor.cursors["preprocess"] == len(processor)
    assert processor.cursors["consume"] == len(processor)
    processor.close()
