"""
Tests for the response timing recorder.
"""
import pytest

from app.core.screening import InvalidStateError, TimingRecorder


class TestTimingRecorder:
    """Tests for TimingRecorder start/stop behaviour."""

    def test_measures_elapsed_seconds(self, fake_clock):
        """Test that stop returns the seconds since start."""
        recorder = TimingRecorder(fake_clock)
        recorder.start()
        fake_clock.advance(4.25)

        assert recorder.stop() == pytest.approx(4.25)

    def test_stop_without_start_raises(self, fake_clock):
        """Test that stopping an idle recorder raises InvalidStateError."""
        recorder = TimingRecorder(fake_clock)

        with pytest.raises(InvalidStateError):
            recorder.stop()

    def test_second_stop_raises(self, fake_clock):
        """Test that the recorder is idle again after stop."""
        recorder = TimingRecorder(fake_clock)
        recorder.start()
        recorder.stop()

        with pytest.raises(InvalidStateError):
            recorder.stop()

    def test_restart_resets_start_point(self, fake_clock):
        """Test that calling start again measures from the latest start."""
        recorder = TimingRecorder(fake_clock)
        recorder.start()
        fake_clock.advance(10)
        recorder.start()
        fake_clock.advance(2)

        assert recorder.stop() == pytest.approx(2.0)

    def test_is_running(self, fake_clock):
        """Test the is_running flag across start and stop."""
        recorder = TimingRecorder(fake_clock)
        assert recorder.is_running is False

        recorder.start()
        assert recorder.is_running is True

        recorder.stop()
        assert recorder.is_running is False

    def test_never_negative(self):
        """Test that a clock moving backwards yields zero, not a negative time."""
        readings = iter([100.0, 99.0])
        recorder = TimingRecorder(lambda: next(readings))
        recorder.start()

        assert recorder.stop() == 0.0

    def test_defaults_to_monotonic_clock(self):
        """Test that the default clock produces a non-negative duration."""
        recorder = TimingRecorder()
        recorder.start()

        assert recorder.stop() >= 0.0
