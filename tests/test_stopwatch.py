"""Tests for StopWatch."""

from unittest.mock import patch

from abench.stopwatch import StopWatch


class TestStopWatch:
    """Test suite for StopWatch"""

    def test_elapsed_is_zero_before_use(self):
        watch = StopWatch()

        assert watch.elapsed == 0.0
        assert watch.running is False

    def test_start_then_stop(self):
        watch = StopWatch()
        watch.start()
        assert watch.running is True

        elapsed = watch.stop()

        assert elapsed == watch.elapsed
        assert 0.0 <= watch.elapsed < 5.0
        assert watch.running is False

    def test_restart_overwrites_start(self):
        watch = StopWatch()
        with patch("abench.stopwatch.time.perf_counter", side_effect=[10.0, 20.0, 21.5]):
            watch.start()
            watch.start()
            watch.stop()

        assert watch.start_time == 20.0
        assert watch.elapsed == 1.5

    def test_stop_without_start_measures_from_zero(self):
        """The raw counter reading is reported when start() was never called"""
        watch = StopWatch()
        with patch("abench.stopwatch.time.perf_counter", return_value=1234.5):
            watch.stop()

        assert watch.start_time == 0.0
        assert watch.elapsed == 1234.5
