"""
Unit tests for tick drivers.
"""

import pytest

from kinesim.scheduling import ManualTickDriver, TickDriver


class TestManualTickDriver:
    """Tests for the explicitly pumped driver."""

    def test_pump_without_pending(self):
        driver = ManualTickDriver()
        assert driver.pump() is False
        assert not driver.pending

    def test_pump_runs_callback_once(self):
        driver = ManualTickDriver()
        calls = []
        driver.request_next_tick(lambda: calls.append(1))

        assert driver.pending
        assert driver.pump() is True
        assert calls == [1]
        assert not driver.pending
        assert driver.pump() is False
        assert driver.ticks_run == 1

    def test_later_request_replaces_pending(self):
        """At most one callback is ever pending."""
        driver = ManualTickDriver()
        calls = []
        driver.request_next_tick(lambda: calls.append('a'))
        driver.request_next_tick(lambda: calls.append('b'))

        driver.run_until_idle()

        assert calls == ['b']

    def test_callback_can_reschedule(self):
        driver = ManualTickDriver()
        remaining = [3]

        def callback():
            remaining[0] -= 1
            if remaining[0] > 0:
                driver.request_next_tick(callback)

        driver.request_next_tick(callback)

        assert driver.run_until_idle() == 3
        assert remaining[0] == 0

    def test_run_until_idle_cap(self):
        driver = ManualTickDriver()

        def forever():
            driver.request_next_tick(forever)

        driver.request_next_tick(forever)

        assert driver.run_until_idle(max_ticks=5) == 5
        assert driver.pending

    def test_cancel(self):
        driver = ManualTickDriver()
        calls = []
        driver.request_next_tick(lambda: calls.append(1))

        driver.cancel()

        assert driver.pump() is False
        assert calls == []


class TestPlaybackSpeed:
    """Tests for the playback speed setting."""

    def test_default_speed(self):
        assert ManualTickDriver().speed == 1.0

    def test_frame_interval_scales_with_speed(self):
        driver = ManualTickDriver(speed=2.0)
        assert driver.frame_interval_ms(100.0) == pytest.approx(50.0)

        driver.speed = 0.5
        assert driver.frame_interval_ms(100.0) == pytest.approx(200.0)

    def test_invalid_speed_ignored(self):
        driver = ManualTickDriver(speed=3.0)

        driver.speed = 0
        driver.speed = -1.0
        driver.speed = "fast"

        assert driver.speed == 3.0

    def test_invalid_initial_speed_falls_back(self):
        assert ManualTickDriver(speed=-2.0).speed == 1.0

    def test_numeric_string_speed(self):
        driver = ManualTickDriver()
        driver.speed = "1.5"
        assert driver.speed == 1.5


def test_tick_driver_is_abstract():
    with pytest.raises(TypeError):
        TickDriver()
