"""Tests for the tick schedulers."""

import threading
import time

from agentx.training import ManualScheduler, TimerScheduler


class TestManualScheduler:
    """Test the virtual-clock scheduler."""

    def test_fire_requires_start(self):
        """Test that nothing runs before start."""
        scheduler = ManualScheduler()
        assert scheduler.fire() is False
        assert scheduler.advance(1000) == 0
        assert not scheduler.running

    def test_advance_fires_each_interval(self):
        """Test that advancing fires once per elapsed interval."""
        calls = []
        scheduler = ManualScheduler()
        scheduler.start(200, lambda: calls.append(1))

        assert scheduler.advance(150) == 0
        assert scheduler.advance(50) == 1
        assert scheduler.advance(650) == 3
        assert len(calls) == 4
        assert scheduler.fired == 4

    def test_cancel_from_callback_stops_advance(self):
        """Test that a callback cancelling the schedule stops the loop."""
        scheduler = ManualScheduler()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 2:
                scheduler.cancel()

        scheduler.start(10, callback)
        assert scheduler.advance(1000) == 2
        assert not scheduler.running


class TestTimerScheduler:
    """Test the wall-clock scheduler."""

    def test_fires_until_cancelled(self):
        """Test that the timer fires repeatedly and stops on cancel."""
        scheduler = TimerScheduler()
        count = [0]
        reached = threading.Event()

        def callback():
            count[0] += 1
            if count[0] >= 3:
                reached.set()

        scheduler.start(5, callback)
        assert reached.wait(timeout=5)
        assert scheduler.running

        scheduler.cancel()
        assert not scheduler.running
        snapshot = count[0]
        time.sleep(0.05)
        assert count[0] == snapshot

    def test_cancel_from_callback(self):
        """Test that the callback may cancel its own timer."""
        scheduler = TimerScheduler()
        done = threading.Event()
        count = [0]

        def callback():
            count[0] += 1
            scheduler.cancel()
            done.set()

        scheduler.start(5, callback)
        assert done.wait(timeout=5)
        time.sleep(0.05)
        assert count[0] == 1
        assert not scheduler.running

    def test_restart_replaces_thread(self):
        """Test that starting again cancels the previous timer."""
        scheduler = TimerScheduler()
        first = []
        second = threading.Event()

        scheduler.start(5, lambda: first.append(1))
        scheduler.start(5, second.set)
        assert second.wait(timeout=5)
        snapshot = len(first)
        time.sleep(0.05)
        assert len(first) == snapshot
        scheduler.cancel()

    def test_cancel_when_idle(self):
        """Test that cancel is safe without a running timer."""
        scheduler = TimerScheduler()
        scheduler.cancel()
        assert not scheduler.running
