"""Periodic tick drivers.

The controller never talks to a clock directly. It hands a callback to a
:class:`Scheduler`, which is either a real wall-clock timer running on a
background thread or a manual scheduler that fires only when told to.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol

from agentx.logging_config import logger

TickCallback = Callable[[], None]


class Scheduler(Protocol):
    """Fires a callback at a fixed interval until cancelled."""

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        """Begin firing ``callback`` every ``interval_ms`` milliseconds."""
        ...

    def cancel(self) -> None:
        """Stop firing. Safe to call when not running."""
        ...

    @property
    def running(self) -> bool:
        """Whether a callback is scheduled."""
        ...


class TimerScheduler:
    """Wall-clock scheduler backed by one daemon thread.

    Each callback runs to completion before the next wait begins, so ticks
    never overlap. Cancelling from inside the callback is allowed.
    """

    def __init__(self, name: str = "agentx-tick") -> None:
        self.name = name
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stop_event.is_set()
        )

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        self.cancel()
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._run,
            args=(interval_ms / 1000.0, callback, stop_event),
            name=self.name,
            daemon=True,
        )
        self._thread.start()
        logger.debug(f"Tick timer started every {interval_ms} ms")

    def cancel(self) -> None:
        self._stop_event.set()
        thread, self._thread = self._thread, None
        # A tick may cancel its own timer; joining would deadlock
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(self, interval_s: float, callback: TickCallback, stop_event: threading.Event) -> None:
        while not stop_event.wait(interval_s):
            try:
                callback()
            except Exception:
                logger.exception("Tick callback failed; stopping the tick timer")
                stop_event.set()
                raise


class ManualScheduler:
    """Virtual-clock scheduler for tests and headless runs.

    Nothing happens until :meth:`fire` or :meth:`advance` is called.
    """

    def __init__(self) -> None:
        self.interval_ms: int | None = None
        self._callback: TickCallback | None = None
        self._elapsed_ms = 0
        self.fired = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        self.interval_ms = interval_ms
        self._callback = callback
        self._elapsed_ms = 0

    def cancel(self) -> None:
        self._callback = None
        self._elapsed_ms = 0

    def fire(self) -> bool:
        """Run the callback once if scheduled. Returns whether it ran."""
        if self._callback is None:
            return False
        self.fired += 1
        self._callback()
        return True

    def advance(self, ms: int) -> int:
        """
        Move the virtual clock forward, firing every interval that elapses.

        Stops early if the callback cancels the schedule. Returns the number
        of callbacks run.
        """
        if self._callback is None or self.interval_ms is None:
            return 0

        self._elapsed_ms += ms
        count = 0
        while self._callback is not None and self._elapsed_ms >= self.interval_ms:
            self._elapsed_ms -= self.interval_ms
            self.fire()
            count += 1
        return count
