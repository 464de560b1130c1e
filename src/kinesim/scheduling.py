"""
Tick drivers: the "next frame" scheduling seam.

The controller never loops on its own. After each tick it asks a driver for
the next one, and the driver decides when to call back: a frame timer in a
UI, an animation writer, or an explicit pump in tests and headless runs.

Drivers hold at most one pending callback and never start a tick before the
previous one has returned.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from kinesim import constants as const
from kinesim.events import coerce_float

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickDriver(ABC):
    """Interface between the controller and whatever produces frames."""

    def __init__(self, speed: float = const.DEFAULT_PLAYBACK_SPEED):
        self._speed = const.DEFAULT_PLAYBACK_SPEED
        self.speed = speed

    @property
    def speed(self) -> float:
        """Playback speed multiplier; affects cadence only, never the step size."""
        return self._speed

    @speed.setter
    def speed(self, value):
        value = coerce_float(value)
        if value <= 0:
            logger.warning("Ignoring non-positive playback speed %r", value)
            return
        self._speed = value

    def frame_interval_ms(self, base_interval_ms: float = const.DEFAULT_FRAME_INTERVAL_MS) -> float:
        """Wall-clock delay between ticks at the current speed [ms]."""
        return base_interval_ms / self._speed

    @abstractmethod
    def request_next_tick(self, callback: TickCallback):
        """Schedule `callback` to run on the next frame (replacing any pending one)."""

    @abstractmethod
    def cancel(self):
        """Drop the pending callback, if any."""

    @property
    @abstractmethod
    def pending(self) -> bool:
        """True if a tick is scheduled."""


class ManualTickDriver(TickDriver):
    """
    Driver stepped explicitly by the caller.

    Used by tests and by the headless runner: each pump() runs exactly one
    pending callback.
    """

    def __init__(self, speed: float = const.DEFAULT_PLAYBACK_SPEED):
        super().__init__(speed)
        self._callback: Optional[TickCallback] = None
        self.ticks_run = 0

    def request_next_tick(self, callback: TickCallback):
        self._callback = callback

    def cancel(self):
        self._callback = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def pump(self) -> bool:
        """
        Run the pending callback once.

        Returns:
            True if a callback ran, False if nothing was scheduled
        """
        callback = self._callback
        if callback is None:
            return False
        # Cleared first so the callback may schedule its successor
        self._callback = None
        callback()
        self.ticks_run += 1
        return True

    def run_until_idle(self, max_ticks: Optional[int] = None) -> int:
        """
        Pump until nothing is pending.

        Args:
            max_ticks: Optional cap on the number of ticks to run

        Returns:
            Number of ticks run
        """
        count = 0
        while max_ticks is None or count < max_ticks:
            if not self.pump():
                break
            count += 1
        return count
