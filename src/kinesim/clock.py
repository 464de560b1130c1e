"""
Global simulation clock.

The clock owns simulated time and the fixed step size. One tick advances
every unfinished object by exactly one step, all sampled at the same time
value, so traces of different objects stay aligned.
"""

import logging
from typing import Iterable

from kinesim import constants as const
from kinesim.integrator import step
from kinesim.state import ObjectState

logger = logging.getLogger(__name__)


class SimulationClock:
    """
    Fixed-step clock driving the integrator across all objects.

    sim_time is derived from the tick count (tick_count * step_size) so
    that sample k of every trace carries time k * step_size exactly.
    """

    def __init__(self, step_size: float = const.DEFAULT_STEP_SIZE):
        if step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")
        self._step_size = float(step_size)
        self.tick_count = 0

    @property
    def step_size(self) -> float:
        """Integration step [s]; fixed for the clock's lifetime."""
        return self._step_size

    @property
    def sim_time(self) -> float:
        """Current simulated time [s]."""
        return self.tick_count * self._step_size

    def reset(self):
        """Return the clock to t = 0."""
        self.tick_count = 0

    def tick(self, objects: Iterable[ObjectState]) -> bool:
        """
        Advance every unfinished object by one step.

        Objects are processed in the iteration order given, which the
        controller keeps stable (insertion order).

        Args:
            objects: Live ObjectStates

        Returns:
            True if every object is finished ("simulation complete"); time is
            then left unchanged. False if at least one object continues, in
            which case time advances by one step.
        """
        sim_time = self.sim_time
        all_finished = True

        for state in objects:
            if state.is_finished:
                continue
            if not step(state, state.events, self._step_size, sim_time):
                all_finished = False

        if all_finished:
            logger.debug("All objects finished at t=%.4f s", sim_time)
            return True

        self.tick_count += 1
        return False

    def __repr__(self):
        return f"SimulationClock(t={self.sim_time:.4f} s, dt={self._step_size} s, ticks={self.tick_count})"
