"""
Simulation controller: object collection, run state machine and outputs.

States:
    IDLE --play--> RUNNING --pause--> PAUSED --play--> RUNNING
    RUNNING --(all objects done)--> FINISHED --play--> RUNNING (fresh run)
    any --reset--> IDLE

A fresh play() (from IDLE or FINISHED) reinitialises every object from its
authored values, runs the range pre-pass and restarts the clock. Resuming
from PAUSED leaves all state untouched. Ticks are driven one at a time by an
injected TickDriver.

The controller never raises on user input: bad numbers become 0, unknown ids
and out-of-state commands are no-ops.
"""

import itertools
import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from kinesim import constants as const
from kinesim.clock import SimulationClock
from kinesim.estimator import RangeEstimate, estimate
from kinesim.events import EventSequence, coerce_float
from kinesim.scheduling import ManualTickDriver, TickDriver
from kinesim.state import ObjectState, Sample

logger = logging.getLogger(__name__)

TickListener = Callable[['SimulationController'], None]

_UNSET = object()


class SimulationStatus(str, Enum):
    """Run status reported to the rendering layer."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class SimulationController:
    """
    Owns the live objects, the clock and the run state machine.

    Args:
        step_size: Integration step of the run [s]
        estimator_step_size: Fine step of the range pre-pass [s]
        driver: TickDriver producing ticks (defaults to a ManualTickDriver)
    """

    def __init__(
        self,
        step_size: float = const.DEFAULT_STEP_SIZE,
        estimator_step_size: float = const.ESTIMATOR_STEP_SIZE,
        driver: Optional[TickDriver] = None
    ):
        self.clock = SimulationClock(step_size)
        self.estimator_step_size = estimator_step_size
        self.driver = driver if driver is not None else ManualTickDriver()

        self._objects: Dict[int, ObjectState] = {}
        self._ids = itertools.count()
        self._listeners: List[TickListener] = []
        self._in_tick = False
        self._generation = 0

        self.status = SimulationStatus.IDLE
        self.range_estimate: Optional[RangeEstimate] = None

    # ------------------------------------------------------------------
    # Object collection
    # ------------------------------------------------------------------

    @property
    def objects(self) -> List[ObjectState]:
        """Live objects in insertion order."""
        return list(self._objects.values())

    def get_object(self, object_id: int) -> Optional[ObjectState]:
        return self._objects.get(object_id)

    def add_object(
        self,
        initial_position: Any = 0.0,
        initial_velocity: Any = 0.0,
        events: Iterable[Any] = ()
    ) -> ObjectState:
        """
        Create a new object with a fresh id.

        Ids come from a counter and are never handed out twice, so deleting
        an object does not let a later one take over its id. An object added
        during a run sits at rest until the next fresh play(), so its trace
        still starts at t = 0.
        """
        state = ObjectState(next(self._ids), initial_position, initial_velocity, events)
        if self._run_in_progress:
            state.pending_events = state.events
            state.events = EventSequence()
        self._objects[state.id] = state
        logger.debug("Added object %d (%d events)", state.id, len(state.events))
        return state

    def delete_object(self, object_id: int) -> bool:
        """
        Remove an object; unknown ids are ignored.

        Returns:
            True if an object was removed
        """
        removed = self._objects.pop(object_id, None)
        if removed is None:
            logger.debug("delete_object(%r): no such object", object_id)
            return False
        logger.debug("Deleted object %d", object_id)
        return True

    def configure_object(
        self,
        object_id: int,
        initial_position: Any = _UNSET,
        initial_velocity: Any = _UNSET,
        events: Any = _UNSET
    ) -> bool:
        """
        Update an object's authored configuration.

        Changes take effect at the next fresh play(); a paused run keeps
        using the values it started with for its kinematic state.

        Returns:
            True if the object exists
        """
        state = self._objects.get(object_id)
        if state is None:
            return False
        if initial_position is not _UNSET:
            state.initial_position = coerce_float(initial_position)
        if initial_velocity is not _UNSET:
            state.initial_velocity = coerce_float(initial_velocity)
        if events is not _UNSET:
            if self._run_in_progress:
                logger.info("Events for object %d change at the next fresh play()", object_id)
                state.pending_events = EventSequence.build(events)
            else:
                state.events = EventSequence.build(events)
                state.pending_events = None
        return True

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------

    @property
    def speed(self) -> float:
        return self.driver.speed

    @speed.setter
    def speed(self, value):
        self.driver.speed = value

    @property
    def _run_in_progress(self) -> bool:
        return self.status in (SimulationStatus.RUNNING, SimulationStatus.PAUSED)

    @property
    def sim_time(self) -> float:
        return self.clock.sim_time

    @property
    def step_size(self) -> float:
        return self.clock.step_size

    def play(self):
        """Start a fresh run, or resume a paused one."""
        if self.status == SimulationStatus.RUNNING:
            return

        if self.status == SimulationStatus.PAUSED:
            logger.info("Resuming at t=%.3f s", self.clock.sim_time)
        else:
            self._start_fresh_run()

        self.status = SimulationStatus.RUNNING

        if all(state.is_finished for state in self._objects.values()):
            self._finish()
            return

        self.driver.request_next_tick(self.tick)

    def pause(self):
        """Stop ticking and keep all state for resume."""
        if self.status != SimulationStatus.RUNNING:
            return
        self.driver.cancel()
        self.status = SimulationStatus.PAUSED
        logger.info("Paused at t=%.3f s", self.clock.sim_time)

    def reset(self):
        """Stop ticking, clear traces and return to IDLE."""
        self.driver.cancel()
        self._generation += 1
        for state in self._objects.values():
            state.reinitialize()
        self.clock.reset()
        self.status = SimulationStatus.IDLE
        logger.info("Reset")

    def tick(self):
        """
        Run one clock tick and schedule the next.

        Does nothing unless RUNNING. A call made while a tick is already in
        progress is ignored.
        """
        if self.status != SimulationStatus.RUNNING:
            return
        if self._in_tick:
            logger.warning("Ignoring reentrant tick at t=%.3f s", self.clock.sim_time)
            return

        generation = self._generation
        self._in_tick = True
        try:
            complete = self.clock.tick(self.objects)
            self._notify()
        finally:
            self._in_tick = False

        # A listener may have paused, reset or restarted the run
        if self.status != SimulationStatus.RUNNING or self._generation != generation:
            return
        if complete:
            self._finish()
        else:
            self.driver.request_next_tick(self.tick)

    def _start_fresh_run(self):
        self._generation += 1
        for state in self._objects.values():
            state.reinitialize()
        self.clock.reset()
        self.range_estimate = estimate(self._objects.values(), self.estimator_step_size)
        logger.info(
            "Starting run: %d objects, dt=%g s, estimated duration %.3f s",
            len(self._objects), self.clock.step_size, self.range_estimate.max_duration
        )

    def _finish(self):
        self.driver.cancel()
        self.status = SimulationStatus.FINISHED
        logger.info("Simulation complete at t=%.3f s", self.clock.sim_time)

    # ------------------------------------------------------------------
    # Outputs for the rendering layer
    # ------------------------------------------------------------------

    def add_listener(self, listener: TickListener):
        """Register a callback invoked with the controller after every tick."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TickListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    def traces(self) -> Dict[int, List[Sample]]:
        """Recorded samples per object id."""
        return {object_id: list(state.trace) for object_id, state in self._objects.items()}

    def axis_limits(self, padding: float = const.AXIS_PADDING) -> Dict[str, float]:
        """Chart axis box from the last range estimate (estimated on demand if none)."""
        if self.range_estimate is None:
            return estimate(self._objects.values(), self.estimator_step_size).axis_limits(padding)
        return self.range_estimate.axis_limits(padding)

    def __repr__(self):
        return (f"SimulationController(status={self.status.value}, "
                f"objects={len(self._objects)}, t={self.clock.sim_time:.3f} s)")
