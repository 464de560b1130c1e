"""
Per-object simulation state.

Each simulated point mass is an ObjectState holding its authored initial
values, its EventSequence, the current kinematic state and the trace of
samples recorded during a run. Only the integrator mutates position,
velocity, event_index and time_in_event.
"""

from typing import Any, Iterable, List, NamedTuple, Optional

import numpy as np

from kinesim.events import EventSequence, coerce_float


class Sample(NamedTuple):
    """One trace point: time [s], position [m], velocity [m/s]."""

    time: float
    position: float
    velocity: float


class ObjectState:
    """
    Mutable state of one point mass.

    Attributes:
    - id: stable identity assigned by the controller
    - initial_position, initial_velocity: authored start values
    - events: owned EventSequence
    - position, velocity: current kinematic state
    - start_position: position the current run started from
    - event_index: index of the active event, len(events) once finished
    - steps_in_event: whole steps taken inside the active event
    - trace: list of Sample, append-only during a run
    - pending_events: events authored mid-run, applied at the next reinitialize
    """

    def __init__(
        self,
        object_id: int,
        initial_position: Any = 0.0,
        initial_velocity: Any = 0.0,
        events: Iterable[Any] = ()
    ):
        self.id = object_id
        self.initial_position = coerce_float(initial_position)
        self.initial_velocity = coerce_float(initial_velocity)
        if isinstance(events, EventSequence):
            self.events = events
        else:
            self.events = EventSequence.build(events)

        self.position = self.initial_position
        self.velocity = self.initial_velocity
        self.event_index = 0
        self.time_in_event = 0.0
        self.steps_in_event = 0
        self.start_position = self.initial_position
        self.trace: List[Sample] = []
        self.pending_events: Optional[EventSequence] = None

    def reinitialize(self):
        """Restore the run-start state from the current initial values and events."""
        if self.pending_events is not None:
            self.events = self.pending_events
            self.pending_events = None
        self.start_position = self.initial_position
        self.position = self.initial_position
        self.velocity = self.initial_velocity
        self.event_index = 0
        self.time_in_event = 0.0
        self.steps_in_event = 0
        self.trace = []

    @property
    def is_finished(self) -> bool:
        """True once every event has been played (immediately for no events)."""
        return self.event_index >= len(self.events)

    @property
    def times(self) -> np.ndarray:
        """Sample times [s] (shape: (n_samples,))."""
        return np.array([s.time for s in self.trace], dtype=np.float64)

    @property
    def positions(self) -> np.ndarray:
        """Sample positions [m] (shape: (n_samples,))."""
        return np.array([s.position for s in self.trace], dtype=np.float64)

    @property
    def velocities(self) -> np.ndarray:
        """Sample velocities [m/s] (shape: (n_samples,))."""
        return np.array([s.velocity for s in self.trace], dtype=np.float64)

    def __repr__(self) -> str:
        status = "finished" if self.is_finished else f"event {self.event_index}/{len(self.events)}"
        return (f"ObjectState(id={self.id}, x={self.position:.4f} m, "
                f"v={self.velocity:.4f} m/s, {status}, samples={len(self.trace)})")
