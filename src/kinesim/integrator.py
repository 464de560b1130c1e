"""
Fixed-step integrator for a single point mass.

INTEGRATION SCHEME:
Semi-implicit (symplectic) Euler with piecewise-constant acceleration:
  1. v_new = v + a * dt
  2. x_new = x + v_new * dt      (uses the just-updated velocity)

Event boundaries are handled without sub-stepping: the step that reaches or
passes the end of an event completes it, so an event may run up to one step
past its nominal duration. This overshoot is a known approximation.
"""

from kinesim.events import EventSequence
from kinesim.state import ObjectState, Sample


def semi_implicit_euler(position: float, velocity: float, acceleration: float, dt: float):
    """
    Advance one point mass by one step at constant acceleration.

    Returns:
        (position, velocity) after the step
    """
    velocity = velocity + acceleration * dt
    position = position + velocity * dt
    return position, velocity


def step(state: ObjectState, sequence: EventSequence, dt: float, sim_time: float = 0.0) -> bool:
    """
    Advance one object by one fixed step and record a sample.

    Args:
        state: ObjectState (modified in place)
        sequence: The object's EventSequence
        dt: Step size [s], must be positive
        sim_time: Clock time at the start of this step, stored as the sample time

    Returns:
        True if the object is finished after this step (or already was)

    Raises:
        ValueError: If dt is not positive
    """
    if dt <= 0:
        raise ValueError(f"step size must be positive, got {dt}")

    # Already finished: nothing moves and nothing is sampled
    if state.event_index >= len(sequence):
        return True

    event = sequence[state.event_index]

    state.position, state.velocity = semi_implicit_euler(
        state.position, state.velocity, event.acceleration, dt
    )

    # Recomputed from the step count so n steps of dt cover exactly n * dt
    state.steps_in_event += 1
    state.time_in_event = state.steps_in_event * dt

    if state.time_in_event >= event.duration:
        state.event_index += 1
        state.steps_in_event = 0
        state.time_in_event = 0.0

    state.trace.append(Sample(sim_time, state.position, state.velocity))

    return state.event_index >= len(sequence)
