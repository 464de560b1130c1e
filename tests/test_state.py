"""
Unit tests for ObjectState.

Tests cover:
- Construction and normalisation of authored values
- Reinitialisation between runs
- Trace array views
"""

import numpy as np

from kinesim.events import EventSequence
from kinesim.state import ObjectState, Sample


class TestObjectStateBasics:
    """Tests for basic ObjectState functionality."""

    def test_defaults(self):
        """A new object is at rest at the origin with no events."""
        state = ObjectState(0)

        assert state.id == 0
        assert state.position == 0.0
        assert state.velocity == 0.0
        assert state.event_index == 0
        assert state.time_in_event == 0.0
        assert state.trace == []
        assert len(state.events) == 0

    def test_empty_sequence_is_finished_immediately(self):
        state = ObjectState(3, 1.0, 2.0)
        assert state.is_finished
        assert state.event_index == 0 == len(state.events)

    def test_initial_values_normalised(self):
        state = ObjectState(1, "2.5", "oops", [{'acc': 1, 'dur': 1}])

        assert state.initial_position == 2.5
        assert state.initial_velocity == 0.0
        assert state.position == 2.5
        assert not state.is_finished

    def test_accepts_prebuilt_sequence(self):
        seq = EventSequence.build([(1, 2)])
        state = ObjectState(0, events=seq)
        assert state.events is seq


class TestReinitialize:
    """Tests for returning to the run-start state."""

    def test_restores_kinematics_and_clears_trace(self):
        state = ObjectState(0, 1.0, -2.0, [(1, 1)])
        state.position = 42.0
        state.velocity = 7.0
        state.event_index = 1
        state.time_in_event = 0.3
        state.steps_in_event = 6
        state.trace.append(Sample(0.0, 42.0, 7.0))

        state.reinitialize()

        assert state.position == 1.0
        assert state.velocity == -2.0
        assert state.event_index == 0
        assert state.time_in_event == 0.0
        assert state.steps_in_event == 0
        assert state.trace == []

    def test_uses_current_initial_values(self):
        state = ObjectState(0, 0.0, 0.0)
        state.initial_position = 5.0
        state.initial_velocity = 1.5

        state.reinitialize()

        assert state.position == 5.0
        assert state.velocity == 1.5

    def test_applies_pending_events(self):
        state = ObjectState(0, events=[(1, 1)])
        state.pending_events = EventSequence.build([(2, 3), (0, 1)])

        state.reinitialize()

        assert len(state.events) == 2
        assert state.events[0].acceleration == 2.0
        assert state.pending_events is None

    def test_start_position_follows_run_start(self):
        """The recorded start position only changes when a new run starts."""
        state = ObjectState(0, 2.0, 0.0, [(1, 1)])
        assert state.start_position == 2.0

        state.initial_position = -4.0
        assert state.start_position == 2.0

        state.reinitialize()
        assert state.start_position == -4.0
        assert state.position == -4.0


class TestTraceViews:
    """Tests for numpy views of the trace."""

    def test_arrays_match_samples(self):
        state = ObjectState(0)
        state.trace.extend([
            Sample(0.0, 0.005, 0.1),
            Sample(0.05, 0.015, 0.2),
        ])

        assert np.array_equal(state.times, [0.0, 0.05])
        assert np.array_equal(state.positions, [0.005, 0.015])
        assert np.array_equal(state.velocities, [0.1, 0.2])

    def test_empty_trace_arrays(self):
        state = ObjectState(0)
        assert state.times.shape == (0,)
        assert state.positions.shape == (0,)
        assert state.velocities.shape == (0,)

    def test_sample_fields(self):
        sample = Sample(time=1.0, position=2.0, velocity=3.0)
        assert sample.time == 1.0
        assert sample.position == 2.0
        assert sample.velocity == 3.0


class TestStateRepresentation:
    """Tests for state string representation."""

    def test_repr_format(self):
        state = ObjectState(2, 1.0, 0.5, [(1, 1), (0, 1)])
        repr_str = repr(state)

        assert "ObjectState" in repr_str
        assert "id=2" in repr_str
        assert "event 0/2" in repr_str
        assert "samples=0" in repr_str

    def test_repr_finished(self):
        assert "finished" in repr(ObjectState(0))
