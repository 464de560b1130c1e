"""
Tests for analysis module.
"""

import pytest

from kinesim.analysis import summarize_object, summarize_run
from kinesim.controller import SimulationController
from kinesim.state import ObjectState


@pytest.fixture
def finished_controller():
    """Worked example plus an object with nothing to do, run to completion."""
    controller = SimulationController(step_size=0.05)
    controller.add_object(0.0, 0.0, [(2, 1)])
    controller.add_object(4.0, -1.0)
    controller.play()
    controller.driver.run_until_idle()
    return controller


class TestSummarizeObject:
    """Test per-object summaries."""

    def test_worked_example(self, finished_controller):
        summary = summarize_object(finished_controller.objects[0])

        assert summary['id'] == 0
        assert summary['n_samples'] == 20
        assert summary['finished'] is True
        assert summary['final_time'] == pytest.approx(0.95)
        assert summary['final_position'] == pytest.approx(1.05)
        assert summary['final_velocity'] == pytest.approx(2.0)
        assert summary['displacement'] == pytest.approx(1.05)
        assert summary['min_position'] == pytest.approx(0.005)
        assert summary['max_position'] == pytest.approx(1.05)
        assert summary['peak_speed'] == pytest.approx(2.0)

    def test_object_without_samples(self, finished_controller):
        """Objects that never moved report their initial values."""
        summary = summarize_object(finished_controller.objects[1])

        assert summary['n_samples'] == 0
        assert summary['finished'] is True
        assert summary['final_position'] == 4.0
        assert summary['final_velocity'] == -1.0
        assert summary['displacement'] == 0.0
        assert summary['peak_speed'] == 1.0

    def test_displacement_relative_to_start(self):
        controller = SimulationController(step_size=0.1)
        obj = controller.add_object(10.0, -2.0, [(0, 1)])
        controller.play()
        controller.driver.run_until_idle()

        summary = summarize_object(obj)

        assert summary['final_position'] == pytest.approx(8.0)
        assert summary['displacement'] == pytest.approx(-2.0)
        assert summary['max_position'] == pytest.approx(9.8)
        assert summary['peak_speed'] == pytest.approx(2.0)

    def test_displacement_unchanged_by_later_edit(self):
        """Editing the start value after a run does not rewrite its summary."""
        controller = SimulationController(step_size=0.1)
        obj = controller.add_object(10.0, -2.0, [(0, 1)])
        controller.play()
        controller.driver.run_until_idle()

        controller.configure_object(obj.id, initial_position=100.0)
        summary = summarize_object(obj)

        assert summary['final_position'] == pytest.approx(8.0)
        assert summary['displacement'] == pytest.approx(-2.0)

    def test_unplayed_object(self):
        summary = summarize_object(ObjectState(3, 1.5, 0.0, [(1, 1)]))

        assert summary['id'] == 3
        assert summary['finished'] is False
        assert summary['final_time'] == 0.0


def test_summarize_run(finished_controller):
    summary = summarize_run(finished_controller)

    assert summary['status'] == 'finished'
    assert summary['n_objects'] == 2
    assert summary['sim_time'] == pytest.approx(0.95)
    assert [obj['id'] for obj in summary['objects']] == [0, 1]
