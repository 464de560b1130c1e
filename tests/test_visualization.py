"""
Tests for visualization module.
"""

import pytest

from kinesim.controller import SimulationController, SimulationStatus
from kinesim.scheduling import ManualTickDriver
from kinesim.visualization import (
    COLOR_PALETTE,
    FrameTickDriver,
    animate_simulation,
    color_for,
    object_label,
    plot_traces
)


def test_colors_are_stable_per_id():
    assert color_for(0) == "red"
    assert color_for(1) == "cyan"
    assert color_for(len(COLOR_PALETTE)) == color_for(0)
    assert color_for(7) == color_for(7)


def test_object_label():
    assert object_label(0) == "Object 1"


class TestFrameTickDriver:
    """Tests for the animation-fed driver."""

    def test_on_frame_runs_pending(self):
        driver = FrameTickDriver()
        calls = []
        driver.request_next_tick(lambda: calls.append(1))

        assert driver.on_frame() is True
        assert driver.on_frame() is False
        assert calls == [1]

    def test_cancel(self):
        driver = FrameTickDriver(speed=2.0)
        driver.request_next_tick(lambda: None)
        driver.cancel()

        assert not driver.pending
        assert driver.frame_interval_ms(100.0) == pytest.approx(50.0)


def test_plot_traces(tmp_path):
    """Test static chart is written for a finished run."""
    controller = SimulationController(step_size=0.05)
    controller.add_object(0.0, 0.0, [(2, 1)])
    controller.add_object(1.0, 0.5, [(0, 0.5), (-1, 0.5)])
    controller.add_object()
    controller.play()
    controller.driver.run_until_idle()

    output_path = tmp_path / "traces.png"
    plot_traces(controller, str(output_path), title="Test run")

    assert output_path.exists()
    assert output_path.stat().st_size > 0


def test_plot_traces_before_run(tmp_path):
    controller = SimulationController()
    controller.add_object(events=[(1, 1)])

    output_path = tmp_path / "empty.png"
    plot_traces(controller, str(output_path))

    assert output_path.exists()


def test_animate_simulation_finishes_run(tmp_path):
    """Each animation frame drives one tick until the run completes."""
    controller = SimulationController(step_size=0.05, driver=FrameTickDriver(speed=2.0))
    obj = controller.add_object(0.0, 0.0, [(2, 1)])

    output_path = tmp_path / "run.gif"
    n_frames = animate_simulation(controller, str(output_path))

    assert output_path.exists()
    assert n_frames == 22
    assert controller.status == SimulationStatus.FINISHED
    assert len(obj.trace) == 20
    assert obj.position == pytest.approx(1.05)


def test_animate_simulation_frame_cap(tmp_path):
    controller = SimulationController(step_size=0.05, driver=FrameTickDriver())
    controller.add_object(events=[(1, 10)])

    n_frames = animate_simulation(controller, str(tmp_path / "short.gif"), max_frames=5)

    assert n_frames == 5
    assert controller.status == SimulationStatus.RUNNING
    assert len(controller.objects[0].trace) <= 5


def test_animate_requires_frame_driver(tmp_path):
    controller = SimulationController(driver=ManualTickDriver())
    with pytest.raises(TypeError):
        animate_simulation(controller, str(tmp_path / "never.gif"))
