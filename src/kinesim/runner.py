"""
Headless run loop.

Plays a controller through a ManualTickDriver as fast as possible, one tick
per pump, until every object has finished. This is the batch counterpart of
an interactive frame loop and produces the same traces.
"""

import logging
import math
from typing import Optional

from tqdm import tqdm

from kinesim.config import SimulationParameters
from kinesim.controller import SimulationController, SimulationStatus
from kinesim.scheduling import ManualTickDriver

logger = logging.getLogger(__name__)


def expected_ticks(controller: SimulationController) -> int:
    """Upper bound on ticks for the current plans: ceil(max duration / dt) + 1."""
    max_duration = max((s.events.total_duration for s in controller.objects), default=0.0)
    return int(math.ceil(max_duration / controller.step_size)) + 1


def run_to_completion(
    controller: SimulationController,
    max_ticks: Optional[int] = None,
    show_progress: bool = True
) -> dict:
    """
    Play the controller until it finishes.

    Args:
        controller: Controller whose driver is a ManualTickDriver
        max_ticks: Optional cap on ticks (the run is paused if reached)
        show_progress: Whether to show a progress bar (tqdm)

    Returns:
        Dictionary with run statistics:
        - ticks: Number of ticks run
        - final_time: Clock time at the end [s]
        - status: Final SimulationStatus value
    """
    driver = controller.driver
    if not isinstance(driver, ManualTickDriver):
        raise TypeError("run_to_completion needs a controller driven by a ManualTickDriver")

    controller.play()

    total = expected_ticks(controller)
    if max_ticks is not None:
        total = min(total, max_ticks)

    if show_progress:
        pbar = tqdm(total=total, desc="Simulating", unit="ticks")

    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        if not driver.pump():
            break
        ticks += 1
        if show_progress:
            pbar.update(1)

    if show_progress:
        pbar.close()

    if controller.status == SimulationStatus.RUNNING:
        logger.warning("Stopped after %d ticks before all objects finished", ticks)
        controller.pause()

    return {
        'ticks': ticks,
        'final_time': controller.sim_time,
        'status': controller.status.value
    }


def run_simulation(params: SimulationParameters, show_progress: bool = True) -> tuple:
    """
    Run a complete simulation from configuration to finished traces.

    Args:
        params: SimulationParameters object
        show_progress: Whether to show progress bar

    Returns:
        (controller, stats) tuple:
        - controller: Finished SimulationController holding the traces
        - stats: Dictionary with run statistics
    """
    controller = params.build_controller(driver=ManualTickDriver(params.playback_speed))
    logger.info("Running %s: %d objects, dt=%g s",
                params.simulation_name, len(controller.objects), params.step_size)

    stats = run_to_completion(controller, show_progress=show_progress)
    return controller, stats
