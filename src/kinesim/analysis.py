"""
Post-run analysis of recorded traces.

Summaries are computed from the samples an object recorded during its run:
- final time, position and velocity
- displacement from where the run started
- position extremes and peak speed
"""

from typing import Dict

import numpy as np

from kinesim.controller import SimulationController
from kinesim.state import ObjectState


def summarize_object(state: ObjectState) -> Dict:
    """
    Summarize one object's trace.

    Args:
        state: ObjectState after (or during) a run

    Returns:
        Dictionary containing:
        - 'id': Object id
        - 'n_samples': Number of recorded samples
        - 'finished': Whether all events were played
        - 'final_time': Time of the last sample [s]
        - 'final_position', 'final_velocity': Last sample values [m], [m/s]
        - 'displacement': final_position - start position of the run [m]
        - 'min_position', 'max_position': Position extremes [m]
        - 'peak_speed': Largest |velocity| [m/s]

        Objects without samples report their initial values and zero
        displacement.
    """
    positions = state.positions
    velocities = state.velocities

    if len(positions) == 0:
        return {
            'id': state.id,
            'n_samples': 0,
            'finished': state.is_finished,
            'final_time': 0.0,
            'final_position': state.position,
            'final_velocity': state.velocity,
            'displacement': state.position - state.start_position,
            'min_position': state.position,
            'max_position': state.position,
            'peak_speed': abs(state.velocity),
        }

    return {
        'id': state.id,
        'n_samples': len(positions),
        'finished': state.is_finished,
        'final_time': float(state.trace[-1].time),
        'final_position': float(positions[-1]),
        'final_velocity': float(velocities[-1]),
        'displacement': float(positions[-1] - state.start_position),
        'min_position': float(np.min(positions)),
        'max_position': float(np.max(positions)),
        'peak_speed': float(np.max(np.abs(velocities))),
    }


def summarize_run(controller: SimulationController) -> Dict:
    """
    Summarize every live object plus run-level figures.

    Returns:
        Dictionary with 'status', 'sim_time', 'n_objects' and 'objects'
        (a list of summarize_object() results in insertion order)
    """
    return {
        'status': controller.status.value,
        'sim_time': controller.sim_time,
        'n_objects': len(controller.objects),
        'objects': [summarize_object(state) for state in controller.objects],
    }
