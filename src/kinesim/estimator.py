"""
Range pre-pass for display scaling.

Before a run starts, every object's motion plan is replayed once at a finer
fixed step to bound the position axis and find the overall run length. The
replay works on copies of the initial values and never touches the real
ObjectState objects.

All performance-critical functions are JIT-compiled with Numba and operate on
plain NumPy arrays.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable

import numpy as np
from numba import jit

from kinesim import constants as const
from kinesim.state import ObjectState

logger = logging.getLogger(__name__)


@jit(nopython=True)
def sweep_position_bounds(accelerations, durations, position, velocity, dt):
    """
    Replay one motion plan and track the extreme positions visited.

    Each event runs for ceil(duration / dt) steps of semi-implicit Euler.
    Only post-step positions are counted; the start position is not a sample.

    Args:
        accelerations: Event accelerations [m/s²] (shape: (N,))
        durations: Event durations [s] (shape: (N,))
        position: Initial position [m]
        velocity: Initial velocity [m/s]
        dt: Fine step [s]

    Returns:
        (min_position, max_position, n_samples); min/max are +inf/-inf when
        n_samples is 0
    """
    min_pos = np.inf
    max_pos = -np.inf
    n_samples = 0

    for k in range(len(accelerations)):
        n_steps = int(math.ceil(durations[k] / dt))
        acc = accelerations[k]
        for _ in range(n_steps):
            velocity += acc * dt
            position += velocity * dt
            if position < min_pos:
                min_pos = position
            if position > max_pos:
                max_pos = position
            n_samples += 1

    return min_pos, max_pos, n_samples


@dataclass(frozen=True)
class RangeEstimate:
    """Estimated bounds of a run."""

    max_duration: float  # [s] largest nominal plan duration
    min_position: float  # [m]
    max_position: float  # [m]
    sample_count: int = 0  # fine-step samples that contributed

    def axis_limits(self, padding: float = const.AXIS_PADDING) -> Dict[str, float]:
        """
        Axis box for position/velocity charts.

        Time runs from 0 to max_duration plus a fractional buffer. The
        position range is widened by `padding` times its span (or times 1
        when the span is zero).
        """
        span = abs(self.max_position - self.min_position) or 1.0
        buffer = padding * span
        return {
            'min_time': 0.0,
            'max_time': self.max_duration * (1.0 + padding),
            'min_position': self.min_position - buffer,
            'max_position': self.max_position + buffer,
        }


def estimate(
    objects: Iterable[ObjectState],
    step_size: float = const.ESTIMATOR_STEP_SIZE
) -> RangeEstimate:
    """
    Estimate the time and position range of a run.

    Args:
        objects: ObjectStates to bound (read only)
        step_size: Fine replay step [s], independent of the run's step

    Returns:
        RangeEstimate; the position range falls back to [0, 1] when no
        object produces a sample
    """
    if step_size <= 0:
        raise ValueError(f"step_size must be positive, got {step_size}")

    max_duration = 0.0
    min_pos = np.inf
    max_pos = -np.inf
    total_samples = 0

    for state in objects:
        max_duration = max(max_duration, state.events.total_duration)
        if len(state.events) == 0:
            continue

        lo, hi, n = sweep_position_bounds(
            state.events.accelerations,
            state.events.durations,
            state.initial_position,
            state.initial_velocity,
            float(step_size)
        )
        if n == 0:
            continue
        min_pos = min(min_pos, lo)
        max_pos = max(max_pos, hi)
        total_samples += n

    if total_samples == 0:
        min_pos = const.DEFAULT_MIN_POSITION
        max_pos = const.DEFAULT_MAX_POSITION

    result = RangeEstimate(
        max_duration=max_duration,
        min_position=float(min_pos),
        max_position=float(max_pos),
        sample_count=total_samples
    )
    logger.debug("Range estimate: %s", result)
    return result
