"""
Numerical defaults used throughout the simulation.

UNITS:
- Time: seconds (s)
- Position: metres (m)
- Velocity: metres per second (m/s)
- Acceleration: metres per second squared (m/s²)
"""

# Integration step of the real run [s]
DEFAULT_STEP_SIZE = 0.05

# Finer step used only by the range pre-pass [s]
ESTIMATOR_STEP_SIZE = 0.02

# Fallback position range when the pre-pass produces no sample [m]
DEFAULT_MIN_POSITION = 0.0
DEFAULT_MAX_POSITION = 1.0

# Fractional buffer added around estimated axis ranges
AXIS_PADDING = 0.1

# Playback cadence of a real-time driver at speed 1.0 (~60 frames per second)
DEFAULT_FRAME_INTERVAL_MS = 1000.0 / 60.0
DEFAULT_PLAYBACK_SPEED = 1.0
