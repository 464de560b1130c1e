"""
Configuration management for point-mass kinematics runs.

This module loads scenario files written in YAML: run settings plus the
authored objects (initial position, initial velocity and acceleration
events). Authored numbers go through the same normalisation as interactive
input: anything non-numeric becomes 0 and events with a non-positive
duration are dropped.

Example:

    simulation_name: two_cars
    output_directory: ./results/two_cars
    simulation_control:
      step_size_s: 0.05
      estimator_step_size_s: 0.02
    playback:
      speed: 1.0
      frame_interval_ms: 16.7
    objects:
      - initial_position_m: 0
        initial_velocity_m_s: 0
        events:
          - {acceleration: 2, duration: 1}
    diagnostics:
      log_level: INFO
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

import yaml

from kinesim import constants as const
from kinesim.events import EventSequence, coerce_float


@dataclass
class ObjectConfig:
    """Authored configuration of one object."""

    initial_position: float = 0.0  # metres
    initial_velocity: float = 0.0  # m/s
    events: EventSequence = field(default_factory=EventSequence)

    def __repr__(self):
        return (f"Object: x0={self.initial_position:g} m, v0={self.initial_velocity:g} m/s, "
                f"{len(self.events)} events ({self.events.total_duration:g} s)")


@dataclass
class SimulationParameters:
    """
    Container for all run parameters.

    All values are in SI units:
    - Time: seconds (s)
    - Position: metres (m)
    - Velocity: metres per second (m/s)
    """

    # Metadata
    simulation_name: str = "kinesim"
    output_directory: str = "./results"

    # Simulation control
    step_size: float = const.DEFAULT_STEP_SIZE  # seconds
    estimator_step_size: float = const.ESTIMATOR_STEP_SIZE  # seconds

    # Playback (cadence only, never the physics)
    playback_speed: float = const.DEFAULT_PLAYBACK_SPEED
    frame_interval_ms: float = const.DEFAULT_FRAME_INTERVAL_MS

    # Authored objects
    objects: List[ObjectConfig] = field(default_factory=list)

    # Diagnostics
    log_level: str = "INFO"

    @property
    def max_duration(self) -> float:
        """Longest nominal plan across all objects [s]."""
        return max((obj.events.total_duration for obj in self.objects), default=0.0)

    def validate(self) -> list:
        """
        Perform sanity checks on configuration parameters.

        Returns:
            List of warning/error messages. Empty list if all checks pass.
        """
        warnings = []

        if self.step_size <= 0:
            warnings.append(f"ERROR: step_size must be positive, got {self.step_size}")

        if self.estimator_step_size <= 0:
            warnings.append(
                f"ERROR: estimator_step_size must be positive, got {self.estimator_step_size}"
            )
        elif self.step_size > 0 and self.estimator_step_size > self.step_size:
            warnings.append(
                f"WARNING: estimator step ({self.estimator_step_size} s) is coarser than the "
                f"run step ({self.step_size} s); axis ranges may be underestimated"
            )

        if self.playback_speed <= 0:
            warnings.append(f"ERROR: playback speed must be positive, got {self.playback_speed}")

        if self.frame_interval_ms <= 0:
            warnings.append(f"ERROR: frame_interval_ms must be positive, got {self.frame_interval_ms}")

        if not self.objects:
            warnings.append("WARNING: no objects configured; the run will finish immediately")

        for i, obj in enumerate(self.objects):
            name = f"Object {i + 1}"
            if len(obj.events) == 0:
                warnings.append(f"INFO: {name} has no events and stays at rest")
                continue

            # Each event may overshoot its boundary by up to one step
            for k, event in enumerate(obj.events):
                if self.step_size > 0 and event.duration < self.step_size:
                    warnings.append(
                        f"WARNING: {name} event {k + 1} lasts {event.duration} s, shorter than "
                        f"one step ({self.step_size} s); it will run for a full step"
                    )

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            warnings.append(f"WARNING: unknown log_level '{self.log_level}', using INFO")

        return warnings

    def build_controller(self, driver=None):
        """
        Create a SimulationController populated with the configured objects.

        Args:
            driver: Optional TickDriver (defaults to a ManualTickDriver)

        Returns:
            SimulationController in the IDLE state
        """
        from kinesim.controller import SimulationController

        controller = SimulationController(
            step_size=self.step_size,
            estimator_step_size=self.estimator_step_size,
            driver=driver
        )
        controller.speed = self.playback_speed
        for obj in self.objects:
            controller.add_object(obj.initial_position, obj.initial_velocity, obj.events)
        return controller

    @classmethod
    def from_yaml(cls, filepath: str) -> 'SimulationParameters':
        """
        Load configuration from a YAML file.

        Args:
            filepath: Path to YAML configuration file

        Returns:
            SimulationParameters object

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        config_path = Path(filepath)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: dict) -> 'SimulationParameters':
        """Build parameters from an already-parsed configuration mapping."""

        def section(name: str) -> dict:
            value = config.get(name)
            return value if isinstance(value, dict) else {}

        def number_or_default(value: Any, default: float) -> float:
            """Missing values fall back to the default; present ones are normalised."""
            if value is None:
                return default
            return coerce_float(value)

        sim_control = section('simulation_control')
        step_size = number_or_default(sim_control.get('step_size_s'), const.DEFAULT_STEP_SIZE)
        estimator_step_size = number_or_default(
            sim_control.get('estimator_step_size_s'), const.ESTIMATOR_STEP_SIZE
        )

        playback = section('playback')
        playback_speed = number_or_default(playback.get('speed'), const.DEFAULT_PLAYBACK_SPEED)
        frame_interval_ms = number_or_default(
            playback.get('frame_interval_ms'), const.DEFAULT_FRAME_INTERVAL_MS
        )

        objects = []
        raw_objects = config.get('objects') or []
        for raw in raw_objects:
            if not isinstance(raw, dict):
                raw = {}
            objects.append(ObjectConfig(
                initial_position=coerce_float(raw.get('initial_position_m')),
                initial_velocity=coerce_float(raw.get('initial_velocity_m_s')),
                events=EventSequence.build(raw.get('events') or [])
            ))

        diagnostics = section('diagnostics')
        log_level = str(diagnostics.get('log_level', 'INFO'))

        return cls(
            simulation_name=str(config.get('simulation_name', 'kinesim')),
            output_directory=str(config.get('output_directory', './results')),
            step_size=step_size,
            estimator_step_size=estimator_step_size,
            playback_speed=playback_speed,
            frame_interval_ms=frame_interval_ms,
            objects=objects,
            log_level=log_level
        )

    def __repr__(self):
        """Human-readable representation."""
        lines = [
            f"Simulation: {self.simulation_name}",
            f"Objects: {len(self.objects)} configured",
        ]
        for obj in self.objects:
            lines.append(f"  {obj}")
        lines.extend([
            f"Duration: {self.max_duration:.2f} s",
            f"Timestep: {self.step_size:.4f} s",
            f"Playback speed: {self.playback_speed:.1f}x",
        ])
        return "\n".join(lines)
