"""
Rendering collaborator: position and velocity charts.

This module provides:
- A colour palette keyed by stable object id
- Static position-vs-time and velocity-vs-time charts (PNG)
- Animated playback (GIF) where each animation frame drives one tick

The engine never depends on this module; it only reads the controller's
traces, status and axis limits.
"""

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend for saving files
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from typing import Optional

from kinesim import constants as const
from kinesim.controller import SimulationController, SimulationStatus
from kinesim.runner import expected_ticks
from kinesim.scheduling import TickCallback, TickDriver


COLOR_PALETTE = ["red", "cyan", "lime", "yellow", "magenta", "orange"]

BACKGROUND = "#222"
GRID_COLOR = "#444"
TEXT_COLOR = "#ccc"

plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['legend.fontsize'] = 10


def color_for(object_id: int) -> str:
    """Display colour for an object; the same id always gets the same colour."""
    return COLOR_PALETTE[object_id % len(COLOR_PALETTE)]


def object_label(object_id: int) -> str:
    return f"Object {object_id + 1}"


def _style_axes(ax, ylabel: str):
    ax.set_facecolor(BACKGROUND)
    ax.set_xlabel('Time (s)', color=TEXT_COLOR)
    ax.set_ylabel(ylabel, color=TEXT_COLOR)
    ax.tick_params(colors=TEXT_COLOR)
    ax.grid(True, color=GRID_COLOR)
    for spine in ax.spines.values():
        spine.set_color(GRID_COLOR)


def _create_figure(controller: SimulationController):
    """Two stacked panels with axis limits from the range estimate."""
    fig, (ax_pos, ax_vel) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)
    fig.patch.set_facecolor(BACKGROUND)

    _style_axes(ax_pos, 'Position (m)')
    _style_axes(ax_vel, 'Velocity (m/s)')

    limits = controller.axis_limits()
    if limits['max_time'] > limits['min_time']:
        ax_pos.set_xlim(limits['min_time'], limits['max_time'])
    ax_pos.set_ylim(limits['min_position'], limits['max_position'])

    return fig, ax_pos, ax_vel


def _legend(ax):
    if ax.get_legend_handles_labels()[0]:
        legend = ax.legend(facecolor=BACKGROUND, edgecolor=GRID_COLOR)
        for text in legend.get_texts():
            text.set_color(TEXT_COLOR)


def plot_traces(controller: SimulationController, output_path: str, title: Optional[str] = None):
    """
    Plot every object's position and velocity trace.

    Args:
        controller: Controller holding the traces
        output_path: Path to save PNG plot
        title: Optional figure title

    Creates two panels sharing the time axis:
    - Top: position vs time
    - Bottom: velocity vs time
    """
    fig, ax_pos, ax_vel = _create_figure(controller)

    for state in controller.objects:
        if not state.trace:
            continue
        color = color_for(state.id)
        label = object_label(state.id)
        ax_pos.plot(state.times, state.positions, '-o', color=color, markersize=2, label=label)
        ax_vel.plot(state.times, state.velocities, '-o', color=color, markersize=2, label=label)

    _legend(ax_pos)
    _legend(ax_vel)

    if title:
        fig.suptitle(title, color=TEXT_COLOR)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight', facecolor=BACKGROUND)
    plt.close(fig)


class FrameTickDriver(TickDriver):
    """
    Driver fed by an animation's frame callback.

    Every animation frame calls on_frame(), which runs the pending tick
    (if any). A stopped simulation simply leaves later frames static.
    """

    def __init__(self, speed: float = const.DEFAULT_PLAYBACK_SPEED):
        super().__init__(speed)
        self._callback: Optional[TickCallback] = None

    def request_next_tick(self, callback: TickCallback):
        self._callback = callback

    def cancel(self):
        self._callback = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def on_frame(self) -> bool:
        callback = self._callback
        if callback is None:
            return False
        self._callback = None
        callback()
        return True


def animate_simulation(
    controller: SimulationController,
    output_path: str,
    base_interval_ms: float = const.DEFAULT_FRAME_INTERVAL_MS,
    max_frames: Optional[int] = None
) -> int:
    """
    Play the controller frame by frame and save the animation as a GIF.

    The controller must use a FrameTickDriver. Playback speed changes the
    frame rate of the saved animation, never the integration step.

    Args:
        controller: Controller to play (a fresh run is started if not running)
        output_path: Path to save GIF animation
        base_interval_ms: Frame interval at speed 1.0 [ms]
        max_frames: Optional cap on frames

    Returns:
        Number of frames written
    """
    driver = controller.driver
    if not isinstance(driver, FrameTickDriver):
        raise TypeError("animate_simulation needs a controller driven by a FrameTickDriver")

    if controller.status != SimulationStatus.RUNNING:
        controller.play()

    n_frames = expected_ticks(controller) + 1
    if max_frames is not None:
        n_frames = min(n_frames, max_frames)

    fig, ax_pos, ax_vel = _create_figure(controller)

    lines = {}
    for state in controller.objects:
        color = color_for(state.id)
        label = object_label(state.id)
        pos_line, = ax_pos.plot([], [], '-o', color=color, markersize=2, label=label)
        vel_line, = ax_vel.plot([], [], '-o', color=color, markersize=2, label=label)
        lines[state.id] = (pos_line, vel_line)

    _legend(ax_pos)
    _legend(ax_vel)
    status_text = ax_pos.text(0.02, 0.95, '', transform=ax_pos.transAxes,
                              color=TEXT_COLOR, va='top')

    def init():
        return [status_text]

    def update(frame):
        driver.on_frame()
        artists = [status_text]
        for state in controller.objects:
            if state.id not in lines:
                continue
            pos_line, vel_line = lines[state.id]
            pos_line.set_data(state.times, state.positions)
            vel_line.set_data(state.times, state.velocities)
            artists.extend([pos_line, vel_line])
        # Velocity range is not estimated up front
        ax_vel.relim()
        ax_vel.autoscale_view(scalex=False)
        status_text.set_text(f"t = {controller.sim_time:.2f} s ({controller.status.value})")
        return artists

    interval_ms = driver.frame_interval_ms(base_interval_ms)
    fps = max(1, int(round(1000.0 / interval_ms)))

    anim = FuncAnimation(fig, update, frames=n_frames, init_func=init,
                         interval=interval_ms, blit=False)
    anim.save(output_path, writer=PillowWriter(fps=fps))
    plt.close(fig)

    return n_frames

