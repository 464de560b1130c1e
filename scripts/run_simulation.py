"""
Main simulation runner script.

Usage:
    python scripts/run_simulation.py configs/baseline_config.yaml

This script:
1. Loads configuration from YAML file
2. Builds the controller and its objects
3. Runs the simulation with progress bar
4. Prints a per-object summary
5. Saves position/velocity charts (and optionally an animation)
"""

import sys
import argparse
import time
from pathlib import Path

# Add src to path so we can import kinesim package
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from kinesim.config import SimulationParameters
from kinesim.logging_config import setup_logging
from kinesim.runner import run_simulation
from kinesim.analysis import summarize_run
from kinesim.visualization import FrameTickDriver, animate_simulation, plot_traces


def main():
    parser = argparse.ArgumentParser(
        description='Run point-mass kinematics simulation'
    )
    parser.add_argument(
        'config',
        type=str,
        help='Path to YAML configuration file'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        default=None,
        help='Directory for plots (default: from config)'
    )
    parser.add_argument(
        '--skip-plots',
        action='store_true',
        help='Skip plot generation'
    )
    parser.add_argument(
        '--animate',
        action='store_true',
        help='Also save an animated GIF of the run'
    )

    args = parser.parse_args()

    # Load configuration
    print(f"Loading configuration from {args.config}...")
    params = SimulationParameters.from_yaml(args.config)
    setup_logging(params.log_level)

    problems = [w for w in params.validate() if w.startswith("ERROR")]
    if problems:
        for problem in problems:
            print(f"  {problem}")
        print("Configuration has ERRORS; run scripts/validate_config.py for details.")
        sys.exit(1)

    output_dir = Path(args.output_dir or params.output_directory)

    # Print configuration summary
    print("=" * 70)
    print(f"SIMULATION: {params.simulation_name}")
    print("=" * 70)
    print(params)
    print("=" * 70)
    print()

    # Run simulation
    print("Starting simulation...")
    start_time = time.time()
    controller, stats = run_simulation(params, show_progress=True)
    elapsed_time = time.time() - start_time

    print()
    print("=" * 70)
    print(f"Simulation {stats['status']} after {stats['ticks']} ticks "
          f"(t = {stats['final_time']:.2f} s) in {elapsed_time:.2f} seconds")
    print("=" * 70)
    print()

    # Summarize results
    summary = summarize_run(controller)
    print("QUICK RESULTS SUMMARY")
    print("=" * 70)
    for obj in summary['objects']:
        print(f"Object {obj['id'] + 1}: {obj['n_samples']} samples, "
              f"x = {obj['final_position']:.3f} m, v = {obj['final_velocity']:.3f} m/s, "
              f"displacement {obj['displacement']:.3f} m, peak speed {obj['peak_speed']:.3f} m/s")
    print("=" * 70)
    print()

    if not args.skip_plots:
        print("Generating plots...")
        output_dir.mkdir(parents=True, exist_ok=True)

        plot_path = output_dir / 'traces.png'
        try:
            plot_traces(controller, str(plot_path), title=params.simulation_name)
            print(f"  [OK] {plot_path.name}")
        except Exception as e:
            print(f"  [ERROR] traces: {e}")

        if args.animate:
            gif_path = output_dir / 'traces.gif'
            animated = params.build_controller(driver=FrameTickDriver(params.playback_speed))
            try:
                n_frames = animate_simulation(animated, str(gif_path), params.frame_interval_ms)
                print(f"  [OK] {gif_path.name} ({n_frames} frames)")
            except Exception as e:
                print(f"  [ERROR] animation: {e}")

        print()
        print(f"All outputs saved to: {output_dir}")


if __name__ == "__main__":
    main()
