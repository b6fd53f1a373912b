#!/usr/bin/env python3
"""
Plot the outcome of simulated drive-to-position runs.

This module loads the CSV files written by DataCollector and generates a
trajectory plot (estimated vs true path) and an error-over-time plot
(distance and heading error, commanded linear speed).
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .config import PLOT_BLUE, PLOT_ORANGE, PLOT_TAUPE, RESULTS_DIR, TERM_BLUE, TERM_RESET


def load_csv_to_dict(csv_path: Path) -> Dict[str, np.ndarray]:
    """Load CSV file into dictionary of numpy arrays.

    Non-numeric or empty values become NaN.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        data: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                try:
                    data[key].append(float(value))
                except (ValueError, TypeError):
                    data[key].append(np.nan)

    return {key: np.array(values) for key, values in data.items()}


def plot_trajectory(pose_data: Dict[str, np.ndarray], save_path: Optional[Path] = None) -> Figure:
    """Plot estimated and true robot paths in the field frame.

    Args:
        pose_data: Columns of pose_data.csv.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, ax = plt.subplots(figsize=(8, 8))

    ax.plot(pose_data["x_est"], pose_data["y_est"], color=PLOT_ORANGE, linewidth=2, label="Odometry")
    if not np.all(np.isnan(pose_data["x_true"])):
        ax.plot(
            pose_data["x_true"],
            pose_data["y_true"],
            color=PLOT_BLUE,
            linestyle="--",
            linewidth=1.5,
            label="True",
        )

    # Heading arrows every ~25 samples
    step = max(1, len(pose_data["time"]) // 25)
    ax.quiver(
        pose_data["x_est"][::step],
        pose_data["y_est"][::step],
        np.cos(pose_data["heading_est"][::step]),
        np.sin(pose_data["heading_est"][::step]),
        color=PLOT_TAUPE,
        width=0.003,
    )

    ax.set_title("Drive to Position Trajectory", fontweight="bold")
    ax.set_xlabel("X (m)")
    ax.set_ylabel("Y (m)")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, alpha=0.3, linestyle="--", linewidth=0.5)
    ax.legend(loc="best", framealpha=0.9, edgecolor=PLOT_TAUPE)

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        logging.info(f"Saved figure to {save_path}")

    return fig


def plot_errors(command_data: Dict[str, np.ndarray], save_path: Optional[Path] = None) -> Figure:
    """Plot controller errors and commanded speed over time.

    Args:
        command_data: Columns of command_data.csv.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, (ax_dist, ax_heading, ax_speed) = plt.subplots(3, 1, figsize=(10, 9), sharex=True)
    t = command_data["time"]

    ax_dist.plot(t, command_data["distance_error"] * 1000.0, color=PLOT_ORANGE)
    ax_dist.set_ylabel("Distance error (mm)")
    ax_dist.set_title("Drive to Position Errors", fontweight="bold")

    ax_heading.plot(t, np.degrees(command_data["heading_error"]), color=PLOT_BLUE)
    ax_heading.set_ylabel("Heading error (°)")

    ax_speed.plot(t, np.hypot(command_data["vx"], command_data["vy"]), color=PLOT_ORANGE, label="|v|")
    ax_speed.plot(t, command_data["omega"], color=PLOT_BLUE, label="ω")
    ax_speed.set_ylabel("Command")
    ax_speed.set_xlabel("Time (s)")
    ax_speed.legend(loc="best", framealpha=0.9, edgecolor=PLOT_TAUPE)

    for ax in (ax_dist, ax_heading, ax_speed):
        ax.grid(True, alpha=0.3, linestyle="--", linewidth=0.5)

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        logging.info(f"Saved figure to {save_path}")

    return fig


def plot_run_summary(run_dir: Path, save_plots: bool = False, show_plots: bool = True) -> None:
    """Generate all plots for one run directory.

    Raises:
        FileNotFoundError: If the run's CSV files are missing.
    """
    pose_data = load_csv_to_dict(run_dir / "pose_data.csv")
    command_data = load_csv_to_dict(run_dir / "command_data.csv")

    plot_trajectory(pose_data, run_dir / "trajectory.png" if save_plots else None)
    plot_errors(command_data, run_dir / "errors.png" if save_plots else None)

    if show_plots:
        plt.show()
    else:
        plt.close("all")


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Raises:
        FileNotFoundError: If no run directories are found.
    """
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        raise FileNotFoundError(f"No run directories found in {results_dir}")

    return run_dirs[-1]


def list_available_runs(results_dir: Path) -> None:
    """Log all available run directories."""
    if not results_dir.exists():
        logging.error(f"Results directory not found: {results_dir}")
        return

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        logging.info(f"No run directories found in {results_dir}")
        return

    logging.info("Available runs:")
    for i, run_dir in enumerate(run_dirs, 1):
        logging.info(f"  {i}. {run_dir.name}")


def main(argv=None) -> int:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Visualize simulated drive-to-position runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m swerve_control.plot_results

  # Plot a specific run and save figures without showing them
  python -m swerve_control.plot_results --run run_20261019_101500 --save --no-show
        """,
    )
    parser.add_argument("--run", type=str, default=None, help="Run directory name (default: latest)")
    parser.add_argument(
        "--results-dir", type=str, default=RESULTS_DIR, help="Results directory (default: results)"
    )
    parser.add_argument("--save", action="store_true", help="Save plots as PNG files in the run directory")
    parser.add_argument("--no-show", action="store_true", help="Do not display plots interactively")
    parser.add_argument("--list", action="store_true", help="List all available runs and exit")
    args = parser.parse_args(argv)

    results_dir = Path(args.results_dir)

    if args.list:
        list_available_runs(results_dir)
        return 0

    if args.run:
        run_dir = results_dir / args.run
        if not run_dir.exists():
            logging.error(f"Error: Run directory not found: {run_dir}")
            list_available_runs(results_dir)
            return 1
    else:
        try:
            run_dir = find_latest_run(results_dir)
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            return 1

    try:
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        logging.info(f"Make sure {run_dir} contains pose_data.csv and command_data.csv")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
