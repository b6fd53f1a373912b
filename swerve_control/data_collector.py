"""Data collection and CSV logging for swerve control runs.

This module provides CSV data logging for:
- Pose data (estimated pose from odometry, true pose from the simulator)
- Commanded chassis twists and controller errors
- Per-module setpoints (speed and angle for every module)
- Run summary (outcome, cycle count, final errors)
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, TextIO

from .config import TERM_BLUE, TERM_RESET
from .geometry import Pose, Twist
from .kinematics import ModuleState


class DataCollector:
    """Manages CSV file creation and logging for swerve control data.

    This class handles all data logging responsibilities:
    - Creates timestamped output directories
    - Initializes CSV files with headers
    - Writes pose, command, and module data each cycle
    - Ensures proper cleanup on shutdown

    Attributes:
        run_dir: Directory path for this run's output files.
        num_modules: Number of modules logged per row in module_data.csv.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None, num_modules: int = 4) -> None:
        """Initialize the data collector.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates timestamped
                directory. Can also be set via RUN_DIR environment variable.
            num_modules: Number of swerve modules to log.

        Raises:
            ValueError: If output_dir is not a valid directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.num_modules = num_modules

        # CSV file handles
        self.pose_csv_file: Optional[TextIO] = None
        self.pose_csv_writer: Any = None
        self.command_csv_file: Optional[TextIO] = None
        self.command_csv_writer: Any = None
        self.module_csv_file: Optional[TextIO] = None
        self.module_csv_writer: Any = None

        # Determine run directory
        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # Create timestamped directory: results/run_YYYYMMDD_HHMMSS/
            from swerve_control import config as cfg

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / cfg.RESULTS_DIR / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        # Define output file paths
        self.pose_output_path: Path = self.run_dir / "pose_data.csv"
        self.command_output_path: Path = self.run_dir / "command_data.csv"
        self.module_output_path: Path = self.run_dir / "module_data.csv"
        self.summary_output_path: Path = self.run_dir / "summary.txt"

    def setup(self) -> None:
        """Initialize CSV files with headers.

        Creates and opens all CSV files with appropriate column headers.
        Must be called before writing data.
        """
        self.pose_csv_file = open(self.pose_output_path, "w", newline="")
        self.pose_csv_writer = csv.writer(self.pose_csv_file)
        self.pose_csv_writer.writerow(
            ["time", "x_est", "y_est", "heading_est", "x_true", "y_true", "heading_true"]
        )

        self.command_csv_file = open(self.command_output_path, "w", newline="")
        self.command_csv_writer = csv.writer(self.command_csv_file)
        self.command_csv_writer.writerow(
            ["time", "vx", "vy", "omega", "distance_error", "heading_error"]
        )

        module_headers = ["time"]
        for i in range(self.num_modules):
            module_headers += [f"speed_{i}", f"angle_{i}"]
        self.module_csv_file = open(self.module_output_path, "w", newline="")
        self.module_csv_writer = csv.writer(self.module_csv_file)
        self.module_csv_writer.writerow(module_headers)

        logging.info(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}{TERM_RESET}")

    def log_pose(self, time: float, estimated: Pose, true: Optional[Pose] = None) -> None:
        """Log estimated (and optionally true) pose to CSV.

        Args:
            time: Elapsed run time (seconds).
            estimated: Odometry pose estimate.
            true: Ground-truth pose, if known.
        """
        row = [time, estimated.x, estimated.y, estimated.heading]
        row += [true.x, true.y, true.heading] if true is not None else ["", "", ""]
        self.pose_csv_writer.writerow(row)

    def log_command(self, time: float, twist: Twist, diagnostics: Optional[Dict[str, float]] = None) -> None:
        """Log a commanded twist and optional controller errors to CSV.

        Args:
            time: Elapsed run time (seconds).
            twist: Robot-relative commanded twist.
            diagnostics: Controller diagnostics with keys 'distance_error'
                and 'heading_error'.
        """
        diagnostics = diagnostics or {}
        self.command_csv_writer.writerow(
            [
                time,
                twist.vx,
                twist.vy,
                twist.omega,
                diagnostics.get("distance_error", ""),
                diagnostics.get("heading_error", ""),
            ]
        )

    def log_modules(self, time: float, states: Sequence[ModuleState]) -> None:
        """Log one setpoint per module to CSV.

        Raises:
            ValueError: If the number of states differs from num_modules.
        """
        if len(states) != self.num_modules:
            raise ValueError(f"Expected {self.num_modules} module states, got {len(states)}")

        row = [time]
        for state in states:
            row += [state.speed, state.angle]
        self.module_csv_writer.writerow(row)

    def log_summary(self, summary: Dict[str, Any]) -> None:
        """Write the run summary as key: value lines."""
        with open(self.summary_output_path, "w") as f:
            for key, value in summary.items():
                f.write(f"{key}: {value}\n")

    def cleanup(self) -> None:
        """Close all CSV files and log final output location."""
        for handle in (self.pose_csv_file, self.command_csv_file, self.module_csv_file):
            if handle:
                handle.close()

        logging.info(f"{TERM_BLUE}✓ Saved run data to {self.run_dir}{TERM_RESET}")

    def __enter__(self) -> "DataCollector":
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
