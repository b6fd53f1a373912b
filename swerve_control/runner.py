"""
Fixed-rate control loop runner for drive-to-position in simulation.

This module wires the motion core to the simulated robot and steps the
control cycle at a fixed period, optionally paced to wall-clock time. Each
cycle runs in order: sensor snapshot and odometry update, termination check,
controller step and module commands, data logging, plant step.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import TERM_BLUE, TERM_RESET
from .controller import heading_error
from .data_collector import DataCollector
from .drive_to_position import DriveToPosition
from .drivetrain import Drivetrain
from .geometry import Pose
from .simulation import SimulatedRobot


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    This formatter provides clean console output by showing INFO messages without
    timestamps while preserving full context for WARNING, ERROR, and DEBUG messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        else:
            return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)


class RateKeeper:
    """Keep a loop at a fixed period using a monotonic clock.

    keep_time() sleeps for whatever is left of the current frame and warns
    when the loop is running late.
    """

    def __init__(self, period: float, clock=time.monotonic, late_threshold: float = 0.01):
        if period <= 0.0:
            raise ValueError("period must be positive")
        self.period = period
        self.clock = clock
        self.late_threshold = late_threshold
        self.frame = 0
        self._next = self.clock() + self.period

    def monitor_time(self) -> float:
        """Advance one frame and return the remaining seconds (negative if late)."""
        remaining = self._next - self.clock()
        if remaining < -self.late_threshold:
            logging.warning(f"Control loop lagging by {-remaining * 1000:.2f} ms (frame {self.frame})")
        self._next += self.period
        self.frame += 1
        return remaining

    def keep_time(self) -> None:
        remaining = self.monitor_time()
        if remaining > 0.0:
            time.sleep(remaining)


@dataclass
class RunResult:
    """Outcome of a simulated drive to position."""

    finished: bool
    cycles: int
    estimated_pose: Pose
    true_pose: Pose
    distance_error: float
    heading_error: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finished": self.finished,
            "cycles": self.cycles,
            "x_est": round(self.estimated_pose.x, 6),
            "y_est": round(self.estimated_pose.y, 6),
            "heading_est_deg": round(self.estimated_pose.heading_degrees, 4),
            "x_true": round(self.true_pose.x, 6),
            "y_true": round(self.true_pose.y, 6),
            "heading_true_deg": round(self.true_pose.heading_degrees, 4),
            "distance_error": round(self.distance_error, 6),
            "heading_error_deg": round(math.degrees(self.heading_error), 4),
        }


class SimulationRunner:
    """Runs drive to position against the simulated robot.

    Attributes:
        robot: Simulated plant
        drivetrain: Drivetrain wired to the simulated modules and gyro
        mode: Drive-to-position mode being executed
        max_cycles: Cycle limit before the run is treated as interrupted
        realtime: Pace the loop to wall-clock time
        data_collector: Optional CSV logger (must already be set up)
    """

    def __init__(
        self,
        target_pose: Pose,
        target_linear_speed: Optional[float] = None,
        initial_pose: Optional[Pose] = None,
        max_cycles: Optional[int] = None,
        realtime: bool = False,
        data_collector: Optional[DataCollector] = None,
    ) -> None:
        from swerve_control import config as cfg

        initial_pose = initial_pose if initial_pose is not None else Pose()

        self.robot = SimulatedRobot(initial_pose=initial_pose, gyro_inverted=cfg.GYRO_INVERT)
        self.drivetrain = Drivetrain(
            self.robot.modules,
            self.robot.gyro,
            kinematics=self.robot.kinematics,
            initial_pose=initial_pose,
        )
        self.mode = DriveToPosition(self.drivetrain, target_pose, target_linear_speed)
        self.max_cycles = cfg.SIM_MAX_CYCLES if max_cycles is None else max_cycles
        self.realtime = realtime
        self.data_collector = data_collector

    def run(self) -> RunResult:
        """Run the control loop until the target is reached or cycles run out.

        Returns:
            RunResult describing the final state
        """
        period = self.drivetrain.period
        rate_keeper = RateKeeper(period) if self.realtime else None
        finished = False
        cycles = 0

        self.mode.initialize()

        while cycles < self.max_cycles:
            self.drivetrain.periodic()

            if self.mode.is_finished():
                finished = True
                break

            twist = self.mode.execute()

            # Estimate and true pose both describe the start of this cycle
            if self.data_collector is not None:
                elapsed = cycles * period
                diagnostics = self.mode.controller.get_diagnostics(
                    self.drivetrain.pose, self.mode.target_pose, self.mode.target_heading
                )
                self.data_collector.log_pose(elapsed, self.drivetrain.pose, self.robot.true_pose)
                self.data_collector.log_command(elapsed, twist, diagnostics)
                self.data_collector.log_modules(elapsed, self.drivetrain.get_module_states())

            self.robot.step()
            cycles += 1

            if rate_keeper is not None:
                rate_keeper.keep_time()

        self.mode.end(interrupted=not finished)

        pose = self.drivetrain.pose
        result = RunResult(
            finished=finished,
            cycles=cycles,
            estimated_pose=pose,
            true_pose=self.robot.true_pose,
            distance_error=pose.translation_distance(self.mode.target_pose),
            heading_error=heading_error(pose, self.mode.target_heading),
        )

        logging.info(
            f"{TERM_BLUE}{'Finished' if finished else 'Stopped'} after {cycles} cycles "
            f"({cycles * period:.2f}s), error {result.distance_error * 1000:.1f} mm / "
            f"{math.degrees(result.heading_error):.2f}°{TERM_RESET}"
        )

        if self.data_collector is not None:
            self.data_collector.log_summary(result.to_dict())

        return result
