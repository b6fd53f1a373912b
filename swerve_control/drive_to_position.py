"""Drive-to-position control mode.

Runs the pose controller against the drivetrain's pose estimate every cycle
and decides when the target has been reached. The target pose is supplied by
the caller; the controller itself stays stateless.
"""

import logging
import math
from typing import Optional

from .controller import PoseController, heading_error
from .drivetrain import Drivetrain
from .geometry import Pose, Twist


class DriveToPosition:
    """Drive the robot to a target pose until within tolerance.

    Usage from a fixed-rate loop:
        mode.initialize()
        each cycle: drivetrain.periodic(); if mode.is_finished(): break; mode.execute()
        mode.end(interrupted)

    Cancelling is done by the caller simply not calling execute() again.
    """

    def __init__(
        self,
        drivetrain: Drivetrain,
        target_pose: Pose,
        target_linear_speed: Optional[float] = None,
        target_heading: Optional[float] = None,
        controller: Optional[PoseController] = None,
        position_tolerance: Optional[float] = None,
        heading_tolerance: Optional[float] = None,
    ):
        """Initialize the mode.

        Args:
            drivetrain: Drivetrain to command
            target_pose: Field pose to drive to
            target_linear_speed: Approach speed (m/s). If None, uses
                config.DRIVE_TO_POSITION_SPEED.
            target_heading: Final heading (rad). Defaults to target_pose.heading.
            controller: Pose controller. If None, one is built from config gains.
            position_tolerance: Finished when the translation error is at most
                this (m). If None, uses config.POSITION_TOLERANCE.
            heading_tolerance: Finished when the heading error is at most
                this (rad). If None, uses config.HEADING_TOLERANCE.
        """
        from swerve_control import config as cfg

        self.drivetrain = drivetrain
        self.target_pose = target_pose
        self.target_linear_speed = (
            cfg.DRIVE_TO_POSITION_SPEED if target_linear_speed is None else target_linear_speed
        )
        self.target_heading = target_pose.heading if target_heading is None else target_heading
        self.controller = controller if controller is not None else PoseController(period=drivetrain.period)
        self.position_tolerance = (
            cfg.POSITION_TOLERANCE if position_tolerance is None else position_tolerance
        )
        self.heading_tolerance = cfg.HEADING_TOLERANCE if heading_tolerance is None else heading_tolerance

        self.last_twist = Twist()

    def initialize(self) -> None:
        logging.info(
            f"Driving to ({self.target_pose.x:.3f}, {self.target_pose.y:.3f}, "
            f"{math.degrees(self.target_heading):.1f}°) at {self.target_linear_speed:.2f} m/s"
        )

    def execute(self) -> Twist:
        """Run one controller step and command the drivetrain.

        Returns:
            Robot-relative twist sent to the drivetrain
        """
        self.last_twist = self.controller.calculate(
            self.drivetrain.pose, self.target_pose, self.target_linear_speed, self.target_heading
        )
        # Controller output is robot-relative
        self.drivetrain.drive(self.last_twist, field_relative=False, is_open_loop=False)
        return self.last_twist

    def is_finished(self) -> bool:
        """True once both translation and heading errors are within tolerance."""
        pose = self.drivetrain.pose
        distance = pose.translation_distance(self.target_pose)
        angle = abs(heading_error(pose, self.target_heading))
        return distance <= self.position_tolerance and angle <= self.heading_tolerance

    def end(self, interrupted: bool) -> None:
        self.drivetrain.stop()
        pose = self.drivetrain.pose
        if interrupted:
            logging.warning(
                f"Drive to position interrupted at ({pose.x:.3f}, {pose.y:.3f}, "
                f"{pose.heading_degrees:.1f}°)"
            )
        else:
            logging.info(
                f"Reached ({pose.x:.3f}, {pose.y:.3f}, {pose.heading_degrees:.1f}°)"
            )
