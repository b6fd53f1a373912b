"""Odometry module for swerve drive pose estimation.

This module provides dead-reckoning pose estimation from swerve module
feedback and a heading sensor:
- Module states are converted to a chassis twist each cycle (forward kinematics)
- The twist is integrated over one control period with the planar exponential map
- The heading sensor is authoritative: the integrated heading is replaced by
  the sensor reading every update, so wheel-slip heading drift never builds up
"""

import logging
from typing import Optional, Sequence

from .geometry import Pose, wrap_angle
from .kinematics import ModuleState, SwerveKinematics


class SwerveOdometry:
    """Pose estimator integrating module feedback and heading readings.

    The estimator is a single-writer state holder: only update() and
    reset_pose() change the pose, once per control cycle. Readers within a
    cycle see the pose produced by the most recent update.

    Attributes:
        kinematics: Kinematic model used to convert module states to a twist
        period: Control cycle duration each update integrates over (seconds)
    """

    def __init__(
        self,
        kinematics: SwerveKinematics,
        initial_heading: float,
        initial_pose: Optional[Pose] = None,
        period: Optional[float] = None,
    ):
        """Initialize the odometry in the tracking state.

        Args:
            kinematics: Kinematic model matching the module feedback layout
            initial_heading: Heading sensor reading at construction (rad)
            initial_pose: Starting field pose. Defaults to the origin.
            period: Control period (seconds). If None, uses config.CONTROL_PERIOD.

        Raises:
            ValueError: If period is not positive.
        """
        if period is None:
            from swerve_control import config as cfg

            period = cfg.CONTROL_PERIOD

        if period <= 0:
            raise ValueError(f"Odometry period must be positive, got {period}")

        self.kinematics = kinematics
        self.period = period

        # Odometry state: current estimate and heading baseline
        self._pose = initial_pose if initial_pose is not None else Pose()
        self._last_heading = wrap_angle(initial_heading)

    @property
    def pose(self) -> Pose:
        """Current pose estimate."""
        return self._pose

    @property
    def last_heading(self) -> float:
        """Heading sensor reading captured at the last update or reset (rad)."""
        return self._last_heading

    def update(self, heading: float, module_states: Sequence[ModuleState]) -> Pose:
        """Advance the pose estimate by one control cycle.

        Args:
            heading: Heading sensor reading for this cycle (rad)
            module_states: Measured module states in geometry order

        Returns:
            New pose estimate

        Raises:
            ValueError: If module_states does not match the configured modules.
                Raised before any state is modified.
        """
        twist = self.kinematics.to_twist(module_states)

        # Arc rotation from the sensor, translation from the wheels
        dtheta = wrap_angle(heading - self._last_heading)
        integrated = self._pose.exp(twist.vx * self.period, twist.vy * self.period, dtheta)

        self._pose = integrated.with_heading(heading)
        self._last_heading = wrap_angle(heading)

        logging.debug(
            f"Odometry: twist=({twist.vx:.3f}, {twist.vy:.3f}, {twist.omega:.3f}) "
            f"pose=({self._pose.x:.3f}, {self._pose.y:.3f}, {self._pose.heading_degrees:.1f}°)"
        )

        return self._pose

    def reset_pose(self, pose: Pose, heading: float) -> None:
        """Discard integration history and restart from a known pose.

        Args:
            pose: New field pose
            heading: Heading sensor reading at reset time (rad)
        """
        self._pose = pose
        self._last_heading = wrap_angle(heading)
        logging.info(
            f"Odometry reset to ({pose.x:.3f}, {pose.y:.3f}, {pose.heading_degrees:.1f}°)"
        )
