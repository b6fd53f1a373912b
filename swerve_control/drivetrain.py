"""Swerve drivetrain: the integration level of the motion core.

This module ties the components together for one robot:
- Samples the heading sensor and module feedback once per cycle (periodic)
- Advances odometry, which it owns exclusively
- Converts operator or controller twists into desaturated module setpoints
- Holds each module's last commanded angle when its speed is zero
"""

import logging
from typing import List, Optional, Sequence

from .desaturation import desaturate_wheel_speeds
from .filters import SlewRateLimiter
from .geometry import Pose, Twist, wrap_angle
from .interfaces import HeadingSensor, SwerveModuleIO
from .kinematics import ModuleState, SwerveKinematics, field_to_robot
from .odometry import SwerveOdometry


class Drivetrain:
    """Swerve drivetrain state holder invoked by an external fixed-rate loop.

    Call order within a control cycle:
        1. periodic() - snapshot sensors, update odometry
        2. drive() / set_module_states() - command the modules

    Field-relative commands are converted with the heading snapshot taken in
    periodic(), i.e. the heading at the start of the current cycle.

    Attributes:
        modules: Module interfaces in geometry order
        heading_sensor: Heading source
        kinematics: Kinematic model of the module layout
        odometry: Pose estimator (written only by this class)
        max_speed: Module speed limit used for desaturation (m/s)
    """

    def __init__(
        self,
        modules: Sequence[SwerveModuleIO],
        heading_sensor: HeadingSensor,
        kinematics: Optional[SwerveKinematics] = None,
        max_speed: Optional[float] = None,
        period: Optional[float] = None,
        gyro_invert: Optional[bool] = None,
        initial_pose: Optional[Pose] = None,
        config=None,
    ):
        """Initialize the drivetrain.

        Args:
            modules: Module interfaces, one per configured module, in geometry order
            heading_sensor: Heading source
            kinematics: Kinematic model. If None, built from config.MODULE_POSITIONS.
            max_speed: Module speed limit (m/s). If None, uses config.MAX_MODULE_SPEED.
            period: Control period (seconds). If None, uses config.CONTROL_PERIOD.
            gyro_invert: Negate heading readings. If None, uses config.GYRO_INVERT.
            initial_pose: Starting pose estimate. Defaults to the origin.
            config: Configuration module or object. If None, uses
                swerve_control.config.

        Raises:
            ValueError: If the module count does not match the kinematics or
                max_speed is not positive.
        """
        if config is None:
            from swerve_control import config as cfg
        else:
            cfg = config

        if kinematics is None:
            kinematics = SwerveKinematics.from_positions(cfg.MODULE_POSITIONS)

        self.modules = list(modules)
        self.heading_sensor = heading_sensor
        self.kinematics = kinematics
        self.max_speed = cfg.MAX_MODULE_SPEED if max_speed is None else max_speed
        self.period = cfg.CONTROL_PERIOD if period is None else period
        self.gyro_invert = cfg.GYRO_INVERT if gyro_invert is None else gyro_invert

        if len(self.modules) != kinematics.num_modules:
            raise ValueError(
                f"Drivetrain has {len(self.modules)} modules but kinematics expects "
                f"{kinematics.num_modules}"
            )
        if self.max_speed <= 0:
            raise ValueError(f"max_speed must be positive, got {self.max_speed}")

        # Operator command shaping
        self.drive_x_limiter = SlewRateLimiter(cfg.DRIVE_RATE_LIMIT, self.period)
        self.drive_y_limiter = SlewRateLimiter(cfg.DRIVE_RATE_LIMIT, self.period)
        self.steer_limiter = SlewRateLimiter(cfg.STEER_RATE_LIMIT, self.period)

        # Software yaw offset set by zero_heading(), heading snapshot for the current cycle
        self._yaw_offset = 0.0
        self._heading = self.get_heading()

        # Start steering from wherever the modules currently point
        self._last_angles: List[float] = [module.get_state().angle for module in self.modules]

        self.odometry = SwerveOdometry(kinematics, self._heading, initial_pose, self.period)

    def _read_sensor(self) -> float:
        heading = self.heading_sensor.get_heading()
        return -heading if self.gyro_invert else heading

    def get_heading(self) -> float:
        """Read the heading sensor, sign-corrected for mounting and zeroed (rad)."""
        return wrap_angle(self._read_sensor() - self._yaw_offset)

    @property
    def heading(self) -> float:
        """Heading snapshot taken at the start of the current cycle (rad)."""
        return self._heading

    @property
    def pose(self) -> Pose:
        """Current pose estimate."""
        return self.odometry.pose

    def get_module_states(self) -> List[ModuleState]:
        """Measured state of each module in geometry order."""
        return [module.get_state() for module in self.modules]

    def periodic(self) -> Pose:
        """Start a control cycle: snapshot sensors and advance odometry.

        Returns:
            Updated pose estimate
        """
        self._heading = self.get_heading()
        return self.odometry.update(self._heading, self.get_module_states())

    def drive(
        self,
        velocity: Twist,
        field_relative: bool,
        is_open_loop: bool = False,
        rate_limited: bool = False,
    ) -> List[ModuleState]:
        """Drive the robot with a chassis velocity.

        Args:
            velocity: Desired translational (m/s) and rotational (rad/s) velocity
            field_relative: True if vx/vy are along field axes, False if
                along the robot's axes
            is_open_loop: Use open loop drive motor control
            rate_limited: Apply the operator slew-rate limiters to the command

        Returns:
            Desaturated module setpoints sent to the modules
        """
        if rate_limited:
            velocity = Twist(
                self.drive_x_limiter.calculate(velocity.vx),
                self.drive_y_limiter.calculate(velocity.vy),
                self.steer_limiter.calculate(velocity.omega),
            )

        if field_relative:
            velocity = field_to_robot(velocity, self._heading)

        states = self.kinematics.to_module_states(velocity, previous_angles=self._last_angles)
        return self._apply(states, is_open_loop)

    def set_module_states(
        self, desired_states: Sequence[ModuleState], is_open_loop: bool = False
    ) -> List[ModuleState]:
        """Directly set the state of each module, desaturating first.

        Args:
            desired_states: One state per module in geometry order
            is_open_loop: Use open loop drive motor control

        Returns:
            Desaturated module setpoints sent to the modules

        Raises:
            ValueError: If the number of states does not match the module count
        """
        if len(desired_states) != len(self.modules):
            raise ValueError(
                f"Expected {len(self.modules)} module states, got {len(desired_states)}"
            )
        return self._apply(desired_states, is_open_loop)

    def _apply(self, states: Sequence[ModuleState], is_open_loop: bool) -> List[ModuleState]:
        states = desaturate_wheel_speeds(states, self.max_speed)

        for module, state in zip(self.modules, states):
            module.set_desired_state(state, is_open_loop)

        self._last_angles = [state.angle for state in states]
        return states

    def stop(self) -> List[ModuleState]:
        """Command zero speed on every module, holding the current angles."""
        self.drive_x_limiter.reset()
        self.drive_y_limiter.reset()
        self.steer_limiter.reset()
        return self.drive(Twist(), field_relative=False)

    def reset_pose(self, pose: Optional[Pose] = None) -> None:
        """Re-zero the pose estimate to a known field pose.

        Args:
            pose: New field pose. Defaults to the origin.
        """
        self._heading = self.get_heading()
        self.odometry.reset_pose(pose if pose is not None else Pose(), self._heading)

    def zero_heading(self) -> None:
        """Make the current heading read as zero and keep odometry consistent with it."""
        self._yaw_offset = self._read_sensor()
        self._heading = self.get_heading()
        current = self.odometry.pose
        self.odometry.reset_pose(current.with_heading(self._heading), self._heading)
        logging.info("Heading sensor zeroed")
