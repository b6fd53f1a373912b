"""Swerve drive kinematics.

This module provides the bidirectional mapping between a chassis twist and
the per-module states of a swerve drive:
- Inverse kinematics: twist -> module speed/angle targets
- Forward kinematics: measured module states -> least-squares chassis twist
- Field-relative / robot-relative twist conversion

For module i at offset (x_i, y_i) from the center of rotation:
    vx_i = vx - omega * y_i
    vy_i = vy + omega * x_i
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .geometry import Twist


@dataclass(frozen=True)
class ModuleState:
    """Commanded or measured state of one swerve module.

    A negative speed drives backward through the same angle, which is
    physically equivalent to the positive speed at angle + pi.

    Attributes:
        speed: Drive velocity magnitude (m/s), sign preserved
        angle: Steering direction (rad)
    """

    speed: float = 0.0
    angle: float = 0.0

    def velocity_components(self) -> Tuple[float, float]:
        """Module velocity vector (vx_i, vy_i) in the robot frame."""
        return self.speed * math.cos(self.angle), self.speed * math.sin(self.angle)


@dataclass(frozen=True)
class ModuleGeometry:
    """Module contact point offset from the robot's center of rotation (m)."""

    x: float
    y: float


class SwerveKinematics:
    """Kinematic model of a swerve drive with a fixed module layout.

    The model is stateless apart from the module geometry, so a single
    instance can serve commands and odometry at the same time.

    Attributes:
        geometries: Ordered module offsets (geometry order is the order of
            every module state sequence)
        num_modules: Number of configured modules
    """

    MIN_MODULES = 3

    def __init__(self, geometries: Sequence[ModuleGeometry], zero_speed_epsilon: Optional[float] = None):
        """Initialize the kinematic model.

        Args:
            geometries: Module offsets from the center of rotation, in
                command/feedback order.
            zero_speed_epsilon: Speed below which a module holds its previous
                angle. If None, uses config.ZERO_SPEED_EPSILON.

        Raises:
            ValueError: If fewer than three modules are given or the module
                positions are collinear.
        """
        if zero_speed_epsilon is None:
            from swerve_control import config as cfg

            zero_speed_epsilon = cfg.ZERO_SPEED_EPSILON

        self.geometries = tuple(geometries)
        self.num_modules = len(self.geometries)
        self.zero_speed_epsilon = zero_speed_epsilon

        if self.num_modules < self.MIN_MODULES:
            raise ValueError(
                f"Swerve kinematics needs at least {self.MIN_MODULES} modules, got {self.num_modules}"
            )

        positions = np.array([[g.x, g.y] for g in self.geometries], dtype=float)

        # Module positions must span the plane (centered rank 2)
        centered = positions - positions.mean(axis=0)
        if np.linalg.matrix_rank(centered, tol=1e-9) < 2:
            raise ValueError(f"Module positions are collinear: {positions.tolist()}")

        # Stacked model: [vx_i, vy_i]^T = A_i @ [vx, vy, omega]^T
        self._inverse_matrix = np.zeros((2 * self.num_modules, 3))
        for i, (x, y) in enumerate(positions):
            self._inverse_matrix[2 * i] = [1.0, 0.0, -y]
            self._inverse_matrix[2 * i + 1] = [0.0, 1.0, x]

        # Pseudo-inverse gives the least-squares twist, best effort when near singular
        self._forward_matrix = np.linalg.pinv(self._inverse_matrix)

    @classmethod
    def from_positions(cls, positions: Sequence[Sequence[float]]) -> "SwerveKinematics":
        """Build a model from plain (x, y) tuples, e.g. config.MODULE_POSITIONS."""
        return cls([ModuleGeometry(float(x), float(y)) for x, y in positions])

    def _check_length(self, count: int, what: str) -> None:
        if count != self.num_modules:
            raise ValueError(f"Expected {self.num_modules} {what}, got {count}")

    def to_module_states(
        self, twist: Twist, previous_angles: Optional[Sequence[float]] = None
    ) -> List[ModuleState]:
        """Convert a robot-relative chassis twist into module states.

        Args:
            twist: Robot-relative chassis velocity
            previous_angles: Last commanded angle of each module (rad). A module
                with zero speed keeps this angle; defaults to 0.0 when None.

        Returns:
            Module states in geometry order

        Raises:
            ValueError: If previous_angles has the wrong length
        """
        if previous_angles is not None:
            self._check_length(len(previous_angles), "previous module angles")

        chassis = np.array([twist.vx, twist.vy, twist.omega])
        module_velocities = (self._inverse_matrix @ chassis).reshape(self.num_modules, 2)

        states = []
        for i, (vx_i, vy_i) in enumerate(module_velocities):
            speed = math.hypot(vx_i, vy_i)
            if speed < self.zero_speed_epsilon:
                angle = previous_angles[i] if previous_angles is not None else 0.0
                states.append(ModuleState(0.0, angle))
            else:
                states.append(ModuleState(speed, math.atan2(vy_i, vx_i)))

        return states

    def to_twist(self, module_states: Sequence[ModuleState]) -> Twist:
        """Solve for the chassis twist that best explains the module states.

        Uses the least-squares (pseudo-inverse) solution that minimizes the
        squared residual across all module velocity vectors.

        Args:
            module_states: Measured module states in geometry order

        Returns:
            Robot-relative chassis twist

        Raises:
            ValueError: If the number of states does not match the module count
        """
        self._check_length(len(module_states), "module states")

        module_velocities = np.array(
            [state.velocity_components() for state in module_states], dtype=float
        ).reshape(-1)
        vx, vy, omega = self._forward_matrix @ module_velocities

        return Twist(float(vx), float(vy), float(omega))


def field_to_robot(twist: Twist, heading: float) -> Twist:
    """Convert a field-relative twist to robot-relative using heading (rad)."""
    return Twist.from_field_relative(twist.vx, twist.vy, twist.omega, heading)


def robot_to_field(twist: Twist, heading: float) -> Twist:
    """Convert a robot-relative twist to field-relative using heading (rad)."""
    return twist.to_field_relative(heading)
