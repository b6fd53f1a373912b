"""Frictionless simulation of a swerve robot.

Provides in-memory implementations of the module and heading sensor
interfaces plus a plant that integrates the true pose from the commanded
module states. Modules track their setpoints perfectly, so the simulated
motion is exactly what the kinematics prescribes.
"""

from typing import List, Optional

from .geometry import Pose, wrap_angle
from .interfaces import HeadingSensor, SwerveModuleIO
from .kinematics import ModuleState, SwerveKinematics


class SimulatedSwerveModule(SwerveModuleIO):
    """Module that reports exactly the last commanded state."""

    def __init__(self, initial_angle: float = 0.0) -> None:
        self._state = ModuleState(0.0, initial_angle)
        self.open_loop = False

    def get_state(self) -> ModuleState:
        return self._state

    def set_desired_state(self, state: ModuleState, is_open_loop: bool) -> None:
        self._state = state
        self.open_loop = is_open_loop


class SimulatedGyro(HeadingSensor):
    """Heading sensor reading the plant's true heading.

    Attributes:
        inverted: Report the heading with the opposite sign, as a sensor
            mounted upside down would
    """

    def __init__(self, initial_heading: float = 0.0, inverted: bool = False) -> None:
        self.true_heading = initial_heading
        self.inverted = inverted

    def get_heading(self) -> float:
        reading = wrap_angle(self.true_heading)
        return -reading if self.inverted else reading


class SimulatedRobot:
    """Plant model: integrates the true pose from the modules' states.

    Attributes:
        kinematics: Kinematic model of the simulated chassis
        modules: Simulated modules in geometry order
        gyro: Simulated heading sensor
        true_pose: Ground-truth field pose
        period: Integration step (seconds)
    """

    def __init__(
        self,
        kinematics: Optional[SwerveKinematics] = None,
        initial_pose: Optional[Pose] = None,
        period: Optional[float] = None,
        gyro_inverted: bool = False,
    ) -> None:
        from swerve_control import config as cfg

        if kinematics is None:
            kinematics = SwerveKinematics.from_positions(cfg.MODULE_POSITIONS)

        self.kinematics = kinematics
        self.period = cfg.CONTROL_PERIOD if period is None else period
        self.true_pose = initial_pose if initial_pose is not None else Pose()
        self.modules: List[SimulatedSwerveModule] = [
            SimulatedSwerveModule() for _ in range(kinematics.num_modules)
        ]
        self.gyro = SimulatedGyro(self.true_pose.heading, inverted=gyro_inverted)

    def step(self) -> Pose:
        """Advance the plant by one period using the current module states.

        Returns:
            New true pose
        """
        twist = self.kinematics.to_twist([module.get_state() for module in self.modules])
        self.true_pose = self.true_pose.exp(
            twist.vx * self.period, twist.vy * self.period, twist.omega * self.period
        )
        self.gyro.true_heading = self.true_pose.heading
        return self.true_pose
