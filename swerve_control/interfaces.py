"""
Capability interfaces for the hardware the motion core drives and reads.

Any concrete module or heading sensor implementing these methods can be
plugged into the drivetrain, independent of the vendor device classes.
"""

from abc import ABC, abstractmethod

from .kinematics import ModuleState


class SwerveModuleIO(ABC):
    """A swerve module: provides calibrated feedback, accepts setpoints."""

    @abstractmethod
    def get_state(self) -> ModuleState:
        """Return the measured speed (m/s) and calibrated angle (rad)."""

    @abstractmethod
    def set_desired_state(self, state: ModuleState, is_open_loop: bool) -> None:
        """Command a speed and angle, using open or closed loop drive control."""


class HeadingSensor(ABC):
    """Heading source (gyro / IMU yaw)."""

    @abstractmethod
    def get_heading(self) -> float:
        """Return the heading in radians, counter-clockwise positive."""
