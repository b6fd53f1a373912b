"""Planar geometry types shared by every motion core component.

Angles are radians, lengths meters. Headings are wrapped to (-pi, pi].
"""

import math
from dataclasses import dataclass
from typing import Tuple


def wrap_angle(angle: float) -> float:
    """Wrap an angle to the half-open range (-pi, pi].

    Args:
        angle: Angle in radians

    Returns:
        Equivalent angle in (-pi, pi]
    """
    wrapped = math.atan2(math.sin(angle), math.cos(angle))
    # atan2 returns -pi for the negative half of the branch cut
    if wrapped <= -math.pi:
        return math.pi
    return wrapped


def rotate(x: float, y: float, angle: float) -> Tuple[float, float]:
    """Rotate the vector (x, y) counter-clockwise by angle (radians)."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return x * cos_a - y * sin_a, x * sin_a + y * cos_a


@dataclass(frozen=True)
class Pose:
    """Robot position and orientation in the field frame.

    Attributes:
        x: Field x-coordinate (m)
        y: Field y-coordinate (m)
        heading: Orientation (rad), wrapped to (-pi, pi] on construction
    """

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "heading", wrap_angle(self.heading))

    @classmethod
    def from_degrees(cls, x: float, y: float, heading_deg: float) -> "Pose":
        return cls(x, y, math.radians(heading_deg))

    @property
    def heading_degrees(self) -> float:
        return math.degrees(self.heading)

    def with_heading(self, heading: float) -> "Pose":
        return Pose(self.x, self.y, heading)

    def translation_distance(self, other: "Pose") -> float:
        """Euclidean distance between the translations of two poses (m)."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def relative_to(self, other: "Pose") -> "Pose":
        """Express this pose in the frame of another pose.

        The translation is rotated into the other pose's heading-aligned
        axes; the heading becomes the wrapped heading difference.
        """
        dx, dy = rotate(self.x - other.x, self.y - other.y, -other.heading)
        return Pose(dx, dy, self.heading - other.heading)

    def exp(self, dx: float, dy: float, dtheta: float) -> "Pose":
        """Compose a body-frame displacement onto this pose.

        Uses the exponential map for planar rigid motion: the displacement
        (dx, dy) is travelled along a circular arc that rotates the body by
        dtheta, so constant-curvature motion integrates exactly over one step.

        Args:
            dx: Forward displacement in the body frame (m)
            dy: Leftward displacement in the body frame (m)
            dtheta: Rotation over the step (rad)

        Returns:
            New pose after the displacement
        """
        if abs(dtheta) < 1e-9:
            # Taylor expansion of sin(t)/t and (1 - cos(t))/t around t = 0
            s = 1.0 - dtheta * dtheta / 6.0
            c = 0.5 * dtheta
        else:
            s = math.sin(dtheta) / dtheta
            c = (1.0 - math.cos(dtheta)) / dtheta

        local_x = dx * s - dy * c
        local_y = dx * c + dy * s
        field_dx, field_dy = rotate(local_x, local_y, self.heading)

        return Pose(self.x + field_dx, self.y + field_dy, self.heading + dtheta)


@dataclass(frozen=True)
class Twist:
    """Planar chassis velocity (ChassisSpeeds).

    Attributes:
        vx: Velocity along the frame's x axis (m/s)
        vy: Velocity along the frame's y axis (m/s)
        omega: Angular velocity, counter-clockwise positive (rad/s)
    """

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0

    @classmethod
    def from_field_relative(cls, vx: float, vy: float, omega: float, heading: float) -> "Twist":
        """Build a robot-relative twist from field-relative components.

        The field-frame linear velocity is rotated by -heading.
        """
        robot_vx, robot_vy = rotate(vx, vy, -heading)
        return cls(robot_vx, robot_vy, omega)

    def to_field_relative(self, heading: float) -> "Twist":
        """Rotate a robot-relative twist into field axes (by +heading)."""
        field_vx, field_vy = rotate(self.vx, self.vy, heading)
        return Twist(field_vx, field_vy, self.omega)

    @property
    def linear_speed(self) -> float:
        return math.hypot(self.vx, self.vy)
