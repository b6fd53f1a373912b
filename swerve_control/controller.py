"""Pose feedback controller for driving to a target position.

This module provides a stateless proportional controller that, given the
current pose and a target pose, produces a robot-relative chassis twist:
- Translation error is expressed in the robot frame and mapped to (vx, vy)
- The (vx, vy) norm is clamped to the target linear speed, direction preserved
- Heading error is wrapped to (-pi, pi] and mapped to omega

The controller holds no state between calls, so it can be invoked every cycle
without reset or lifecycle handling.
"""

import math
from typing import Optional, Tuple

from .geometry import Pose, Twist, rotate, wrap_angle


def translation_error(current: Pose, target: Pose) -> Tuple[float, float]:
    """Target translation minus current translation, in the robot frame.

    Args:
        current: Current robot pose
        target: Target pose

    Returns:
        Tuple of (forward_error, lateral_error) in meters
    """
    return rotate(target.x - current.x, target.y - current.y, -current.heading)


def heading_error(current: Pose, target_heading: float) -> float:
    """Signed heading error wrapped to (-pi, pi] (rad)."""
    return wrap_angle(target_heading - current.heading)


class PoseController:
    """Proportional pose controller producing robot-relative twists.

    Control law:
        [vx, vy] = kp_translation * R(-theta) @ (p_target - p_current),
                   scaled down to |target_linear_speed| if faster
        omega = kp_heading * wrap(theta_target - theta_current),
                clamped to +/- max_angular_speed

    With perfect tracking, each cycle shrinks an unclamped translation error
    by (1 - kp_translation * period), so the error decays monotonically as
    long as kp_translation * period < 1.

    Attributes:
        kp_translation: Translation gain (1/s)
        kp_heading: Heading gain (1/s)
        max_angular_speed: Angular velocity limit (rad/s), None for unlimited
    """

    def __init__(
        self,
        kp_translation: Optional[float] = None,
        kp_heading: Optional[float] = None,
        max_angular_speed: Optional[float] = None,
        period: Optional[float] = None,
    ):
        """Initialize the pose controller.

        Args:
            kp_translation: Translation gain. If None, uses config.POSE_KP_TRANSLATION.
            kp_heading: Heading gain. If None, uses config.POSE_KP_HEADING.
            max_angular_speed: Omega limit. If None, uses config.POSE_MAX_ANGULAR_SPEED.
            period: Control period the controller runs at. If None, uses
                config.CONTROL_PERIOD. Only used to validate the gains.

        Raises:
            ValueError: If a gain is negative or a gain times the period is
                not below 1 (the discrete loop would overshoot).
        """
        from swerve_control import config as cfg

        self.kp_translation = cfg.POSE_KP_TRANSLATION if kp_translation is None else kp_translation
        self.kp_heading = cfg.POSE_KP_HEADING if kp_heading is None else kp_heading
        self.max_angular_speed = (
            cfg.POSE_MAX_ANGULAR_SPEED if max_angular_speed is None else max_angular_speed
        )
        period = cfg.CONTROL_PERIOD if period is None else period

        for name, gain in (("kp_translation", self.kp_translation), ("kp_heading", self.kp_heading)):
            if gain < 0:
                raise ValueError(f"{name} must be non-negative, got {gain}")
            if gain * period >= 1.0:
                raise ValueError(
                    f"{name}={gain} is unstable at period {period}s (gain * period must be < 1)"
                )

    def calculate(
        self,
        current_pose: Pose,
        target_pose: Pose,
        target_linear_speed: float,
        target_heading: float,
    ) -> Twist:
        """Compute the twist that drives current_pose toward target_pose.

        Args:
            current_pose: Current pose estimate (field frame)
            target_pose: Target pose; only its translation is used
            target_linear_speed: Maximum approach speed (m/s)
            target_heading: Desired final heading (rad)

        Returns:
            Robot-relative chassis twist
        """
        forward_error, lateral_error = translation_error(current_pose, target_pose)

        vx = self.kp_translation * forward_error
        vy = self.kp_translation * lateral_error

        speed_limit = abs(target_linear_speed)
        speed = math.hypot(vx, vy)
        if speed > speed_limit:
            scale = speed_limit / speed
            vx *= scale
            vy *= scale

        omega = self.kp_heading * heading_error(current_pose, target_heading)
        if self.max_angular_speed is not None:
            omega = max(-self.max_angular_speed, min(self.max_angular_speed, omega))

        return Twist(vx, vy, omega)

    def get_diagnostics(self, current_pose: Pose, target_pose: Pose, target_heading: float) -> dict:
        """Error terms for logging and tuning.

        Returns:
            Dictionary containing forward, lateral, distance and heading errors
        """
        forward_error, lateral_error = translation_error(current_pose, target_pose)
        return {
            "forward_error": forward_error,
            "lateral_error": lateral_error,
            "distance_error": math.hypot(forward_error, lateral_error),
            "heading_error": heading_error(current_pose, target_heading),
        }
