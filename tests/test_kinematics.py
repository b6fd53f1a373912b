import math

import numpy as np
import pytest

from swerve_control.geometry import Twist
from swerve_control.kinematics import (
    ModuleGeometry,
    ModuleState,
    SwerveKinematics,
    field_to_robot,
    robot_to_field,
)


def test_forward_command_points_all_modules_ahead(kinematics):
    states = kinematics.to_module_states(Twist(1.5, 0.0, 0.0))
    assert len(states) == 4
    for state in states:
        assert state.speed == pytest.approx(1.5)
        assert state.angle == pytest.approx(0.0)


def test_pure_rotation_is_tangent_to_center(kinematics):
    states = kinematics.to_module_states(Twist(0.0, 0.0, 1.0))
    front_left = kinematics.geometries[0]
    radius = math.hypot(front_left.x, front_left.y)
    expected_angles = [math.radians(a) for a in (135, 45, -135, -45)]
    for state, angle in zip(states, expected_angles):
        assert state.speed == pytest.approx(radius)
        assert state.angle == pytest.approx(angle)


def test_round_trip_random_twists(kinematics):
    rng = np.random.default_rng(1234)
    for vx, vy, omega in rng.uniform(-3.0, 3.0, size=(50, 3)):
        twist = Twist(vx, vy, omega)
        recovered = kinematics.to_twist(kinematics.to_module_states(twist))
        assert recovered.vx == pytest.approx(vx, abs=1e-6)
        assert recovered.vy == pytest.approx(vy, abs=1e-6)
        assert recovered.omega == pytest.approx(omega, abs=1e-6)


def test_negative_speed_is_equivalent_to_flipped_angle(kinematics):
    forward = [ModuleState(1.0, 0.0)] * 4
    flipped = [ModuleState(-1.0, math.pi)] * 4
    a = kinematics.to_twist(forward)
    b = kinematics.to_twist(flipped)
    assert a.vx == pytest.approx(b.vx)
    assert a.vy == pytest.approx(b.vy, abs=1e-12)
    assert a.omega == pytest.approx(b.omega, abs=1e-12)


def test_least_squares_averages_inconsistent_modules(kinematics):
    states = [ModuleState(1.0, 0.0), ModuleState(1.0, 0.0), ModuleState(2.0, 0.0), ModuleState(2.0, 0.0)]
    twist = kinematics.to_twist(states)
    assert twist.vx == pytest.approx(1.5)
    assert twist.vy == pytest.approx(0.0, abs=1e-12)


def test_zero_speed_holds_previous_angles(kinematics):
    previous = [0.1, 0.2, -0.3, 0.4]
    states = kinematics.to_module_states(Twist(), previous_angles=previous)
    assert [s.speed for s in states] == [0.0] * 4
    assert [s.angle for s in states] == previous


def test_zero_speed_defaults_to_zero_angle(kinematics):
    states = kinematics.to_module_states(Twist())
    assert all(s.angle == 0.0 and s.speed == 0.0 for s in states)


def test_three_module_layout():
    kinematics = SwerveKinematics(
        [ModuleGeometry(0.3, 0.0), ModuleGeometry(-0.2, 0.25), ModuleGeometry(-0.2, -0.25)]
    )
    twist = Twist(0.4, -0.7, 1.3)
    recovered = kinematics.to_twist(kinematics.to_module_states(twist))
    assert (recovered.vx, recovered.vy, recovered.omega) == pytest.approx((0.4, -0.7, 1.3))


def test_too_few_modules_rejected():
    with pytest.raises(ValueError, match="at least 3"):
        SwerveKinematics([ModuleGeometry(0.3, 0.3), ModuleGeometry(-0.3, -0.3)])


def test_collinear_modules_rejected():
    with pytest.raises(ValueError, match="collinear"):
        SwerveKinematics.from_positions([(0.0, 0.0), (0.5, 0.5), (1.0, 1.0), (-0.5, -0.5)])


def test_nearly_collinear_modules_still_solve():
    kinematics = SwerveKinematics.from_positions([(0.0, 0.0), (1.0, 0.0), (2.0, 1e-6)])
    twist = kinematics.to_twist([ModuleState(1.0, 0.0)] * 3)
    assert all(math.isfinite(v) for v in (twist.vx, twist.vy, twist.omega))
    assert twist.vx == pytest.approx(1.0, abs=1e-6)


def test_wrong_feedback_length_rejected(kinematics):
    with pytest.raises(ValueError, match="Expected 4 module states"):
        kinematics.to_twist([ModuleState(1.0, 0.0)] * 3)
    with pytest.raises(ValueError):
        kinematics.to_twist([])


def test_wrong_previous_angle_length_rejected(kinematics):
    with pytest.raises(ValueError):
        kinematics.to_module_states(Twist(1.0, 0.0, 0.0), previous_angles=[0.0, 0.0])


def test_frame_conversion_helpers_are_inverse():
    heading = math.radians(-120)
    twist = Twist(0.8, 0.3, -0.5)
    back = robot_to_field(field_to_robot(twist, heading), heading)
    assert (back.vx, back.vy, back.omega) == pytest.approx((0.8, 0.3, -0.5))
