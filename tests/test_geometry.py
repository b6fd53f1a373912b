import math

import pytest

from swerve_control.geometry import Pose, Twist, rotate, wrap_angle


@pytest.mark.parametrize(
    "angle, expected",
    [
        (0.0, 0.0),
        (math.pi, math.pi),
        (-math.pi, math.pi),
        (3 * math.pi, math.pi),
        (math.radians(340), math.radians(-20)),
        (math.radians(-190), math.radians(170)),
    ],
)
def test_wrap_angle(angle, expected):
    assert wrap_angle(angle) == pytest.approx(expected, abs=1e-12)


def test_pose_heading_wrapped_on_construction():
    pose = Pose(1.0, 2.0, math.radians(270))
    assert pose.heading == pytest.approx(math.radians(-90))
    assert Pose.from_degrees(0, 0, 180).heading_degrees == pytest.approx(180)


def test_rotate_quarter_turn():
    x, y = rotate(1.0, 0.0, math.pi / 2)
    assert x == pytest.approx(0.0, abs=1e-12)
    assert y == pytest.approx(1.0)


def test_relative_to():
    origin = Pose(1.0, 1.0, math.pi / 2)
    relative = Pose(1.0, 3.0, math.pi).relative_to(origin)
    # Two meters straight ahead of a robot facing +y
    assert relative.x == pytest.approx(2.0)
    assert relative.y == pytest.approx(0.0, abs=1e-12)
    assert relative.heading == pytest.approx(math.pi / 2)


def test_exp_straight_line():
    pose = Pose(0.0, 0.0, math.pi / 2).exp(1.0, 0.0, 0.0)
    assert pose.x == pytest.approx(0.0, abs=1e-12)
    assert pose.y == pytest.approx(1.0)
    assert pose.heading == pytest.approx(math.pi / 2)


def test_exp_quarter_circle():
    # Arc of radius 1 turning left through 90 degrees
    pose = Pose().exp(math.pi / 2, 0.0, math.pi / 2)
    assert pose.x == pytest.approx(1.0)
    assert pose.y == pytest.approx(1.0)
    assert pose.heading == pytest.approx(math.pi / 2)


def test_exp_small_angle_matches_series():
    exact = Pose().exp(1.0, 0.5, 1e-6)
    tiny = Pose().exp(1.0, 0.5, 1e-10)
    assert exact.x == pytest.approx(tiny.x, abs=1e-6)
    assert exact.y == pytest.approx(tiny.y, abs=1e-6)


def test_field_relative_round_trip():
    heading = math.radians(37)
    robot = Twist.from_field_relative(1.2, -0.4, 0.7, heading)
    field = robot.to_field_relative(heading)
    assert field.vx == pytest.approx(1.2)
    assert field.vy == pytest.approx(-0.4)
    assert field.omega == 0.7


def test_field_forward_when_facing_left_is_robot_right():
    robot = Twist.from_field_relative(1.0, 0.0, 0.0, math.pi / 2)
    assert robot.vx == pytest.approx(0.0, abs=1e-12)
    assert robot.vy == pytest.approx(-1.0)
    assert robot.linear_speed == pytest.approx(1.0)
