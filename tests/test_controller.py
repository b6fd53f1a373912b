import math

import pytest

from swerve_control.controller import PoseController, heading_error, translation_error
from swerve_control.geometry import Pose

PERIOD = 0.02


@pytest.fixture
def controller():
    return PoseController(kp_translation=2.0, kp_heading=3.0, max_angular_speed=math.pi, period=PERIOD)


def test_heading_error_takes_short_way_round():
    error = heading_error(Pose.from_degrees(0, 0, -170), math.radians(170))
    assert abs(math.degrees(error)) == pytest.approx(20.0)
    # Clockwise through the branch cut
    assert math.degrees(error) == pytest.approx(-20.0)


def test_heading_error_at_half_turn_is_positive():
    assert heading_error(Pose(), math.pi) == pytest.approx(math.pi)
    assert heading_error(Pose(), -math.pi) == pytest.approx(math.pi)


def test_translation_error_in_robot_frame():
    forward, lateral = translation_error(Pose(0.0, 0.0, math.pi / 2), Pose(0.0, 1.0, 0.0))
    assert forward == pytest.approx(1.0)
    assert lateral == pytest.approx(0.0, abs=1e-12)

    forward, lateral = translation_error(Pose(1.0, 1.0, math.pi), Pose(1.0, 0.0, 0.0))
    # Facing -x, the robot's left is field -y
    assert forward == pytest.approx(0.0, abs=1e-12)
    assert lateral == pytest.approx(1.0)


def test_command_clamped_to_target_speed(controller):
    twist = controller.calculate(Pose(), Pose(3.0, 4.0, 0.0), 1.5, 0.0)
    assert twist.linear_speed == pytest.approx(1.5)
    # Direction preserved
    assert twist.vy / twist.vx == pytest.approx(4.0 / 3.0)


def test_small_error_is_proportional(controller):
    twist = controller.calculate(Pose(), Pose(0.1, -0.05, 0.0), 1.0, 0.0)
    assert twist.vx == pytest.approx(0.2)
    assert twist.vy == pytest.approx(-0.1)
    assert twist.omega == 0.0


def test_zero_error_gives_zero_twist(controller):
    pose = Pose(1.0, 2.0, 0.4)
    twist = controller.calculate(pose, pose, 1.0, 0.4)
    assert twist.vx == pytest.approx(0.0, abs=1e-12)
    assert twist.vy == pytest.approx(0.0, abs=1e-12)
    assert twist.omega == pytest.approx(0.0, abs=1e-12)


def test_angular_speed_clamped():
    controller = PoseController(kp_translation=2.0, kp_heading=3.0, max_angular_speed=1.0, period=PERIOD)
    twist = controller.calculate(Pose(), Pose(), 1.0, math.pi / 2)
    assert twist.omega == pytest.approx(1.0)
    twist = controller.calculate(Pose(), Pose(), 1.0, -math.pi / 2)
    assert twist.omega == pytest.approx(-1.0)


def test_stateless(controller):
    args = (Pose(0.3, -0.2, 1.0), Pose(2.0, 1.0, 0.0), 1.0, -0.5)
    assert controller.calculate(*args) == controller.calculate(*args)


def test_converges_without_oscillation(controller):
    pose = Pose()
    target = Pose(2.0, 0.0, 0.0)
    errors = []

    for cycle in range(500):
        error = pose.translation_distance(target)
        errors.append(error)
        if error < 0.01:
            break
        twist = controller.calculate(pose, target, 1.0, 0.0)
        assert twist.vx >= 0.0
        pose = pose.exp(twist.vx * PERIOD, twist.vy * PERIOD, twist.omega * PERIOD)
    else:
        pytest.fail(f"Did not converge, error {pose.translation_distance(target):.4f} m")

    assert cycle < 250
    assert all(b <= a + 1e-12 for a, b in zip(errors, errors[1:]))
    assert pose.heading == pytest.approx(0.0, abs=1e-12)


def test_converges_with_turn(controller):
    pose = Pose.from_degrees(0.0, 0.0, -170)
    target = Pose(1.0, 1.0, 0.0)
    target_heading = math.radians(170)

    for _ in range(1000):
        twist = controller.calculate(pose, target, 1.0, target_heading)
        pose = pose.exp(twist.vx * PERIOD, twist.vy * PERIOD, twist.omega * PERIOD)

    assert pose.translation_distance(target) < 0.01
    assert abs(heading_error(pose, target_heading)) < math.radians(1.0)


def test_unstable_gain_rejected():
    with pytest.raises(ValueError, match="unstable"):
        PoseController(kp_translation=60.0, period=PERIOD)
    with pytest.raises(ValueError, match="non-negative"):
        PoseController(kp_heading=-1.0, period=PERIOD)


def test_diagnostics(controller):
    diagnostics = controller.get_diagnostics(Pose(), Pose(3.0, 4.0, 0.0), 0.5)
    assert diagnostics["distance_error"] == pytest.approx(5.0)
    assert diagnostics["heading_error"] == pytest.approx(0.5)
