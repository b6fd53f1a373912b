import math

import pytest

from swerve_control.geometry import Pose, Twist
from swerve_control.kinematics import ModuleState
from swerve_control.odometry import SwerveOdometry

PERIOD = 0.02


@pytest.fixture
def odometry(kinematics):
    return SwerveOdometry(kinematics, initial_heading=0.0, period=PERIOD)


def test_starts_at_initial_pose(kinematics):
    odometry = SwerveOdometry(kinematics, 0.5, initial_pose=Pose(1.0, 2.0, 0.5), period=PERIOD)
    assert odometry.pose == Pose(1.0, 2.0, 0.5)
    assert odometry.last_heading == 0.5


def test_straight_line_one_second(odometry):
    forward = [ModuleState(1.0, 0.0)] * 4
    for _ in range(50):
        pose = odometry.update(0.0, forward)
    assert pose.x == pytest.approx(1.0, abs=1e-9)
    assert pose.y == pytest.approx(0.0, abs=1e-12)
    assert pose.heading == 0.0


def test_strafe_in_rotated_frame(kinematics):
    odometry = SwerveOdometry(kinematics, math.pi / 2, initial_pose=Pose(0, 0, math.pi / 2), period=PERIOD)
    # Robot-left while facing +y is field -x
    left = [ModuleState(1.0, math.pi / 2)] * 4
    for _ in range(50):
        pose = odometry.update(math.pi / 2, left)
    assert pose.x == pytest.approx(-1.0, abs=1e-9)
    assert pose.y == pytest.approx(0.0, abs=1e-9)


def test_constant_curvature_follows_arc(kinematics, odometry):
    states = kinematics.to_module_states(Twist(1.0, 0.0, 1.0))
    heading = 0.0
    for _ in range(50):
        heading += 1.0 * PERIOD
        pose = odometry.update(heading, states)
    # Circle of radius 1 after one radian of travel
    assert pose.x == pytest.approx(math.sin(1.0), abs=1e-6)
    assert pose.y == pytest.approx(1.0 - math.cos(1.0), abs=1e-6)
    assert pose.heading == pytest.approx(1.0)


def test_heading_sensor_is_authoritative(kinematics, odometry):
    spinning = kinematics.to_module_states(Twist(0.0, 0.0, 2.0))
    for _ in range(10):
        pose = odometry.update(0.3, spinning)
    assert pose.heading == pytest.approx(0.3)


def test_heading_wraps_across_branch_cut(kinematics):
    odometry = SwerveOdometry(kinematics, math.radians(179), initial_pose=Pose.from_degrees(0, 0, 179), period=PERIOD)
    pose = odometry.update(math.radians(-179), [ModuleState(0.0, 0.0)] * 4)
    assert pose.heading_degrees == pytest.approx(-179)
    assert pose.x == 0.0 and pose.y == 0.0


def test_reset_then_zero_velocity_update(odometry):
    forward = [ModuleState(1.0, 0.0)] * 4
    for _ in range(10):
        odometry.update(0.0, forward)

    target = Pose(3.0, -1.0, 0.7)
    odometry.reset_pose(target, 0.7)
    pose = odometry.update(0.7, [ModuleState(0.0, 0.0)] * 4)
    assert pose.x == pytest.approx(3.0)
    assert pose.y == pytest.approx(-1.0)
    assert pose.heading == pytest.approx(0.7)


def test_reset_heading_overwritten_by_sensor(odometry):
    odometry.reset_pose(Pose(1.0, 2.0, 0.5), 0.2)
    pose = odometry.update(0.2, [ModuleState(0.0, 0.0)] * 4)
    assert (pose.x, pose.y) == (1.0, 2.0)
    assert pose.heading == pytest.approx(0.2)


def test_mismatched_feedback_is_rejected_without_mutation(odometry):
    before = odometry.pose
    with pytest.raises(ValueError):
        odometry.update(1.0, [ModuleState(1.0, 0.0)] * 3)
    with pytest.raises(ValueError):
        odometry.update(1.0, [])
    assert odometry.pose == before
    assert odometry.last_heading == 0.0


def test_non_positive_period_rejected(kinematics):
    with pytest.raises(ValueError):
        SwerveOdometry(kinematics, 0.0, period=0.0)
