import matplotlib

matplotlib.use("Agg")

import pytest

from swerve_control import config
from swerve_control.kinematics import SwerveKinematics


@pytest.fixture
def kinematics():
    return SwerveKinematics.from_positions(config.MODULE_POSITIONS)


@pytest.fixture(autouse=True)
def no_run_dir_env(monkeypatch):
    monkeypatch.delenv("RUN_DIR", raising=False)
