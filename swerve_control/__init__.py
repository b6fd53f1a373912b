"""Swerve Control - Motion Core for Four-Wheel Swerve Drive Robots

Converts chassis velocity commands into per-module speed/angle setpoints,
estimates the robot pose from module feedback and a heading sensor, and drives
the robot to a target pose with a closed-loop controller.

## Architecture Overview

Each fixed-period control cycle (20 ms) runs top-down:

### Layer 1: Pose Estimation (odometry.py)
Integrates module feedback into a field pose.
- Forward kinematics: module states -> least-squares chassis twist
- Exponential-map integration over one control period
- Heading sensor is authoritative: overwrites the integrated heading

### Layer 2: Pose Control (controller.py, drive_to_position.py)
Proportional controller from pose error to a robot-relative twist.
- Translation error in the robot frame, clamped to the target approach speed
- Heading error wrapped to (-pi, pi]
- Termination on position and heading tolerance (drive_to_position.py)

### Layer 3: Inverse Kinematics (kinematics.py)
Converts a chassis twist to one speed/angle state per module.
- Field-relative commands rotated into the robot frame first
- Zero-speed modules hold their last angle

### Layer 4: Desaturation (desaturation.py)
Uniformly scales module speeds to the hardware limit.
- Preserves speed ratios and therefore direction of travel

## Modules

### Core
- `geometry.py` - Pose, Twist, angle wrapping
- `kinematics.py` - ModuleState, ModuleGeometry, SwerveKinematics
- `desaturation.py` - Wheel speed desaturation
- `odometry.py` - SwerveOdometry pose estimator
- `controller.py` - PoseController
- `drivetrain.py` - Drivetrain integration (owns odometry, commands modules)
- `drive_to_position.py` - Drive-to-position mode
- `interfaces.py` - Module and heading sensor capability interfaces
- `filters.py` - Operator command slew-rate limiting
- `config.py` - Centralized configuration parameters

### Simulation & Data
- `simulation.py` - Frictionless simulated modules, gyro and plant
- `runner.py` - Fixed-rate control loop and logging setup
- `data_collector.py` - CSV run logging
- `plot_results.py` - Run visualization

## Quick Start

```python
from swerve_control import Pose, SimulationRunner

result = SimulationRunner(Pose(2.0, 0.0, 0.0), target_linear_speed=1.0).run()
```

Or use the command-line interface:
```bash
python -m swerve_control --target-x 2 --target-y 1 --target-heading 90
```

## Version

0.1.0 - Initial implementation
"""

__version__ = "0.1.0"

from .controller import PoseController
from .desaturation import desaturate_wheel_speeds
from .drive_to_position import DriveToPosition
from .drivetrain import Drivetrain
from .geometry import Pose, Twist, wrap_angle
from .kinematics import ModuleGeometry, ModuleState, SwerveKinematics
from .odometry import SwerveOdometry
from .runner import SimulationRunner

__all__ = [
    "Pose",
    "Twist",
    "wrap_angle",
    "ModuleState",
    "ModuleGeometry",
    "SwerveKinematics",
    "desaturate_wheel_speeds",
    "SwerveOdometry",
    "PoseController",
    "Drivetrain",
    "DriveToPosition",
    "SimulationRunner",
]
