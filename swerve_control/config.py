"""Configuration parameters for the swerve drive motion core.

This module centralizes all configuration parameters including:
- Physical robot parameters (module geometry, speed limits)
- Control loop timing
- Pose controller gains and drive-to-position tolerances
- Operator command slew limits
- Simulation and output settings

All values are fixed at startup. Components accept explicit overrides and fall
back to these values when None is passed.
"""

import math

# ============================================================================
# Physical Robot Parameters
# ============================================================================

TRACK_WIDTH = 0.5207
"""Distance between left and right module contact points (meters).
20.5 in square chassis, fixed by robot hardware design."""

WHEELBASE = 0.5207
"""Distance between front and back module contact points (meters)."""

MODULE_POSITIONS = (
    (WHEELBASE / 2.0, TRACK_WIDTH / 2.0),  # Module 0: front left
    (WHEELBASE / 2.0, -TRACK_WIDTH / 2.0),  # Module 1: front right
    (-WHEELBASE / 2.0, TRACK_WIDTH / 2.0),  # Module 2: back left
    (-WHEELBASE / 2.0, -TRACK_WIDTH / 2.0),  # Module 3: back right
)
"""Module (x, y) offsets from the center of rotation (meters).

Frame convention: +x forward, +y left. The order here is the fixed geometry
order used for every module state sequence (commands and feedback).
"""

MAX_MODULE_SPEED = 4.572
"""Maximum module drive speed (m/s). 15 ft/s, hardware limit.

Every commanded set of module states is desaturated against this value.
"""

ZERO_SPEED_EPSILON = 1e-9
"""Module speed below which the steering angle is held (m/s).

A zero-length velocity vector has no defined direction; holding the previous
angle avoids spurious steering motion when the robot stops.
"""


# ============================================================================
# Control Loop
# ============================================================================

CONTROL_PERIOD = 0.02
"""Fixed control cycle period (seconds). 50 Hz loop.

Odometry integrates each update over exactly one period.
"""


# ============================================================================
# Pose Controller Parameters (Drive to Position)
# ============================================================================

POSE_KP_TRANSLATION = 2.0
"""Proportional gain from translation error to linear velocity (1/s).

Command = KP * error, clamped to the target linear speed.

Tuning rationale:
- Error shrinks by a factor (1 - KP * CONTROL_PERIOD) per cycle once
  unclamped; 2.0 gives 0.96 per cycle at 50 Hz
- Must satisfy KP * CONTROL_PERIOD < 1 or the loop overshoots
- Higher values reach the target faster but amplify odometry noise
"""

POSE_KP_HEADING = 3.0
"""Proportional gain from heading error to angular velocity (1/s)."""

POSE_MAX_ANGULAR_SPEED = math.pi
"""Maximum commanded angular velocity from the pose controller (rad/s)."""

DRIVE_TO_POSITION_SPEED = 1.0
"""Default target linear speed for drive to position (m/s)."""

POSITION_TOLERANCE = 0.01
"""Translation error at which drive to position is finished (meters)."""

HEADING_TOLERANCE = math.radians(1.0)
"""Heading error at which drive to position is finished (radians)."""


# ============================================================================
# Operator Command Shaping
# ============================================================================

DRIVE_RATE_LIMIT = 8.0
"""Maximum rate of change of commanded linear velocity (m/s²).

Applied to vx and vy independently when rate limiting is requested.
"""

STEER_RATE_LIMIT = 4.0 * math.pi
"""Maximum rate of change of commanded angular velocity (rad/s²)."""


# ============================================================================
# Heading Sensor
# ============================================================================

GYRO_INVERT = False
"""Invert the heading sensor reading to correct for mounting orientation.

Counter-clockwise rotation must read as a positive heading change.
"""


# ============================================================================
# Simulation
# ============================================================================

SIM_MAX_CYCLES = 1500
"""Maximum control cycles for a simulated drive to position (30 s at 50 Hz)."""


# ============================================================================
# Output and Visualization
# ============================================================================

RESULTS_DIR = "results"
"""Base directory for run output (relative to the working directory)."""

# Brand colors (hex codes for matplotlib)
PLOT_ORANGE = "#f74823"
"""Primary color - estimated pose, commanded values."""

PLOT_BLUE = "#2374f7"
"""Secondary color - true pose, targets."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides, grids, and secondary elements."""

# Terminal color codes (ANSI escape sequences)

TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""
