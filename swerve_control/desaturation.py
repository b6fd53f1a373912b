"""Wheel speed desaturation.

Uniformly scales a set of module states so that the fastest module respects
the actuator limit while every module keeps its share of the motion.
"""

from typing import List, Sequence

from .kinematics import ModuleState


def max_module_speed(module_states: Sequence[ModuleState]) -> float:
    """Largest absolute module speed (m/s), 0.0 for an empty sequence."""
    return max((abs(state.speed) for state in module_states), default=0.0)


def desaturate_wheel_speeds(module_states: Sequence[ModuleState], max_speed: float) -> List[ModuleState]:
    """Scale module speeds so none exceeds max_speed.

    Every speed is multiplied by the same factor max_speed / peak, so speed
    ratios (and the direction of travel they encode) are preserved. Angles
    and speed signs are untouched. Already-legal states pass through
    unchanged, which makes the operation idempotent.

    Args:
        module_states: Module states to desaturate
        max_speed: Maximum attainable module speed (m/s)

    Returns:
        New list of module states

    Raises:
        ValueError: If max_speed is not positive
    """
    if max_speed <= 0:
        raise ValueError(f"max_speed must be positive, got {max_speed}")

    peak = max_module_speed(module_states)
    if peak <= max_speed:
        return list(module_states)

    scale = max_speed / peak
    return [ModuleState(state.speed * scale, state.angle) for state in module_states]
