"""Command shaping filters for operator input."""

from typing import Optional

__all__ = ["SlewRateLimiter"]


class SlewRateLimiter:
    """Limit the rate of change of a command signal.

    Each call may move the output by at most rate * period from the previous
    output. Intended for operator twist components, where a step input from a
    joystick would otherwise demand an unbounded acceleration.
    """

    def __init__(self, rate: float, period: Optional[float] = None, initial_value: float = 0.0) -> None:
        """Initialize the limiter.

        Args:
            rate: Maximum rate of change (units per second)
            period: Call period (seconds). If None, uses config.CONTROL_PERIOD.
            initial_value: Output before the first call

        Raises:
            ValueError: If rate or period is not positive.
        """
        if period is None:
            from swerve_control import config as cfg

            period = cfg.CONTROL_PERIOD

        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")

        self.rate = float(rate)
        self.period = float(period)
        self._value = float(initial_value)

    @property
    def value(self) -> float:
        return self._value

    def calculate(self, target: float) -> float:
        """Step toward target, bounded by the rate limit."""
        max_step = self.rate * self.period
        delta = target - self._value
        self._value += max(-max_step, min(max_step, delta))
        return self._value

    def reset(self, value: float = 0.0) -> None:
        """Jump the output to value without rate limiting."""
        self._value = float(value)
