import pytest

from swerve_control.filters import SlewRateLimiter


def test_step_is_rate_limited():
    limiter = SlewRateLimiter(rate=1.0, period=0.1)
    assert limiter.calculate(1.0) == pytest.approx(0.1)
    assert limiter.calculate(1.0) == pytest.approx(0.2)
    assert limiter.calculate(-1.0) == pytest.approx(0.1)


def test_reaches_target_without_overshoot():
    limiter = SlewRateLimiter(rate=2.0, period=0.1)
    outputs = [limiter.calculate(0.5) for _ in range(5)]
    assert outputs[-1] == pytest.approx(0.5)
    assert max(outputs) <= 0.5 + 1e-12


def test_reset_jumps_output():
    limiter = SlewRateLimiter(rate=1.0, period=0.1)
    limiter.reset(0.7)
    assert limiter.value == 0.7
    assert limiter.calculate(0.7) == pytest.approx(0.7)


def test_invalid_parameters():
    with pytest.raises(ValueError):
        SlewRateLimiter(rate=0.0, period=0.1)
    with pytest.raises(ValueError):
        SlewRateLimiter(rate=1.0, period=-0.1)
