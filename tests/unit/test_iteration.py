"""Unit tests for the bounded iteration helper."""

import pytest

from finsun.core.exceptions import DomainError
from finsun.solvers.iteration import bounded_iterate


def test_converges_on_halving():
    result = bounded_iterate(lambda x: x / 2, 1.0, lambda x: x < 0.1, max_iterations=50)

    assert result.converged
    assert result.iterations == 4
    assert result.state == 0.0625
    assert result.history == [1.0, 0.5, 0.25, 0.125, 0.0625]


def test_seed_already_converged():
    result = bounded_iterate(lambda x: x + 1, 5, lambda x: x == 5, max_iterations=10)

    assert result.converged
    assert result.iterations == 0
    assert result.history == [5]


def test_cap_stops_iteration():
    result = bounded_iterate(lambda x: x + 1, 0, lambda x: False, max_iterations=128)

    assert not result.converged
    assert result.iterations == 128
    assert result.state == 128


def test_converged_on_last_allowed_step():
    result = bounded_iterate(lambda x: x + 1, 0, lambda x: x == 3, max_iterations=3)

    assert result.converged
    assert result.iterations == 3


def test_negative_cap_raises():
    with pytest.raises(ValueError, match="non-negative"):
        bounded_iterate(lambda x: x, 0, lambda x: True, max_iterations=-1)


def test_step_errors_propagate():
    def step(x):
        raise DomainError("out of range")

    with pytest.raises(DomainError, match="out of range"):
        bounded_iterate(step, 0, lambda x: False, max_iterations=5)
