"""
Bounded iteration shared by the rate and solar solvers.

Both solvers follow the same loop: seed a state, test convergence, apply
an update, and stop on convergence or when the iteration cap is reached.
The business logic lives entirely in the ``step`` and ``converged``
callables supplied by each solver.
"""

from typing import Callable, TypeVar

from finsun.utils.types import IterationResult

S = TypeVar("S")


def bounded_iterate(
    step: Callable[[S], S],
    initial: S,
    converged: Callable[[S], bool],
    max_iterations: int,
) -> IterationResult:
    """
    Apply ``step`` until ``converged`` holds or ``max_iterations`` is reached.

    The predicate is tested before each update, so a seed that already
    satisfies it returns with zero iterations.

    Args:
        step: Maps the current state to the next one
        initial: Seed state
        converged: Convergence test on a state
        max_iterations: Maximum number of updates

    Returns:
        IterationResult with the last state, the update count, whether the
        predicate held on the last state, and the states visited

    Notes:
        Exceptions raised by ``step`` (e.g. DomainError) propagate to the
        caller, which decides how to report them.
    """
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")

    state = initial
    history = [state]

    for iterations in range(max_iterations):
        if converged(state):
            return IterationResult(state, iterations, True, history)
        state = step(state)
        history.append(state)

    return IterationResult(state, max_iterations, converged(state), history)
