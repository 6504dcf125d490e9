"""
Exception hierarchy for the finsun toolkit.

Solvers report numeric trouble through tagged result objects; these
exceptions are raised by the strict boundary functions and by the
closed-form formulas when an input leaves the formula's domain.
"""


class SolverError(Exception):
    """Base class for solver failures."""

    pass


class ConvergenceError(SolverError):
    """An iterative solver hit its iteration cap before converging."""

    pass


class DomainError(SolverError, ValueError):
    """
    A formula was evaluated outside its mathematical domain.

    Raised for logarithms of non-positive values, negative bases raised to
    fractional powers, overflow, and the arc cosine of the horizon
    correction during polar day or night.
    """

    pass
