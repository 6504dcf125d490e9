"""
Secant method for the periodic interest rate of an annuity.

This module solves the annuity balance equation for the rate given the
term, payment, present value and future value. The secant update
approximates the derivative from the two most recent points, so no
analytic derivative of the balance equation is needed.
"""

import logging
import math
from dataclasses import dataclass

from finsun.core.annuity import annuity_balance
from finsun.core.exceptions import DomainError
from finsun.solvers.iteration import bounded_iterate
from finsun.utils.constants import (
    RATE_DEFAULT_GUESS,
    RATE_MAX_ITERATIONS,
    RATE_PRECISION,
)
from finsun.utils.types import RateResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecantState:
    """Two most recent rate estimates and their balance residuals."""

    x0: float
    x1: float
    y0: float
    y1: float


def clamp_guess(guess: float) -> float:
    """Replace a seed rate outside the open interval (0, 1) with 10%."""
    if guess <= 0 or guess >= 1:
        return RATE_DEFAULT_GUESS
    return guess


def secant_rate(
    nper: float,
    pmt: float,
    pv: float,
    fv: float = 0.0,
    at_start: bool = False,
    guess: float = RATE_DEFAULT_GUESS,
    max_iterations: int = RATE_MAX_ITERATIONS,
    precision: float = RATE_PRECISION,
) -> RateResult:
    """
    Solve for the periodic rate using the secant method.

    The iteration is seeded with the zero-rate residual (x0 = 0) and the
    compounding residual at the guess (x1 = guess). Each update is:
        r = (y1·x0 - y0·x1) / (y1 - y0)
    and stops once consecutive residuals agree within ``precision``.

    Args:
        nper: Number of periods
        pmt: Payment per period
        pv: Present value
        fv: Future value
        at_start: True if payments are due at the start of each period
        guess: Seed rate; values outside (0, 1) are replaced with 0.1
        max_iterations: Maximum number of secant updates
        precision: Residual tolerance and near-zero rate cutoff

    Returns:
        RateResult with the last estimate, iterations, status and message

    Notes:
        - status='converged' only means consecutive residuals agreed; the
          caller may still verify the residual itself (see solve_rate)
        - status='max_iterations' carries the last estimate
        - status='out_of_domain' (rate=NaN) if (1 + r)^n became undefined
    """
    guess = clamp_guess(guess)
    updates = 0

    def residual(rate: float, cutoff: float = precision) -> float:
        y = annuity_balance(rate, nper, pmt, pv, fv, at_start, cutoff)
        if not math.isfinite(y):
            raise DomainError(f"Non-finite balance residual at rate={rate}")
        return y

    def step(state: SecantState) -> SecantState:
        nonlocal updates
        updates += 1
        rate = (state.y1 * state.x0 - state.y0 * state.x1) / (state.y1 - state.y0)
        return SecantState(x0=state.x1, x1=rate, y0=state.y1, y1=residual(rate))

    def converged(state: SecantState) -> bool:
        return abs(state.y0 - state.y1) <= precision

    try:
        # y1 always uses the compounding form, even for a guess below precision
        seed = SecantState(
            x0=0.0,
            x1=guess,
            y0=pv + pmt * nper + fv,
            y1=residual(guess, cutoff=0.0),
        )
        outcome = bounded_iterate(step, seed, converged, max_iterations)
    except DomainError as e:
        logger.warning("Secant rate solver left the domain after %d updates: %s", updates, e)
        return RateResult(
            rate=math.nan,
            iterations=updates,
            method="secant",
            status="out_of_domain",
            message=str(e),
        )

    rate = outcome.state.x1
    if outcome.converged:
        logger.debug("Secant rate solver converged to %.12g in %d iterations", rate, outcome.iterations)
        return RateResult(
            rate=rate,
            iterations=outcome.iterations,
            method="secant",
            status="converged",
            message=f"Converged in {outcome.iterations} iterations",
        )

    logger.warning("Secant rate solver hit the %d iteration cap at rate=%.12g", max_iterations, rate)
    return RateResult(
        rate=rate,
        iterations=outcome.iterations,
        method="secant",
        status="max_iterations",
        message=f"Max iterations ({max_iterations}) reached without convergence",
    )
