"""
Periodic interest rate solver with automatic method selection.

This module provides the high-level interface for solving the annuity
rate, running the secant method first and falling back to Brent's method
when the secant iteration fails to converge or settles on a point that
does not satisfy the balance equation.
"""

import logging
import math
from typing import Sequence

from finsun.core.annuity import annuity_balance, compound_factor
from finsun.core.exceptions import ConvergenceError, DomainError
from finsun.solvers.brent import brent_rate
from finsun.solvers.secant import secant_rate
from finsun.utils.constants import RATE_DEFAULT_GUESS, RATE_RESIDUAL_TOLERANCE
from finsun.utils.types import AnnuityParams, RateResult

logger = logging.getLogger(__name__)


def satisfies_balance(
    rate: float,
    nper: float,
    pmt: float,
    pv: float,
    fv: float,
    at_start: bool,
    tolerance: float = RATE_RESIDUAL_TOLERANCE,
) -> bool:
    """
    Check that ``rate`` actually solves the balance equation.

    The residual is measured in future-value terms, so it is compared
    against the cash-flow scale grown by (1 + r)^n.

    Args:
        rate: Candidate periodic rate
        nper, pmt, pv, fv, at_start: Annuity parameters
        tolerance: Relative residual tolerance

    Returns:
        True if |residual| <= tolerance · scale
    """
    if not math.isfinite(rate):
        return False
    try:
        residual = annuity_balance(rate, nper, pmt, pv, fv, at_start)
        growth = max(1.0, compound_factor(rate, nper))
    except DomainError:
        return False

    scale = max(abs(pv), abs(pmt * nper), abs(fv), 1.0) * growth
    return abs(residual) <= tolerance * scale


def solve_rate(
    nper: float,
    pmt: float,
    pv: float,
    fv: float = 0.0,
    at_start: bool = False,
    guess: float = RATE_DEFAULT_GUESS,
    method: str = "auto",
) -> RateResult:
    """
    Solve for the periodic interest rate of an annuity.

    This is the main entry point for rate calculation. It never raises for
    numeric trouble; the returned result says whether it converged.

    Args:
        nper: Number of periods
        pmt: Payment per period (negative for payments made)
        pv: Present value
        fv: Future value, default 0.0
        at_start: True if payments are due at the start of each period
        guess: Seed rate for the secant method, default 0.1
        method: "auto" (default), "secant" or "brent"

    Returns:
        RateResult containing:
            - rate: Solved periodic rate (NaN after a domain failure)
            - iterations: Number of iterations used
            - method: Method that produced the rate ("secant" or "brent")
            - status: "converged", "stalled", "max_iterations" or "out_of_domain"
            - message: Detailed information about convergence

    Raises:
        ValueError: If method is not one of "auto", "secant", "brent"

    Examples:
        >>> # 30-year loan of 30,000 repaid at 146.62 per month
        >>> result = solve_rate(360, -146.62, 30000)
        >>> result.success, round(result.rate, 4)
        (True, 0.0035)

    Notes:
        - "secant" reproduces the classic spreadsheet RATE iteration and
          reports its outcome unchanged
        - "auto" rejects a secant result whose residual is not near zero
          and retries with Brent; if Brent also fails the secant result is
          returned, marked "stalled" when it had falsely converged
    """
    if method not in ("auto", "secant", "brent"):
        raise ValueError(f"method must be 'auto', 'secant' or 'brent', got '{method}'")

    if method == "brent":
        return brent_rate(nper, pmt, pv, fv, at_start)

    secant_result = secant_rate(nper, pmt, pv, fv, at_start, guess)
    if method == "secant":
        return secant_result

    if secant_result.success and satisfies_balance(
        secant_result.rate, nper, pmt, pv, fv, at_start
    ):
        return secant_result

    logger.warning(
        "Secant rate solver %s (%s); falling back to Brent",
        secant_result.status,
        secant_result.message,
    )
    brent_result = brent_rate(nper, pmt, pv, fv, at_start)
    if brent_result.success:
        return brent_result

    if secant_result.success:
        secant_result.status = "stalled"
        secant_result.message = (
            f"Secant settled on a non-root at rate={secant_result.rate:.6g}; "
            f"{brent_result.message}"
        )
    return secant_result


def rate(
    nper: float,
    pmt: float,
    pv: float,
    fv: float = 0.0,
    at_start: bool = False,
    guess: float = RATE_DEFAULT_GUESS,
    strict: bool = False,
    method: str = "auto",
) -> float:
    """
    Periodic interest rate of an annuity as a plain float.

    Args:
        nper, pmt, pv, fv, at_start: Annuity parameters
        guess: Seed rate, default 0.1
        strict: Raise instead of returning a best-effort estimate
        method: Passed through to solve_rate

    Returns:
        Solved rate. With strict=False the last estimate is returned even
        when the solver did not converge (NaN after a domain failure).

    Raises:
        ConvergenceError: strict=True and the solver did not converge
        DomainError: strict=True and the balance equation left its domain
    """
    result = solve_rate(nper, pmt, pv, fv, at_start, guess, method)

    if strict and not result.success:
        if result.status == "out_of_domain":
            raise DomainError(result.message)
        raise ConvergenceError(result.message)

    return result.rate


def solve_rates(params: Sequence[AnnuityParams], method: str = "auto") -> list[RateResult]:
    """
    Solve the periodic rate for several annuities.

    Args:
        params: Annuity parameter sets
        method: Passed through to solve_rate

    Returns:
        List of RateResult objects, one per parameter set
    """
    return [
        solve_rate(p.nper, p.pmt, p.pv, p.fv, p.at_start, p.guess, method)
        for p in params
    ]
