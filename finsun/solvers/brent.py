"""
Brent's method for the periodic interest rate of an annuity.

This module implements a bracketing fallback for the rate solver using
scipy's Brent root finder. It is slower than the secant method but cannot
stall or wander off, and converges whenever the balance equation changes
sign inside the bracket.
"""

import logging
import math

from scipy.optimize import brentq

from finsun.core.annuity import annuity_balance
from finsun.core.exceptions import DomainError
from finsun.utils.constants import (
    RATE_BRACKET_LOWER,
    RATE_BRACKET_UPPER,
    RATE_BRENT_XTOL,
    RATE_MAX_ITERATIONS,
)
from finsun.utils.types import RateResult

logger = logging.getLogger(__name__)


def brent_rate(
    nper: float,
    pmt: float,
    pv: float,
    fv: float = 0.0,
    at_start: bool = False,
    rate_lower: float = RATE_BRACKET_LOWER,
    rate_upper: float = RATE_BRACKET_UPPER,
    tolerance: float = RATE_BRENT_XTOL,
    max_iterations: int = RATE_MAX_ITERATIONS,
) -> RateResult:
    """
    Solve for the periodic rate using Brent's method.

    Brent's method combines bisection, the secant method and inverse
    quadratic interpolation. It requires the balance residual to have
    opposite signs at the two ends of the bracket.

    Args:
        nper, pmt, pv, fv, at_start: Annuity parameters
        rate_lower: Lower end of the rate bracket
        rate_upper: Upper end of the rate bracket
        tolerance: Absolute tolerance on the rate
        max_iterations: Maximum number of Brent iterations

    Returns:
        RateResult with rate, iterations, method, status and message.
        A bracket without a sign change yields status='out_of_domain'.
    """

    def objective(rate: float) -> float:
        return annuity_balance(rate, nper, pmt, pv, fv, at_start)

    try:
        rate, info = brentq(
            objective,
            rate_lower,
            rate_upper,
            xtol=tolerance,
            maxiter=max_iterations,
            full_output=True,
            disp=False,
        )
    except DomainError as e:
        logger.warning("Brent rate solver left the domain: %s", e)
        return RateResult(
            rate=math.nan,
            iterations=0,
            method="brent",
            status="out_of_domain",
            message=str(e),
        )
    except ValueError:
        # brentq raises ValueError when the bracket has no sign change
        obj_lower = objective(rate_lower)
        obj_upper = objective(rate_upper)
        error_msg = (
            f"Brent method failed: balance doesn't change sign on the bracket. "
            f"y({rate_lower:.4f}) = {obj_lower:.4g}, "
            f"y({rate_upper:.4f}) = {obj_upper:.4g}."
        )
        logger.warning(error_msg)
        return RateResult(
            rate=math.nan,
            iterations=0,
            method="brent",
            status="out_of_domain",
            message=error_msg,
        )

    if not info.converged:
        logger.warning("Brent rate solver hit the %d iteration cap at rate=%.12g", max_iterations, rate)
        return RateResult(
            rate=rate,
            iterations=info.iterations,
            method="brent",
            status="max_iterations",
            message=f"Max iterations ({max_iterations}) reached: {info.flag}",
        )

    residual = abs(objective(rate))
    logger.debug("Brent rate solver converged to %.12g in %d iterations", rate, info.iterations)
    return RateResult(
        rate=rate,
        iterations=info.iterations,
        method="brent",
        status="converged",
        message=f"Converged with balance residual {residual:.2e}",
    )
