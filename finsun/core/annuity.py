"""
Closed-form time-value-of-money formulas for level annuities.

This module implements the standard spreadsheet annuity functions (PMT,
NPER, PV, FV, NPV) plus the annuity balance equation that ties them
together and that the rate solver drives to zero.

Conventions:
    - Cash paid out is negative, cash received is positive.
    - ``rate`` is the periodic rate (e.g. annual rate / 12 for monthly loans).
    - ``at_start`` selects annuity-due timing (payments at the start of each
      period); the default is an ordinary annuity (payments at period end).

Balance equation:
    pv·(1+r)^n + pmt·(1 + r·t)·((1+r)^n - 1)/r + fv = 0

Every formula branches on ``rate == 0`` and uses the simple-interest limit
there to avoid dividing by the rate. Near zero the annuity factor
((1+r)^n - 1)/r and the logarithms go through expm1/log1p so tiny rates
stay continuous with that limit.
"""

import math
from typing import Sequence

from finsun.core.exceptions import DomainError
from finsun.utils.constants import RATE_PRECISION


def compound_factor(rate: float, nper: float) -> float:
    """
    Growth factor (1 + rate)^nper.

    Raises:
        DomainError: If 1 + rate is negative and nper is fractional, or the
            factor overflows a double
    """
    try:
        return math.pow(1.0 + rate, nper)
    except (ValueError, OverflowError) as e:
        raise DomainError(
            f"Cannot compound rate={rate} over nper={nper}: {e}"
        ) from e


def annuity_factor(rate: float, nper: float) -> float:
    """
    Future value of ``nper`` unit payments, ((1 + rate)^nper - 1) / rate.

    For rates above -1 the numerator is computed as expm1(n·log1p(r)), so
    the factor tends smoothly to ``nper`` as the rate tends to zero instead
    of cancelling to 0.

    Raises:
        DomainError: If the growth factor is undefined or overflows
    """
    if rate == 0:
        return float(nper)

    if rate > -1.0:
        try:
            growth = math.expm1(nper * math.log1p(rate))
        except OverflowError as e:
            raise DomainError(
                f"Cannot compound rate={rate} over nper={nper}: {e}"
            ) from e
    else:
        growth = compound_factor(rate, nper) - 1.0
    return growth / rate


def _timing_factor(rate: float, at_start: bool) -> float:
    """Payment scaling: 1 + r for annuity-due, 1 for ordinary annuities."""
    return 1.0 + rate if at_start else 1.0


def _safe_log1p(x: float, name: str) -> float:
    if x <= -1.0:
        raise DomainError(f"Logarithm of non-positive {name}={1.0 + x}")
    return math.log1p(x)


def pmt(
    rate: float, nper: float, pv: float, fv: float = 0.0, at_start: bool = False
) -> float:
    """
    Payment per period for a loan or investment.

    Args:
        rate: Periodic interest rate
        nper: Total number of payments
        pv: Present value (principal)
        fv: Balance wanted after the last payment, default 0.0
        at_start: True if payments are due at the start of each period

    Returns:
        Level payment per period (negative for a loan taken)

    Raises:
        DomainError: If no level payment exists, e.g. (1+r)^n == 1 at a
            rate of -2 over an even term

    Formula:
        r = 0:  -(fv + pv) / n
        r ≠ 0:  (fv + pv·(1+r)^n)·r / (k·(1 - (1+r)^n)),  k = 1+r if at_start else 1

    Examples:
        >>> # 30-year loan of 30,000 at 0.35% per month
        >>> abs(pmt(0.0035, 360, 30000) + 146.7) < 0.1
        True
        >>> pmt(0, 360, 30000) == -30000 / 360
        True
    """
    if nper == 0:
        raise ValueError("Number of periods must be non-zero")

    if rate == 0:
        return -(fv + pv) / nper

    f = compound_factor(rate, nper)
    scale = _timing_factor(rate, at_start) * annuity_factor(rate, nper)
    if scale == 0:
        raise DomainError(f"No level payment exists at rate={rate} over nper={nper}")
    return -(fv + pv * f) / scale


def nper(
    rate: float, pmt: float, pv: float, fv: float = 0.0, at_start: bool = False
) -> float:
    """
    Number of periods needed to move from ``pv`` to ``fv`` with level payments.

    Args:
        rate: Periodic interest rate
        pmt: Payment per period
        pv: Present value
        fv: Future value, default 0.0
        at_start: True if payments are due at the start of each period

    Returns:
        Number of periods (generally fractional)

    Raises:
        DomainError: If the payment can never reach the target balance
            (the logarithm arguments have opposite signs)

    Formula:
        a = k·pmt / r
        n = [ln(a - fv) - ln(pv + a)] / ln(1 + r)
    """
    if rate == 0:
        if pmt == 0:
            raise ValueError("Payment must be non-zero when rate is zero")
        return -(fv + pv) / pmt

    a = _timing_factor(rate, at_start) * pmt / rate
    if pv + a == 0:
        raise DomainError(f"Logarithm of non-positive pv + pmt·k/r={pv + a}")

    # ln((a - fv) / (pv + a)) without cancelling when a dwarfs pv and fv
    numerator = _safe_log1p(-(fv + pv) / (pv + a), "(a - fv)/(pv + a)")
    return numerator / _safe_log1p(rate, "1 + rate")


def npv(rate: float, cashflows: Sequence[float]) -> float:
    """
    Net present value of a series of periodic cash flows.

    The first cash flow is discounted one full period, matching the
    spreadsheet NPV convention; add a time-zero flow separately.

    Args:
        rate: Discount rate per period
        cashflows: Cash flows at the end of periods 1, 2, ...

    Returns:
        Sum of discounted cash flows

    Raises:
        DomainError: If a discount factor is zero (rate of -1)
    """
    growth = 1.0 + rate
    discount = growth
    total = 0.0
    for i, cf in enumerate(cashflows, start=1):
        if discount == 0:
            raise DomainError(f"Discount factor is zero at rate={rate}, period {i}")
        total += cf / discount
        discount *= growth
    return total


def pv(
    rate: float, nper: float, pmt: float, fv: float = 0.0, at_start: bool = False
) -> float:
    """
    Present value of a level payment stream plus a terminal balance.

    Args:
        rate: Periodic interest rate
        nper: Total number of payments
        pmt: Payment per period
        fv: Future value, default 0.0
        at_start: True if payments are due at the start of each period

    Returns:
        Present value (positive for the principal of a loan repaid with
        negative payments)

    Raises:
        DomainError: If (1+r)^n is zero, so nothing discounts back to today

    Formula:
        r = 0:  -(n·pmt + fv)
        r ≠ 0:  [((1 - (1+r)^n) / r)·k·pmt - fv] / (1+r)^n
    """
    if rate == 0:
        return -(nper * pmt + fv)

    f = compound_factor(rate, nper)
    if f == 0:
        raise DomainError(f"Growth factor is zero at rate={rate} over nper={nper}")
    payments = annuity_factor(rate, nper) * _timing_factor(rate, at_start) * pmt
    return -(payments + fv) / f


def fv(
    rate: float, nper: float, pmt: float, pv: float = 0.0, at_start: bool = False
) -> float:
    """
    Future value of a level payment stream plus an initial balance.

    Args:
        rate: Periodic interest rate
        nper: Total number of payments
        pmt: Payment per period
        pv: Present value, default 0.0
        at_start: True if payments are due at the start of each period

    Returns:
        Balance after the last payment

    Formula:
        r = 0:  -(pv + n·pmt)
        r ≠ 0:  (1 - (1+r)^n)·k·pmt / r - pv·(1+r)^n
    """
    if rate == 0:
        return -(pv + nper * pmt)

    f = compound_factor(rate, nper)
    payments = annuity_factor(rate, nper) * _timing_factor(rate, at_start) * pmt
    return -payments - pv * f


def annuity_balance(
    rate: float,
    nper: float,
    pmt: float,
    pv: float,
    fv: float,
    at_start: bool = False,
    precision: float = RATE_PRECISION,
) -> float:
    """
    Residual of the annuity balance equation at a trial rate.

    Zero exactly when ``rate`` is consistent with the other four values.
    Below ``precision`` the first-order expansion in the rate is used so the
    residual stays finite as the rate approaches zero.

    Formula:
        |r| < precision:  pv·(1 + n·r) + pmt·(1 + r·t)·n + fv
        otherwise:        pv·f + pmt·(1/r + t)·(f - 1) + fv,  f = (1+r)^n

    Raises:
        DomainError: If (1 + rate)^nper is undefined or overflows
    """
    timing = 1.0 if at_start else 0.0
    if abs(rate) < precision:
        return pv * (1.0 + nper * rate) + pmt * (1.0 + rate * timing) * nper + fv

    f = compound_factor(rate, nper)
    return pv * f + pmt * (1.0 / rate + timing) * (f - 1.0) + fv
