"""
Unit tests for the periodic rate solver.

This module validates:
1. Known loan solutions and round trips through pmt()
2. Seed guess clamping and run-to-run determinism
3. Iteration cap and domain failure reporting
4. Secant vs Brent fallback logic in auto mode
5. Best-effort vs strict boundary behaviour
"""

import math

import pytest

from finsun.core.annuity import pmt, pv
from finsun.core.exceptions import ConvergenceError, DomainError
from finsun.solvers import rate as rate_module
from finsun.solvers.brent import brent_rate
from finsun.solvers.rate import rate, satisfies_balance, solve_rate, solve_rates
from finsun.solvers.secant import clamp_guess, secant_rate
from finsun.utils.types import AnnuityParams, RateResult


# ===========================
# Known Solutions Tests
# ===========================


def test_known_loan_rate(loan_params):
    """30,000 repaid at 146.62/month for 30 years is ~0.35% per month."""
    result = solve_rate(**loan_params)

    assert result.success, f"Solver failed: {result.message}"
    assert abs(result.rate - 0.0035) < 1e-4, f"Expected ~0.0035, got {result.rate}"


def test_known_loan_rate_reproduces_present_value(loan_params):
    solved = rate(**loan_params)
    recovered = pv(solved, loan_params["nper"], loan_params["pmt"], 0.0, False)
    assert recovered == pytest.approx(30000.0, abs=1e-4)


def test_roundtrip_car_loan(car_loan_params):
    """Solve for the rate from a synthetic payment, should recover it."""
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"], p["fv"])

    result = solve_rate(p["nper"], payment, p["pv"], p["fv"])

    assert result.success
    assert abs(result.rate - p["rate"]) < 1e-8


@pytest.mark.parametrize("true_rate", [0.001, 0.004, 0.01, 0.03, 0.08])
def test_roundtrip_various_rates(true_rate):
    payment = pmt(true_rate, 48, 20000.0)
    result = solve_rate(48, payment, 20000.0)

    assert result.success, f"Failed for rate={true_rate}: {result.message}"
    assert abs(result.rate - true_rate) < 1e-8


def test_roundtrip_annuity_due():
    payment = pmt(0.01, 24, 5000.0, 1000.0, at_start=True)
    result = solve_rate(24, payment, 5000.0, 1000.0, at_start=True)

    assert result.success
    assert abs(result.rate - 0.01) < 1e-8


def test_secant_close_guess_converges():
    payment = pmt(0.005, 60, 10000.0)
    result = secant_rate(60, payment, 10000.0, guess=0.004)

    assert result.success
    assert result.method == "secant"
    assert result.iterations < 20
    assert abs(result.rate - 0.005) < 1e-8


def test_zero_rate_root():
    """A loan repaid with no interest solves to a zero rate via the linear branch."""
    result = secant_rate(12, -100.0, 1200.0)

    assert result.success
    assert abs(result.rate) < 1e-12


def test_brent_matches_secant(car_loan_params):
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])

    brent_result = brent_rate(p["nper"], payment, p["pv"])

    assert brent_result.success
    assert brent_result.method == "brent"
    assert brent_result.iterations > 0
    assert abs(brent_result.rate - p["rate"]) < 1e-9


# ===========================
# Guess and Determinism Tests
# ===========================


@pytest.mark.parametrize("guess, expected", [
    (-0.5, 0.1),
    (0.0, 0.1),
    (1.0, 0.1),
    (3.0, 0.1),
    (0.05, 0.05),
])
def test_clamp_guess(guess, expected):
    assert clamp_guess(guess) == expected


def test_invalid_guess_behaves_like_default(loan_params):
    """A guess outside (0, 1) is silently replaced, never rejected."""
    default = secant_rate(**loan_params)
    clamped = secant_rate(**loan_params, guess=5.0)

    assert clamped.rate == default.rate
    assert clamped.iterations == default.iterations


def test_solver_is_deterministic(loan_params):
    first = solve_rate(**loan_params)
    second = solve_rate(**loan_params)

    assert first.rate == second.rate
    assert first == second


# ===========================
# Iteration Cap and Domain Tests
# ===========================


def test_secant_cap_is_enforced(loan_params):
    result = secant_rate(**loan_params, max_iterations=1)

    assert result.status == "max_iterations"
    assert not result.success
    assert result.iterations == 1
    assert math.isfinite(result.rate)


def test_secant_zero_cap_returns_guess(loan_params):
    result = secant_rate(**loan_params, guess=0.2, max_iterations=0)

    assert result.status == "max_iterations"
    assert result.iterations == 0
    assert result.rate == 0.2


def test_secant_overflow_is_out_of_domain():
    """(1.5)^10000 overflows; the solver reports it instead of raising."""
    result = secant_rate(10000, -100.0, 1000.0, guess=0.5)

    assert result.status == "out_of_domain"
    assert math.isnan(result.rate)
    assert result.iterations == 0


def test_brent_no_sign_change():
    """Receiving money both now and every period has no rate solution."""
    result = brent_rate(12, 100.0, 1000.0)

    assert result.status == "out_of_domain"
    assert math.isnan(result.rate)
    assert "doesn't change sign" in result.message


def test_satisfies_balance(car_loan_params):
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])

    assert satisfies_balance(p["rate"], p["nper"], payment, p["pv"], 0.0, False)
    assert not satisfies_balance(0.02, p["nper"], payment, p["pv"], 0.0, False)
    assert not satisfies_balance(math.nan, p["nper"], payment, p["pv"], 0.0, False)


# ===========================
# Method Selection Tests
# ===========================


def test_method_secant_only(car_loan_params):
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])
    result = solve_rate(p["nper"], payment, p["pv"], method="secant")

    assert result.success
    assert result.method == "secant"


def test_method_brent_only(car_loan_params):
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])
    result = solve_rate(p["nper"], payment, p["pv"], method="brent")

    assert result.success
    assert result.method == "brent"


def test_invalid_method_raises():
    with pytest.raises(ValueError, match="method must be"):
        solve_rate(12, -100.0, 1000.0, method="newton")


def test_auto_falls_back_to_brent(monkeypatch, car_loan_params):
    """When the secant method hits its cap, auto mode retries with Brent."""
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])

    def capped_secant(*args, **kwargs):
        return RateResult(0.3, 128, "secant", "max_iterations", "capped")

    monkeypatch.setattr(rate_module, "secant_rate", capped_secant)
    result = solve_rate(p["nper"], payment, p["pv"])

    assert result.success
    assert result.method == "brent"
    assert abs(result.rate - p["rate"]) < 1e-9


def test_auto_rejects_false_convergence(monkeypatch, car_loan_params):
    """A 'converged' secant result that isn't a root is retried with Brent."""
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])

    def stuck_secant(*args, **kwargs):
        return RateResult(2e-16, 3, "secant", "converged", "Converged in 3 iterations")

    monkeypatch.setattr(rate_module, "secant_rate", stuck_secant)
    result = solve_rate(p["nper"], payment, p["pv"])

    assert result.method == "brent"
    assert abs(result.rate - p["rate"]) < 1e-9


def test_auto_marks_stalled_when_both_fail(monkeypatch):
    def stuck_secant(*args, **kwargs):
        return RateResult(0.05, 3, "secant", "converged", "Converged in 3 iterations")

    monkeypatch.setattr(rate_module, "secant_rate", stuck_secant)
    result = solve_rate(12, 100.0, 1000.0)

    assert result.status == "stalled"
    assert result.method == "secant"
    assert result.rate == 0.05
    assert not result.success


# ===========================
# Boundary Function Tests
# ===========================


def test_rate_returns_float(car_loan_params):
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])
    solved = rate(p["nper"], payment, p["pv"])

    assert isinstance(solved, float)
    assert abs(solved - p["rate"]) < 1e-8


def test_rate_best_effort_returns_nan_on_domain_failure():
    """Both methods overflow on a 10,000-period term; the float is NaN."""
    assert math.isnan(rate(10000, -100.0, 1000.0, guess=0.5))


def test_rate_strict_raises_domain_error():
    with pytest.raises(DomainError):
        rate(10000, -100.0, 1000.0, guess=0.5, strict=True)


def test_rate_best_effort_returns_last_estimate(monkeypatch):
    """Without strict mode an unconverged estimate is returned unchanged."""

    def capped(*args, **kwargs):
        return RateResult(0.3, 128, "secant", "max_iterations", "capped")

    monkeypatch.setattr(rate_module, "secant_rate", capped)
    assert rate(12, 100.0, 1000.0) == 0.3


def test_rate_strict_raises_convergence_error(monkeypatch):
    def capped(*args, **kwargs):
        return RateResult(0.3, 128, "secant", "max_iterations", "Max iterations (128) reached")

    monkeypatch.setattr(rate_module, "secant_rate", capped)

    assert rate(12, -100.0, 1000.0, method="secant") == 0.3
    with pytest.raises(ConvergenceError, match="Max iterations"):
        rate(12, -100.0, 1000.0, strict=True, method="secant")


def test_solve_rates_batch():
    params = [
        AnnuityParams(nper=48, pmt=pmt(r, 48, 20000.0), pv=20000.0)
        for r in (0.002, 0.006, 0.012)
    ]
    results = solve_rates(params)

    assert len(results) == 3
    for result, true_rate in zip(results, (0.002, 0.006, 0.012)):
        assert result.success
        assert abs(result.rate - true_rate) < 1e-8


def test_result_contains_metadata(car_loan_params):
    p = car_loan_params
    payment = pmt(p["rate"], p["nper"], p["pv"])
    result = solve_rate(p["nper"], payment, p["pv"])

    assert result.method in ("secant", "brent")
    assert result.status in ("converged", "stalled", "max_iterations", "out_of_domain")
    assert isinstance(result.success, bool)
    assert isinstance(result.message, str)
