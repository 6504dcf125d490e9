"""
Numerical constants and tolerances for annuity and solar calculations.

This module defines the convergence criteria for the two iterative solvers
and the astronomical constants used by the sunrise/sunset model. Values are
fixed; solver functions accept keyword overrides where a caller needs them.
"""

from datetime import date

# Rate solver (secant method) parameters
RATE_MAX_ITERATIONS = 128  # Hard cap on secant updates
RATE_PRECISION = 1e-9  # Residual tolerance; also the near-zero rate cutoff
RATE_DEFAULT_GUESS = 0.1  # 10% per period when the supplied guess is outside (0, 1)
RATE_RESIDUAL_TOLERANCE = 1e-6  # Max residual relative to cash-flow scale to accept a root

# Rate solver (Brent fallback) bracket
RATE_BRACKET_LOWER = -0.99  # -99% per period; (1 + r) must stay positive
RATE_BRACKET_UPPER = 1.0  # 100% per period
RATE_BRENT_XTOL = 1e-12  # Absolute tolerance on the rate

# Solar event solver parameters
SOLAR_MAX_ITERATIONS = 128  # Hard cap on fixed-point updates
SOLAR_TOLERANCE_DEG = 0.1  # Stop when the hour angle moves less than this
SOLAR_INITIAL_HOUR_ANGLE = 180.0  # Trial angle at local solar noon

# Astronomical constants
SUN_ALTITUDE_DEG = -0.833  # Refraction plus apparent solar radius
J2000_EPOCH = date(2000, 1, 1)  # Day-count epoch
DAYS_PER_JULIAN_CENTURY = 36525.0
DEGREES_PER_HOUR = 15.0  # Earth rotation
MINUTES_PER_HOUR = 60.0
HOURS_PER_DAY = 24.0
