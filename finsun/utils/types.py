"""
Data types and structures for annuity and solar calculations.

This module defines dataclasses and types used throughout the toolkit
for representing annuities, coordinates, and solver results.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional

SolverStatus = Literal["converged", "stalled", "max_iterations", "out_of_domain"]
SolarEvent = Literal["rise", "set"]
RateMethod = Literal["secant", "brent"]


@dataclass(frozen=True)
class AnnuityParams:
    """
    Immutable container for annuity parameters.

    Attributes:
        nper: Number of payment periods (may be fractional)
        pmt: Payment per period (cash paid out is negative)
        pv: Present value
        fv: Future value, the balance wanted after the last payment
        at_start: True if payments fall at the start of each period
        guess: Seed rate for the rate solver; outside (0, 1) falls back to 10%
    """
    nper: float
    pmt: float
    pv: float
    fv: float = 0.0
    at_start: bool = False
    guess: float = 0.1

    def __post_init__(self) -> None:
        """Validate the period count, the only value the formulas divide by."""
        if self.nper == 0:
            raise ValueError(f"Number of periods must be non-zero, got nper={self.nper}")
        for name in ("nper", "pmt", "pv", "fv"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {name}={value}")


@dataclass(frozen=True)
class GeoCoordinate:
    """
    Observer location in degrees.

    Latitude is expected in [-90, 90] and longitude in [-180, 180] (east
    positive). Neither range is enforced.
    """
    latitude: float
    longitude: float


@dataclass
class IterationResult:
    """
    Outcome of a bounded iteration.

    Attributes:
        state: Last state reached
        iterations: Number of updates applied
        converged: Whether the convergence predicate held on the last state
        history: Every state visited, starting with the seed
    """
    state: Any
    iterations: int
    converged: bool
    history: list = field(default_factory=list)


@dataclass
class RateResult:
    """
    Result from the periodic rate solver.

    Attributes:
        rate: Solved periodic interest rate (NaN after a domain failure)
        iterations: Number of iterations used
        method: Method that produced the rate ('secant' or 'brent')
        status: 'converged', 'stalled', 'max_iterations' or 'out_of_domain'
        message: Additional information about convergence
    """
    rate: float
    iterations: int
    method: RateMethod
    status: SolverStatus
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status == "converged"


@dataclass(frozen=True)
class SolarPosition:
    """
    Low-precision solar coordinates for one trial instant.

    Attributes:
        century: Julian centuries since 2000-01-01
        mean_longitude: Mean solar longitude (degrees)
        mean_anomaly: Mean anomaly (radians)
        ecliptic_longitude: Ecliptic longitude (radians)
        obliquity: Obliquity of the ecliptic (radians)
        declination: Solar declination (radians)
    """
    century: float
    mean_longitude: float
    mean_anomaly: float
    ecliptic_longitude: float
    obliquity: float
    declination: float


@dataclass
class SolarEventResult:
    """
    Result from the sunrise/sunset solver.

    Attributes:
        event: 'rise' or 'set'
        ut_degrees: Solved event time as a UT angle (15 degrees per hour)
        utc_hours: ut_degrees expressed in hours
        zone_offset: Whole-hour UTC offset used for the local clock
        local_time: Timezone-aware local timestamp, None unless converged
        iterations: Number of fixed-point updates used
        status: 'converged', 'max_iterations' or 'out_of_domain'
        message: Additional information about convergence
        history: Trial hour angles visited, starting with the seed
    """
    event: SolarEvent
    ut_degrees: float
    utc_hours: float
    zone_offset: int
    local_time: Optional[datetime]
    iterations: int
    status: SolverStatus
    message: str = ""
    history: list[float] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == "converged"
