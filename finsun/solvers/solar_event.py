"""
Fixed-point solver for sunrise and sunset times.

The event time is the universal time, expressed as an angle, at which the
sun's centre reaches the event altitude. Because the sun's position
depends on the time being solved for, the time is found by iteration:
starting from noon (180 degrees), the solar position is evaluated at the
trial time, the hour angle to the horizon is computed, and the trial is
moved to the implied event time until it stops moving.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from finsun.core.angles import to_radians
from finsun.core.exceptions import ConvergenceError, DomainError
from finsun.core.solar import (
    epoch_day_count,
    estimate_zone_offset,
    greenwich_hour_angle,
    horizon_correction,
    solar_position,
)
from finsun.solvers.iteration import bounded_iterate
from finsun.utils.constants import (
    DEGREES_PER_HOUR,
    HOURS_PER_DAY,
    MINUTES_PER_HOUR,
    SOLAR_INITIAL_HOUR_ANGLE,
    SOLAR_MAX_ITERATIONS,
    SOLAR_TOLERANCE_DEG,
)
from finsun.utils.types import GeoCoordinate, SolarEvent, SolarEventResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolarIterationState:
    """A trial hour angle and the event time it implies (degrees).

    The seed has no trial yet: ``ut0`` is None and ``ut_start`` holds the
    first trial.
    """

    ut0: Optional[float]
    ut_start: float


def next_trial(
    ut0: float,
    latitude_rad: float,
    longitude: float,
    day_count: int,
    event: SolarEvent,
) -> float:
    """
    Event time implied by the solar position at trial time ``ut0``.

    Formula:
        ut = ut0 - GHA(ut0) - longitude ∓ H
    with H subtracted for sunrise and added for sunset.

    Raises:
        DomainError: If the sun does not cross the event altitude that day
    """
    position = solar_position(day_count, ut0)
    gha = greenwich_hour_angle(ut0, position)
    arc = horizon_correction(latitude_rad, position.declination)
    if event == "rise":
        return ut0 - gha - longitude - arc
    return ut0 - gha - longitude + arc


def local_clock(ut_degrees: float, zone_offset: int, on: date) -> datetime:
    """
    Local timestamp for a UT angle on a given calendar date.

    The local hour is wrapped into [0, 24) and truncated to whole minutes;
    the date is not advanced when the event falls across local midnight.
    """
    local_hours = (ut_degrees / DEGREES_PER_HOUR + zone_offset) % HOURS_PER_DAY
    hour, minute = divmod(int(local_hours * MINUTES_PER_HOUR), int(MINUTES_PER_HOUR))
    return datetime.combine(
        on,
        time(hour % int(HOURS_PER_DAY), minute),
        tzinfo=timezone(timedelta(hours=zone_offset)),
    )


def solve_event(
    latitude: float,
    longitude: float,
    reference_day: date,
    event: SolarEvent,
    output_date: Optional[date] = None,
    zone_offset: Optional[int] = None,
    max_iterations: int = SOLAR_MAX_ITERATIONS,
    tolerance: float = SOLAR_TOLERANCE_DEG,
) -> SolarEventResult:
    """
    Solve for the time of sunrise or sunset.

    Args:
        latitude: Observer latitude in degrees (north positive)
        longitude: Observer longitude in degrees (east positive)
        reference_day: Day whose solar position is used
        event: "rise" or "set"
        output_date: Calendar date stamped on the local time, defaults to
            reference_day
        zone_offset: Whole-hour UTC offset; estimated from longitude if None
        max_iterations: Maximum number of fixed-point updates
        tolerance: Stop once the trial moves less than this (degrees)

    Returns:
        SolarEventResult; local_time is None unless status='converged'

    Raises:
        ValueError: If event is not "rise" or "set"

    Notes:
        - Inside the polar circles the horizon correction has no solution
          around the solstices; status='out_of_domain' reports which case
        - Latitude and longitude ranges are not validated
    """
    if event not in ("rise", "set"):
        raise ValueError(f"event must be 'rise' or 'set', got '{event}'")

    if output_date is None:
        output_date = reference_day
    if zone_offset is None:
        zone_offset = estimate_zone_offset(longitude)

    latitude_rad = to_radians(latitude)
    day_count = epoch_day_count(reference_day)
    evaluations = 0

    def advance(ut0: float) -> SolarIterationState:
        nonlocal evaluations
        evaluations += 1
        return SolarIterationState(
            ut0=ut0,
            ut_start=next_trial(ut0, latitude_rad, longitude, day_count, event),
        )

    def step(state: SolarIterationState) -> SolarIterationState:
        return advance(state.ut_start)

    def converged(state: SolarIterationState) -> bool:
        return state.ut0 is not None and abs(state.ut_start - state.ut0) < tolerance

    try:
        seed = SolarIterationState(ut0=None, ut_start=SOLAR_INITIAL_HOUR_ANGLE)
        outcome = bounded_iterate(step, seed, converged, max_iterations)
    except DomainError as e:
        logger.warning(
            "Sun%s at latitude %.4f on %s has no solution: %s",
            event, latitude, reference_day.isoformat(), e,
        )
        return SolarEventResult(
            event=event,
            ut_degrees=math.nan,
            utc_hours=math.nan,
            zone_offset=zone_offset,
            local_time=None,
            iterations=evaluations,
            status="out_of_domain",
            message=str(e),
        )

    final = outcome.state
    history = [s.ut_start for s in outcome.history]

    if not outcome.converged:
        logger.warning("Sun%s solver hit the %d iteration cap", event, max_iterations)
        return SolarEventResult(
            event=event,
            ut_degrees=final.ut_start,
            utc_hours=final.ut_start / DEGREES_PER_HOUR,
            zone_offset=zone_offset,
            local_time=None,
            iterations=outcome.iterations,
            status="max_iterations",
            message=f"Max iterations ({max_iterations}) reached without convergence",
            history=history,
        )

    logger.debug("Sun%s converged to %.4f degrees in %d evaluations", event, final.ut_start, outcome.iterations)
    return SolarEventResult(
        event=event,
        ut_degrees=final.ut_start,
        utc_hours=final.ut_start / DEGREES_PER_HOUR,
        zone_offset=zone_offset,
        local_time=local_clock(final.ut_start, zone_offset, output_date),
        iterations=outcome.iterations,
        status="converged",
        message=f"Converged in {outcome.iterations} evaluations",
        history=history,
    )


def _event_time(
    latitude: float,
    longitude: float,
    event: SolarEvent,
    today: Optional[date],
    zone_offset: Optional[int],
) -> datetime:
    if today is None:
        today = date.today()

    result = solve_event(latitude, longitude, today, event, today, zone_offset)
    if result.status == "out_of_domain":
        raise DomainError(result.message)
    if not result.success:
        raise ConvergenceError(result.message)
    return result.local_time


def sunrise(
    latitude: float,
    longitude: float,
    today: Optional[date] = None,
    zone_offset: Optional[int] = None,
) -> datetime:
    """
    Local time of sunrise.

    Args:
        latitude: Latitude in degrees (north positive)
        longitude: Longitude in degrees (east positive)
        today: Date to solve for, read from the local clock if None
        zone_offset: Whole-hour UTC offset, estimated from longitude if None

    Returns:
        Timezone-aware datetime on ``today``, truncated to the minute

    Raises:
        DomainError: During polar day or night
        ConvergenceError: If the iteration cap was reached

    Examples:
        >>> # Beijing, summer solstice
        >>> sunrise(39.9, 116.4, date(2024, 6, 21)).hour
        4
    """
    return _event_time(latitude, longitude, "rise", today, zone_offset)


def sunset(
    latitude: float,
    longitude: float,
    today: Optional[date] = None,
    zone_offset: Optional[int] = None,
) -> datetime:
    """Local time of sunset. Arguments and errors as for sunrise()."""
    return _event_time(latitude, longitude, "set", today, zone_offset)


def solar_events(
    location: GeoCoordinate, day: date
) -> tuple[SolarEventResult, SolarEventResult]:
    """Sunrise and sunset results for one location and day."""
    return (
        solve_event(location.latitude, location.longitude, day, "rise"),
        solve_event(location.latitude, location.longitude, day, "set"),
    )


def day_length(latitude: float, longitude: float, today: date) -> timedelta:
    """
    Time from sunrise to sunset on ``today``.

    Computed from the solved UT angles rather than the minute-truncated
    clock times.

    Raises:
        DomainError: During polar day or night
        ConvergenceError: If either solve hit the iteration cap
    """
    results = solar_events(GeoCoordinate(latitude, longitude), today)
    for result in results:
        if result.status == "out_of_domain":
            raise DomainError(result.message)
        if not result.success:
            raise ConvergenceError(result.message)

    rise, set_ = results
    return timedelta(hours=set_.utc_hours - rise.utc_hours)
