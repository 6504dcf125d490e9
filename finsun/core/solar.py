"""
Low-precision solar position terms for sunrise/sunset estimation.

The sun's position is evaluated at a trial universal time expressed as an
hour angle in degrees (15 degrees per hour, 180 = noon UT). Accuracy is a
minute or two at mid-latitudes, which is ample for civil sunrise tables.

Mathematical Background:
    t = (days since 2000-01-01 + UT/360) / 36525        Julian centuries
    L = 280.460 + 36000.777·t                           mean longitude
    G = 357.528 + 35999.050·t                           mean anomaly
    λ = L + 1.915·sin G + 0.020·sin 2G                  ecliptic longitude
    ε = 23.4393 - 0.0130·t                              obliquity
    δ = asin(sin ε · sin λ)                             declination

    The event occurs when the sun's centre is 0.833 degrees below the
    horizon (34' of refraction plus a 16' solar semi-diameter).
"""

import math
from datetime import date

from finsun.core.angles import to_degrees, to_radians
from finsun.core.exceptions import DomainError
from finsun.utils.constants import (
    DAYS_PER_JULIAN_CENTURY,
    DEGREES_PER_HOUR,
    J2000_EPOCH,
    SUN_ALTITUDE_DEG,
)
from finsun.utils.types import SolarPosition

# sin of the event altitude, shared by sunrise and sunset
SIN_EVENT_ALTITUDE = math.sin(to_radians(SUN_ALTITUDE_DEG))


def epoch_day_count(day: date) -> int:
    """Whole days elapsed from 2000-01-01 to ``day``."""
    return (day - J2000_EPOCH).days


def solar_position(day_count: int, ut0: float) -> SolarPosition:
    """
    Solar coordinates at a trial hour angle on a given day.

    Args:
        day_count: Days since 2000-01-01
        ut0: Trial universal time as an angle in degrees

    Returns:
        SolarPosition with all intermediate terms
    """
    century = (day_count + ut0 / 360.0) / DAYS_PER_JULIAN_CENTURY
    mean_longitude = 280.460 + 36000.777 * century
    mean_anomaly = to_radians(357.528 + 35999.050 * century)
    ecliptic_longitude = to_radians(
        mean_longitude + 1.915 * math.sin(mean_anomaly) + 0.020 * math.sin(2 * mean_anomaly)
    )
    obliquity = to_radians(23.4393 - 0.0130 * century)
    declination = math.asin(math.sin(obliquity) * math.sin(ecliptic_longitude))

    return SolarPosition(
        century=century,
        mean_longitude=mean_longitude,
        mean_anomaly=mean_anomaly,
        ecliptic_longitude=ecliptic_longitude,
        obliquity=obliquity,
        declination=declination,
    )


def greenwich_hour_angle(ut0: float, position: SolarPosition) -> float:
    """
    Greenwich hour angle of the sun at trial time ``ut0`` (degrees).

    The sine terms are the equation of time: equation of centre in G and
    the reduction to the equator in λ.
    """
    g = position.mean_anomaly
    lam = position.ecliptic_longitude
    return (
        ut0
        - 180.0
        - 1.915 * math.sin(g)
        - 0.020 * math.sin(2 * g)
        + 2.466 * math.sin(2 * lam)
        - 0.053 * math.sin(4 * lam)
    )


def horizon_correction(latitude_rad: float, declination: float) -> float:
    """
    Half-arc of the sun above the event altitude, in degrees.

    Args:
        latitude_rad: Observer latitude in radians
        declination: Solar declination in radians

    Returns:
        Hour angle from local noon to the event (degrees)

    Raises:
        DomainError: If the sun never reaches the event altitude that day
            (polar night) or never drops to it (midnight sun)
    """
    cos_arc = SIN_EVENT_ALTITUDE - math.tan(latitude_rad) * math.tan(declination)
    if cos_arc > 1.0:
        raise DomainError(
            f"Sun stays below the horizon (polar night): cos(H)={cos_arc:.4f}"
        )
    if cos_arc < -1.0:
        raise DomainError(
            f"Sun stays above the horizon (midnight sun): cos(H)={cos_arc:.4f}"
        )
    return to_degrees(math.acos(cos_arc))


def estimate_zone_offset(longitude: float) -> int:
    """
    Civil UTC offset guessed from longitude alone.

    Truncates longitude/15 after stepping one hour away from Greenwich, so
    Beijing (116.4E) maps to +8 and New York (74.0W) to -5. Political time
    zones and daylight saving are ignored.
    """
    if longitude >= 0:
        return int(longitude / DEGREES_PER_HOUR + 1)
    return int(longitude / DEGREES_PER_HOUR - 1)
