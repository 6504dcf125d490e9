"""Degree/radian conversion."""

import math


def to_radians(degrees: float) -> float:
    """Convert an angle from degrees to radians."""
    return math.pi / 180.0 * degrees


def to_degrees(radians: float) -> float:
    """Convert an angle from radians to degrees."""
    return radians * 180.0 / math.pi
