"""
Pure calculation functions shared across modules.

No I/O, no state. Inputs are assumed valid; NaN or out-of-range
coordinates are a caller contract violation.
"""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from .constants import EARTH_RADIUS_M


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance in meters between two points (haversine).

    Args:
        lat1: Latitude of the first point in decimal degrees
        lng1: Longitude of the first point in decimal degrees
        lat2: Latitude of the second point in decimal degrees
        lng2: Longitude of the second point in decimal degrees

    Returns:
        Distance in meters, always >= 0

    Example:
        >>> round(distance_meters(0.0, 0.0, 0.0, 1.0))
        111195
    """
    phi1 = radians(lat1)
    phi2 = radians(lat2)
    d_phi = radians(lat2 - lat1)
    d_lambda = radians(lng2 - lng1)

    h = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * atan2(sqrt(h), sqrt(1 - h))


def is_within_radius(distance_m: float, radius_m: float) -> bool:
    """Inclusive radius check: a point exactly on the boundary counts."""
    return distance_m <= radius_m
