"""Sidereal time and ECI/ECEF frame rotation.

The ECI→ECEF transformation is a single rotation about the polar axis by
the Greenwich Mean Sidereal Time angle. GMST uses the IAU-1982 polynomial
without nutation, so the earth-fixed frame is approximate at the level of
a few arcseconds; precession/nutation and polar motion are not modelled.
"""
from __future__ import annotations

import logging
import math

from .elements import (
    J2000_JD,
    TWO_PI,
    Frame,
    Position,
    Timestamp,
    julian_date,
)

logger = logging.getLogger(__name__)


def gmst(t: Timestamp) -> float:
    """Greenwich Mean Sidereal Time for an absolute UTC time.

    Uses the IAU formula based on Julian centuries from J2000.0::

        GMST(°) = 280.46061837 + 360.98564736629 · (JD − 2451545.0)
                  + 0.000387933 · T² − T³ / 38710000

    Args:
        t: Absolute time (datetime or Unix milliseconds).

    Returns:
        GMST in radians, normalised to [0, 2π).
    """
    days = julian_date(t) - J2000_JD
    centuries = days / 36525.0

    gmst_deg = (
        280.46061837
        + 360.98564736629 * days
        + 0.000387933 * centuries**2
        - centuries**3 / 38710000.0
    )
    gmst_deg %= 360.0

    theta = math.radians(gmst_deg)
    # A tiny negative angle wraps to 360.0 under %, which is 2π
    if theta >= TWO_PI:
        theta = 0.0
    return theta


def eci_to_ecef(position: Position, theta: float) -> Position:
    """Rotate an inertial position into the earth-fixed frame.

    Passive rotation about the z-axis by the GMST angle::

        [x']   [ cos θ  sin θ  0] [x]
        [y'] = [−sin θ  cos θ  0] [y]
        [z']   [   0      0    1] [z]

    Args:
        position: Position in the inertial frame (m).
        theta: GMST angle (rad), typically from :func:`gmst`.

    Returns:
        Position in the earth-fixed frame (m).

    Raises:
        ValueError: If ``position`` is not tagged as inertial.
    """
    if position.frame is not Frame.INERTIAL:
        raise ValueError(f"Expected an inertial position, got {position.frame.name}")

    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    return Position(
        x=position.x * cos_t + position.y * sin_t,
        y=-position.x * sin_t + position.y * cos_t,
        z=position.z,
        frame=Frame.EARTH_FIXED,
    )


def ecef_to_eci(position: Position, theta: float) -> Position:
    """Inverse of :func:`eci_to_ecef` (rotation by −θ).

    Raises:
        ValueError: If ``position`` is not tagged as earth-fixed.
    """
    if position.frame is not Frame.EARTH_FIXED:
        raise ValueError(f"Expected an earth-fixed position, got {position.frame.name}")

    cos_t = math.cos(-theta)
    sin_t = math.sin(-theta)
    return Position(
        x=position.x * cos_t + position.y * sin_t,
        y=-position.x * sin_t + position.y * cos_t,
        z=position.z,
        frame=Frame.INERTIAL,
    )


def ecef_to_latlon(position: Position) -> tuple[float, float, float]:
    """Geocentric latitude, longitude and radius of an earth-fixed position.

    Spherical Earth; latitude is geocentric, not geodetic.

    Returns:
        ``(latitude_deg, longitude_deg, radius_m)`` with latitude in
        [−90, 90] and longitude in (−180, 180].
    """
    if position.frame is not Frame.EARTH_FIXED:
        raise ValueError(f"Expected an earth-fixed position, got {position.frame.name}")

    x, y, z = position
    lon = math.degrees(math.atan2(y, x))
    lat = math.degrees(math.atan2(z, math.hypot(x, y)))
    return lat, lon, position.norm()
