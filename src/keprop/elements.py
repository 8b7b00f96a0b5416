"""Orbital element sets, positions and absolute-time handling.

Defines the value types shared by every other module: the classical
Keplerian element set used as propagator input, the Cartesian position it
produces, and the conversions between the two accepted representations of
absolute time (``datetime`` and Unix milliseconds).

References:
    - Vallado, D. (2013). Fundamentals of Astrodynamics and Applications.
    - Curtis, H. (2014). Orbital Mechanics for Engineering Students.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Iterator, Union

import numpy as np

from .exceptions import InvalidOrbitalElements

logger = logging.getLogger(__name__)

# ── Physical constants ──

MU_EARTH = 3.986004418e14
"""Earth gravitational parameter (m³/s²)."""

R_EARTH = 6378137.0
"""Earth equatorial radius, WGS84 (m)."""

MAX_SEMI_MAJOR_AXIS = 1.0e100
"""Upper bound on the semi-major axis; keeps ``a**3`` within float range (m)."""

TWO_PI = 2.0 * math.pi
"""2π constant."""

# ── Time constants ──

MS_PER_DAY = 86400000.0
"""Milliseconds in a solar day."""

UNIX_EPOCH_JD = 2440587.5
"""Julian Date of 1970-01-01T00:00:00 UTC."""

J2000_JD = 2451545.0
"""Julian Date of the J2000.0 epoch (2000-01-01T12:00:00 TT)."""

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Timestamp = Union[datetime, int, float]
"""Absolute time: a datetime (naive means UTC) or Unix milliseconds."""


class Frame(Enum):
    """Reference frame a position is expressed in."""
    INERTIAL = auto()
    EARTH_FIXED = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Cartesian position vector tagged with its reference frame.

    Attributes:
        x: X component (m).
        y: Y component (m).
        z: Z component (m).
        frame: Frame the components are expressed in.
    """
    x: float
    y: float
    z: float
    frame: Frame = Frame.INERTIAL

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def norm(self) -> float:
        """Distance from the Earth's centre (m)."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def to_km(self) -> tuple[float, float, float]:
        return (self.x / 1000.0, self.y / 1000.0, self.z / 1000.0)


@dataclass(frozen=True, slots=True)
class OrbitalElements:
    """Classical Keplerian elements for a closed (e < 1) orbit.

    Angles are in degrees and need not be normalised. The true anomaly is
    defined to hold exactly at ``epoch``.

    Attributes:
        a: Semi-major axis (m, > 0).
        e: Eccentricity (0 <= e < 1).
        i: Inclination (degrees).
        raan: Right ascension of the ascending node (degrees).
        arg_perigee: Argument of perigee (degrees).
        true_anomaly0: True anomaly at epoch (degrees).
        epoch: Reference time of the element set.

    Raises:
        InvalidOrbitalElements: If ``a`` or ``e`` is out of range.
    """
    a: float
    e: float
    i: float
    raan: float
    arg_perigee: float
    true_anomaly0: float
    epoch: Timestamp

    def __post_init__(self) -> None:
        validate_shape(self.a, self.e)

    @property
    def mean_motion(self) -> float:
        """Mean motion for the default gravitational parameter (rad/s)."""
        return math.sqrt(MU_EARTH / self.a**3)

    @property
    def period(self) -> float:
        """Orbital period for the default gravitational parameter (s)."""
        return TWO_PI / self.mean_motion

    @property
    def altitude(self) -> float:
        """Semi-major axis minus the equatorial radius (m)."""
        return self.a - R_EARTH

    def to_dict(self) -> dict:
        """Flat dictionary suitable for DataFrame construction."""
        return {
            "a_m": self.a,
            "e": self.e,
            "inclination_deg": self.i,
            "raan_deg": self.raan,
            "arg_perigee_deg": self.arg_perigee,
            "true_anomaly0_deg": self.true_anomaly0,
            "epoch": to_datetime(self.epoch),
        }


def validate_shape(a: float, e: float) -> None:
    """Reject orbit sizes and shapes outside the supported elliptic range.

    Raises:
        InvalidOrbitalElements: If ``a <= 0``, ``a`` is not finite or too large, or
            ``e`` is outside [0, 1).
    """
    if not math.isfinite(a) or a <= 0:
        raise InvalidOrbitalElements(
            f"Semi-major axis must be positive and finite, got {a!r}"
        )
    if a > MAX_SEMI_MAJOR_AXIS:
        raise InvalidOrbitalElements(
            f"Semi-major axis must not exceed {MAX_SEMI_MAJOR_AXIS:g} m, got {a!r}"
        )
    if not (0.0 <= e < 1.0):
        raise InvalidOrbitalElements(
            f"Eccentricity must be in [0, 1) (elliptic orbits only), got {e!r}"
        )


# ── Time conversion ──


def to_epoch_ms(t: Timestamp) -> float:
    """Convert an absolute time to milliseconds since the Unix epoch.

    Naive datetimes are interpreted as UTC. Numbers are returned as-is.
    """
    if isinstance(t, datetime):
        if t.tzinfo is None:
            t = t.replace(tzinfo=timezone.utc)
        return (t - UNIX_EPOCH).total_seconds() * 1000.0
    return t


def to_datetime(t: Timestamp) -> datetime:
    """Convert an absolute time to an aware UTC datetime."""
    if isinstance(t, datetime):
        if t.tzinfo is None:
            return t.replace(tzinfo=timezone.utc)
        return t.astimezone(timezone.utc)
    return datetime.fromtimestamp(t / 1000.0, tz=timezone.utc)


def elapsed_seconds(epoch: Timestamp, target: Timestamp) -> float:
    """Seconds from ``epoch`` to ``target`` (negative when target is earlier)."""
    return (to_epoch_ms(target) - to_epoch_ms(epoch)) / 1000.0


def julian_date(t: Timestamp) -> float:
    """Julian Date of an absolute time (UTC, no leap-second handling)."""
    return to_epoch_ms(t) / MS_PER_DAY + UNIX_EPOCH_JD


def parse_time(text: str) -> Timestamp:
    """Parse an ISO-8601 string or an integer count of Unix milliseconds.

    A trailing ``Z`` is accepted as UTC.

    Raises:
        ValueError: If the text is neither form.
    """
    text = text.strip()
    if text.lstrip("-").isdigit():
        return int(text)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return to_datetime(datetime.fromisoformat(text))
