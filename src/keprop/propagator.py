#!/usr/bin/env python3
"""Two-body Keplerian propagation engine.

Converts a classical element set plus an absolute target time into a
Cartesian position in the inertial frame:

    1. Initial true anomaly → eccentric → mean anomaly.
    2. Mean anomaly advances linearly with mean motion n = √(µ/a³).
    3. Kepler's equation gives the current eccentric anomaly.
    4. Eccentric → true anomaly and radius; position in the perifocal frame.
    5. 3-1-3 rotation (Ω, i, ω) from perifocal to ECI.

No perturbations are modelled (no J2, drag or third-body terms). The
batch utilities at the bottom evaluate many epochs or many satellites and
return pandas DataFrames in kilometres.
"""
from __future__ import annotations

import logging
import math
import numpy as np
import pandas as pd

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .elements import (
    MU_EARTH,
    Frame,
    OrbitalElements,
    Position,
    Timestamp,
    elapsed_seconds,
    to_epoch_ms,
)
from .frames import eci_to_ecef, gmst
from .kepler import (
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    eccentric_to_mean,
    eccentric_to_true,
    solve_kepler,
    true_to_eccentric,
)
from .walker import WalkerSatellite

logger = logging.getLogger(__name__)

POSITION_COLUMNS = [
    "x_eci_km",
    "y_eci_km",
    "z_eci_km",
    "x_ecef_km",
    "y_ecef_km",
    "z_ecef_km",
]


# Configuration
@dataclass(frozen=True)
class PropagatorSettings:
    """Immutable propagation constants.

    Attributes:
        mu: Gravitational parameter of the central body (m³/s²).
        kepler_tolerance: Newton correction threshold (rad).
        kepler_max_iterations: Iteration cap for the Kepler solver.
    """
    mu: float = MU_EARTH
    kepler_tolerance: float = KEPLER_TOLERANCE
    kepler_max_iterations: int = KEPLER_MAX_ITERATIONS

    def __post_init__(self) -> None:
        if not self.mu > 0:
            raise ValueError(f"Gravitational parameter must be positive, got {self.mu!r}")
        if not self.kepler_tolerance > 0:
            raise ValueError(
                f"Kepler tolerance must be positive, got {self.kepler_tolerance!r}"
            )
        if self.kepler_max_iterations < 1:
            raise ValueError(
                f"Kepler iteration cap must be at least 1, got {self.kepler_max_iterations!r}"
            )


DEFAULT_SETTINGS = PropagatorSettings()


def propagate(
    elements: OrbitalElements,
    target: Timestamp,
    settings: Optional[PropagatorSettings] = None,
) -> Position:
    """Propagate an element set to ``target`` and return its ECI position.

    Args:
        elements: Orbital elements; the true anomaly holds at their epoch.
        target: Absolute evaluation time. Times before the epoch
            back-propagate.
        settings: Propagation constants (defaults to Earth, 1e-12 rad,
            100 iterations).

    Returns:
        Position in the inertial frame, in the unit of ``elements.a``.

    Raises:
        InvalidOrbitalElements: If ``a <= 0`` or ``e`` is outside [0, 1).
        NonConvergence: If Kepler's equation does not converge.
    """
    s = settings or DEFAULT_SETTINGS
    a, e = elements.a, elements.e

    inc = math.radians(elements.i)
    raan = math.radians(elements.raan)
    argp = math.radians(elements.arg_perigee)
    nu0 = math.radians(elements.true_anomaly0)

    dt = elapsed_seconds(elements.epoch, target)
    n = math.sqrt(s.mu / a**3)

    # Anomaly propagation
    mean_anomaly0 = eccentric_to_mean(true_to_eccentric(nu0, e), e)
    mean_anomaly = mean_anomaly0 + n * dt
    ecc_anomaly = solve_kepler(
        mean_anomaly, e, tol=s.kepler_tolerance, max_iter=s.kepler_max_iterations
    )
    nu = eccentric_to_true(ecc_anomaly, e)

    # Perifocal position
    r = a * (1.0 - e * math.cos(ecc_anomaly))
    x_p = r * math.cos(nu)
    y_p = r * math.sin(nu)

    # Perifocal → ECI
    cos_raan, sin_raan = math.cos(raan), math.sin(raan)
    cos_argp, sin_argp = math.cos(argp), math.sin(argp)
    cos_i, sin_i = math.cos(inc), math.sin(inc)

    x = (
        (cos_raan * cos_argp - sin_raan * sin_argp * cos_i) * x_p
        + (-cos_raan * sin_argp - sin_raan * cos_argp * cos_i) * y_p
    )
    y = (
        (sin_raan * cos_argp + cos_raan * sin_argp * cos_i) * x_p
        + (-sin_raan * sin_argp + cos_raan * cos_argp * cos_i) * y_p
    )
    z = (sin_argp * sin_i) * x_p + (cos_argp * sin_i) * y_p

    return Position(x, y, z, Frame.INERTIAL)


def propagate_ecef(
    elements: OrbitalElements,
    target: Timestamp,
    settings: Optional[PropagatorSettings] = None,
) -> Position:
    """Propagate and rotate into the earth-fixed frame at ``target``."""
    return eci_to_ecef(propagate(elements, target, settings), gmst(target))


# Batch utils
def time_grid(start: Timestamp, end: Timestamp, step_seconds: float) -> list[float]:
    """Evenly spaced Unix-millisecond timestamps from ``start`` to ``end``.

    The start is always included; the end is included when it falls on a
    step. An end before the start yields only the start.

    Raises:
        ValueError: If ``step_seconds`` is not positive.
    """
    if not step_seconds > 0:
        raise ValueError(f"Step must be positive, got {step_seconds!r}")

    start_ms = to_epoch_ms(start)
    end_ms = to_epoch_ms(end)
    step_ms = step_seconds * 1000.0

    count = max(0, int(math.floor((end_ms - start_ms) / step_ms))) + 1
    return [start_ms + k * step_ms for k in range(count)]


def propagate_series(
    elements: OrbitalElements,
    start: Timestamp,
    end: Timestamp,
    step_seconds: float = 60.0,
    settings: Optional[PropagatorSettings] = None,
) -> pd.DataFrame:
    """Propagate one satellite over a time window.

    Args:
        elements: Orbital elements of the satellite.
        start: First evaluation time.
        end: Last evaluation time (inclusive when on the grid).
        step_seconds: Grid spacing (s).
        settings: Propagation constants.

    Returns:
        DataFrame with a UTC ``time`` column followed by ECI and ECEF
        position components in kilometres, one row per grid point.
    """
    times = time_grid(start, end, step_seconds)
    logger.info("Propagating %d epochs at %.1f s spacing", len(times), step_seconds)

    rows = np.empty((len(times), 6))
    for k, t in enumerate(times):
        eci = propagate(elements, t, settings)
        ecef = eci_to_ecef(eci, gmst(t))
        rows[k, :3] = eci.to_km()
        rows[k, 3:] = ecef.to_km()

    df = pd.DataFrame(rows, columns=POSITION_COLUMNS)
    df.insert(0, "time", pd.to_datetime(times, unit="ms", utc=True))
    return df


def constellation_snapshot(
    satellites: Sequence[WalkerSatellite],
    target: Timestamp,
    settings: Optional[PropagatorSettings] = None,
    progress: bool = False,
) -> pd.DataFrame:
    """Positions of every satellite in a constellation at one instant.

    Args:
        satellites: Output of :func:`keprop.walker.generate_walker_delta`.
        target: Evaluation time shared by all satellites.
        settings: Propagation constants.
        progress: Show a tqdm progress bar.

    Returns:
        DataFrame with ``label``, ``plane``, ``slot`` and ECI/ECEF
        position components in kilometres, in input order.
    """
    theta = gmst(target)
    iterable = satellites
    if progress:
        from tqdm import tqdm
        iterable = tqdm(satellites, desc="Propagating", unit="sat")

    records: list[dict] = []
    for sat in iterable:
        eci = propagate(sat.elements, target, settings)
        ecef = eci_to_ecef(eci, theta)
        records.append(
            {
                "label": sat.label,
                "plane": sat.plane,
                "slot": sat.slot,
                **dict(zip(POSITION_COLUMNS, eci.to_km() + ecef.to_km())),
            }
        )

    logger.info("Propagated %d satellites", len(records))
    if not records:
        return pd.DataFrame(columns=["label", "plane", "slot", *POSITION_COLUMNS])
    return pd.DataFrame(records)


def write_positions_csv(df: pd.DataFrame, path: str | Path) -> Path:
    """Write a position DataFrame to CSV with 9-decimal kilometre values.

    Datetime columns are written as ISO-8601 strings.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, float_format="%.9f", date_format="%Y-%m-%dT%H:%M:%S.%fZ")
    logger.info("Wrote %d rows to %s", len(df), path)
    return path
