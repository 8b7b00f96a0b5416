"""Kepler's equation and anomaly conversions for elliptic orbits.

Relates the three parameterisations of position along an orbit:

    mean anomaly M      — advances linearly in time
    eccentric anomaly E — M = E − e·sin(E)  (Kepler's equation)
    true anomaly ν      — actual angle from perigee

All angles are in radians.
"""
from __future__ import annotations

import logging
import math

from .exceptions import InvalidOrbitalElements, NonConvergence

logger = logging.getLogger(__name__)

KEPLER_TOLERANCE = 1e-12
"""Convergence threshold on the Newton correction (rad)."""

KEPLER_MAX_ITERATIONS = 100
"""Iteration cap before ``NonConvergence`` is raised."""


def solve_kepler(
    mean_anomaly: float,
    e: float,
    tol: float = KEPLER_TOLERANCE,
    max_iter: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """Solve ``E − e·sin(E) = M`` for the eccentric anomaly.

    Newton-Raphson seeded at ``E₀ = M``. The iteration stops once the
    magnitude of the correction is at or below ``tol``. When ``|M|``
    exceeds one revolution, whole revolutions are stripped before
    iterating and restored afterwards; otherwise the rounding noise of a
    large ``M`` would keep the correction above ``tol``. A NaN or infinite
    ``M`` yields NaN.

    Seeding at ``M`` can fail to settle for e above about 0.99 with
    small ``|M|``; such inputs raise ``NonConvergence``.

    Args:
        mean_anomaly: Mean anomaly M (rad, any real value).
        e: Eccentricity, 0 <= e < 1.
        tol: Absolute tolerance on the Newton correction (rad).
        max_iter: Maximum number of Newton steps.

    Returns:
        Eccentric anomaly E (rad).

    Raises:
        InvalidOrbitalElements: If ``e`` is outside [0, 1).
        NonConvergence: If the correction is still above ``tol`` after
            ``max_iter`` steps.
    """
    if not (0.0 <= e < 1.0):
        raise InvalidOrbitalElements(
            f"Eccentricity must be in [0, 1) (elliptic orbits only), got {e!r}"
        )

    if not math.isfinite(mean_anomaly):
        return math.nan

    if abs(mean_anomaly) > 2.0 * math.pi:
        m_wrapped = math.remainder(mean_anomaly, 2.0 * math.pi)
        revolutions = mean_anomaly - m_wrapped
    else:
        m_wrapped = mean_anomaly
        revolutions = 0.0

    ecc_anomaly = m_wrapped
    delta = math.inf
    for iteration in range(1, max_iter + 1):
        delta = (ecc_anomaly - e * math.sin(ecc_anomaly) - m_wrapped) / (
            1.0 - e * math.cos(ecc_anomaly)
        )
        ecc_anomaly -= delta
        if abs(delta) <= tol:
            logger.debug(
                "Kepler converged in %d iteration(s) (M=%.6f, e=%.6f)",
                iteration,
                mean_anomaly,
                e,
            )
            return ecc_anomaly + revolutions

    raise NonConvergence(mean_anomaly, e, max_iter, abs(delta))


def true_to_eccentric(nu: float, e: float) -> float:
    """Eccentric anomaly from true anomaly (half-angle formula).

    Result lies in (−π, π]; a true anomaly of exactly π maps to π.
    """
    return 2.0 * math.atan(math.tan(nu / 2.0) * math.sqrt((1.0 - e) / (1.0 + e)))


def eccentric_to_mean(ecc_anomaly: float, e: float) -> float:
    """Mean anomaly from eccentric anomaly (Kepler's equation)."""
    return ecc_anomaly - e * math.sin(ecc_anomaly)


def eccentric_to_true(ecc_anomaly: float, e: float) -> float:
    """True anomaly from eccentric anomaly, quadrant-preserving.

    Uses the atan2 half-angle form so the result is correct over a full
    revolution. The result equals ν modulo 2π and lies in (−2π, 2π].
    """
    return 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(ecc_anomaly / 2.0),
        math.sqrt(1.0 - e) * math.cos(ecc_anomaly / 2.0),
    )
