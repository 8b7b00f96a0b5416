"""Exception hierarchy for keprop.

All errors derive from ``ValueError`` so callers that already guard
numeric input with ``except ValueError`` keep working.
"""
from __future__ import annotations


class KepropError(ValueError):
    """Base class for every error raised by keprop."""


class InvalidOrbitalElements(KepropError):
    """Orbital elements describe an orbit the propagator cannot handle.

    Raised for a non-positive (or non-finite) semi-major axis and for
    eccentricities outside [0, 1).
    """


class NonConvergence(KepropError):
    """Kepler's equation did not converge within the iteration cap.

    Attributes:
        mean_anomaly: Mean anomaly passed to the solver (rad).
        eccentricity: Eccentricity passed to the solver.
        iterations: Number of iterations performed.
        last_correction: Magnitude of the final Newton correction (rad).
    """

    def __init__(
        self,
        mean_anomaly: float,
        eccentricity: float,
        iterations: int,
        last_correction: float,
    ) -> None:
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.iterations = iterations
        self.last_correction = last_correction
        super().__init__(
            f"Kepler solver did not converge after {iterations} iterations "
            f"(M={mean_anomaly:.6g} rad, e={eccentricity:.6g}, "
            f"|dE|={last_correction:.3e})"
        )


class InvalidConstellationSpec(KepropError):
    """Walker Delta parameters cannot be expanded into a constellation."""
