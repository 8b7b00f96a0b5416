"""
Walker Delta constellation generation and known constellation presets.

A Walker Delta pattern i:T/P/F places T satellites in P equally spaced
orbital planes (RAAN spacing 360°/P), with T/P satellites equally spaced
in each plane and an inter-plane phase offset of F·360°/T.

Only circular patterns are generated (e = 0, ω = 0).
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from .elements import R_EARTH, OrbitalElements, Timestamp
from .exceptions import InvalidConstellationSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConstellationSpec:
    """Parameters of a Walker Delta pattern i:T/P/F.

    Attributes:
        a: Semi-major axis shared by all satellites (m).
        i: Inclination shared by all satellites (degrees).
        total_satellites: Total satellite count T.
        plane_count: Number of orbital planes P.
        phasing: Phasing factor F.
        epoch: Epoch shared by all generated element sets.
    """
    a: float
    i: float
    total_satellites: int
    plane_count: int
    phasing: int
    epoch: Timestamp

    @property
    def satellites_per_plane(self) -> int:
        return self.total_satellites // self.plane_count

    @property
    def notation(self) -> str:
        """Walker notation, e.g. ``53.0°:1584/72/1``."""
        return f"{self.i:g}°:{self.total_satellites}/{self.plane_count}/{self.phasing}"


@dataclass(frozen=True)
class WalkerSatellite:
    """One generated satellite: its slot in the pattern and its elements.

    Attributes:
        label: Human-readable identifier ``p{plane}s{slot}`` (1-based).
        plane: Zero-based plane index.
        slot: Zero-based slot index within the plane.
        elements: Orbital elements at the pattern epoch.
    """
    label: str
    plane: int
    slot: int
    elements: OrbitalElements

    def to_dict(self) -> dict:
        return {"label": self.label, "plane": self.plane, "slot": self.slot,
                **self.elements.to_dict()}


def generate_walker_delta(spec: ConstellationSpec) -> list[WalkerSatellite]:
    """Expand a Walker Delta pattern into per-satellite element sets.

    Ordering is plane-major then slot-minor: the satellite in plane ``p``,
    slot ``s`` is at index ``p * satellites_per_plane + s``.

    Args:
        spec: Pattern parameters.

    Returns:
        ``total_satellites`` satellites in plane-major order.

    Raises:
        InvalidConstellationSpec: If the counts are not positive integers,
            the total is not a multiple of the plane count, or the phasing
            factor is negative.
        InvalidOrbitalElements: If the shared semi-major axis is invalid.
    """
    _validate(spec)

    sats_per_plane = spec.satellites_per_plane
    delta_raan = 360.0 / spec.plane_count
    delta_anomaly = 360.0 / sats_per_plane
    phase_shift = (spec.phasing * 360.0) / spec.total_satellites

    satellites: list[WalkerSatellite] = []
    for p in range(spec.plane_count):
        raan = p * delta_raan

        for s in range(sats_per_plane):
            nu = (s * delta_anomaly + p * phase_shift) % 360.0
            elements = OrbitalElements(
                a=spec.a,
                e=0.0,
                i=spec.i,
                raan=raan,
                arg_perigee=0.0,
                true_anomaly0=nu,
                epoch=spec.epoch,
            )
            satellites.append(
                WalkerSatellite(label=f"p{p + 1}s{s + 1}", plane=p, slot=s, elements=elements)
            )

    logger.info(
        "Generated Walker Delta %s: %d planes x %d satellites",
        spec.notation,
        spec.plane_count,
        sats_per_plane,
    )
    return satellites


def walker_dataframe(satellites: list[WalkerSatellite]) -> pd.DataFrame:
    """One row per generated satellite, in generation order."""
    return pd.DataFrame([sat.to_dict() for sat in satellites])


def _validate(spec: ConstellationSpec) -> None:
    for name in ("total_satellites", "plane_count", "phasing"):
        value = getattr(spec, name)
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidConstellationSpec(f"{name} must be an integer, got {value!r}")

    if spec.plane_count <= 0:
        raise InvalidConstellationSpec(
            f"Plane count must be positive, got {spec.plane_count}"
        )
    if spec.total_satellites <= 0:
        raise InvalidConstellationSpec(
            f"Total satellite count must be positive, got {spec.total_satellites}"
        )
    if spec.total_satellites % spec.plane_count:
        raise InvalidConstellationSpec(
            f"{spec.total_satellites} satellites cannot be split evenly "
            f"across {spec.plane_count} planes"
        )
    if spec.phasing < 0:
        raise InvalidConstellationSpec(
            f"Phasing factor must be non-negative, got {spec.phasing}"
        )


# ── Known constellations ──


@dataclass(frozen=True)
class ConstellationPreset:
    """Walker Delta geometry of a known constellation (or one of its shells)."""
    name: str
    operator: str
    altitude_km: float
    inclination_deg: float
    total_satellites: int
    plane_count: int
    phasing: int
    description: str

    @property
    def semi_major_axis(self) -> float:
        """Semi-major axis over the equatorial radius (m)."""
        return R_EARTH + self.altitude_km * 1000.0

    def to_spec(self, epoch: Timestamp) -> ConstellationSpec:
        return ConstellationSpec(
            a=self.semi_major_axis,
            i=self.inclination_deg,
            total_satellites=self.total_satellites,
            plane_count=self.plane_count,
            phasing=self.phasing,
            epoch=epoch,
        )


STARLINK_SHELL1 = ConstellationPreset(
    name="Starlink Shell 1",
    operator="SpaceX",
    altitude_km=550,
    inclination_deg=53.0,
    total_satellites=1584,
    plane_count=72,
    phasing=1,
    description="First Starlink shell: 72 planes of 22 satellites at 53°.",
)

GALILEO = ConstellationPreset(
    name="Galileo",
    operator="EUSPA",
    altitude_km=23222,
    inclination_deg=56.0,
    total_satellites=24,
    plane_count=3,
    phasing=1,
    description="Galileo GNSS nominal 56°:24/3/1 pattern in MEO.",
)

GLOBALSTAR = ConstellationPreset(
    name="Globalstar",
    operator="Globalstar",
    altitude_km=1414,
    inclination_deg=52.0,
    total_satellites=48,
    plane_count=8,
    phasing=1,
    description="Globalstar first generation 52°:48/8/1 pattern.",
)

KUIPER_SHELL1 = ConstellationPreset(
    name="Kuiper 630 km",
    operator="Amazon",
    altitude_km=630,
    inclination_deg=51.9,
    total_satellites=1156,
    plane_count=34,
    phasing=1,
    description="Project Kuiper 630 km shell: 34 planes of 34 satellites.",
)

# Registry
CONSTELLATIONS: dict[str, ConstellationPreset] = {
    "starlink": STARLINK_SHELL1,
    "galileo": GALILEO,
    "globalstar": GLOBALSTAR,
    "kuiper": KUIPER_SHELL1,
}


def get_constellation(name: str) -> Optional[ConstellationPreset]:
    """Look up a constellation preset by name (case-insensitive)."""
    return CONSTELLATIONS.get(name.lower())


def list_constellations() -> list[str]:
    """List available constellation presets."""
    return list(CONSTELLATIONS.keys())
