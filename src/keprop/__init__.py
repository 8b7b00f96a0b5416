"""keprop — Keplerian constellation propagator.

Two-body propagation of satellite orbits, ECI/ECEF frame conversion and
Walker Delta constellation generation.

Modules:
    elements:   Orbital element sets, positions and time conversion.
    kepler:     Kepler's equation solver and anomaly conversions.
    propagator: Element-to-position propagation and batch utilities.
    frames:     Sidereal time and ECI/ECEF rotation.
    walker:     Walker Delta generation and constellation presets.
    viz:        Plots of position histories and constellation geometry.
    cli:        Command-line interface.

Example:
    >>> from datetime import datetime, timezone
    >>> from keprop.elements import OrbitalElements
    >>> from keprop.propagator import propagate
    >>> from keprop.frames import gmst, eci_to_ecef
    >>>
    >>> epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> sat = OrbitalElements(a=6928137, e=0, i=53.0, raan=0, arg_perigee=0,
    ...                       true_anomaly0=0, epoch=epoch)
    >>> t = epoch.timestamp() * 1000 + 3600000
    >>> eci = propagate(sat, t)
    >>> ecef = eci_to_ecef(eci, gmst(t))
"""

__version__ = "0.1.0"
