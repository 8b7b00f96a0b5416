"""
Example: Propagate one satellite, convert to ECEF, and build a Walker Delta.

Runs entirely offline. Propagates a 550 km / 53° circular orbit for one
hour, converts the result to the earth-fixed frame, generates the
Starlink shell-1 pattern (1584 satellites in 72 planes), and writes a
24-hour ECI/ECEF position history to CSV.
"""

import sys
sys.path.insert(0, "src")

from datetime import datetime, timedelta, timezone
from keprop.elements import OrbitalElements
from keprop.frames import eci_to_ecef, gmst
from keprop.propagator import propagate, propagate_series, write_positions_csv
from keprop.walker import ConstellationSpec, generate_walker_delta


def main():
    print("=" * 65)
    print("  keprop — Single Satellite & Walker Delta Demo")
    print("=" * 65)

    epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)
    sat = OrbitalElements(
        a=6928137.0,  # 550 km altitude
        e=0.0,
        i=53.0,
        raan=0.0,
        arg_perigee=0.0,
        true_anomaly0=0.0,
        epoch=epoch,
    )

    # ── Propagate to one hour after epoch ──
    t = epoch + timedelta(hours=1)
    eci = propagate(sat, t)
    print(f"\nPosition at +1 h (ECI, m):  x={eci.x:.3f} y={eci.y:.3f} z={eci.z:.3f}")

    # ── ECI → ECEF ──
    ecef = eci_to_ecef(eci, gmst(t))
    print(f"Position at +1 h (ECEF, m): x={ecef.x:.3f} y={ecef.y:.3f} z={ecef.z:.3f}")

    # ── Walker Delta 53°:1584/72/1 ──
    spec = ConstellationSpec(
        a=6928137.0,
        i=53.0,
        total_satellites=1584,
        plane_count=72,
        phasing=1,
        epoch=epoch,
    )
    sats = generate_walker_delta(spec)
    print(f"\nGenerated {len(sats)} satellites ({spec.notation})")
    for s in sats[:3] + sats[-2:]:
        print(f"  {s.label:8s} RAAN={s.elements.raan:7.3f}°  ν₀={s.elements.true_anomaly0:8.4f}°")

    # ── 24 h position history at 1 min spacing ──
    df = propagate_series(sat, epoch, epoch + timedelta(hours=24), step_seconds=60.0)
    path = write_positions_csv(df, "data/satellite_positions.csv")
    print(f"\nWrote {len(df)} rows to {path}")


if __name__ == "__main__":
    main()
