#!/usr/bin/env python3
"""
keprop Example: Snapshot of the Starlink shell-1 pattern.

Propagates every satellite of the 53°:1584/72/1 preset to one instant,
prints the sub-satellite points of the first plane and saves plots.
"""
import sys
sys.path.insert(0, "src")

from datetime import datetime, timezone

from keprop.elements import Frame, Position
from keprop.frames import ecef_to_latlon
from keprop.propagator import constellation_snapshot, propagate_series
from keprop.walker import STARLINK_SHELL1, generate_walker_delta, walker_dataframe


def main():
    print("=" * 65)
    print("  keprop — Starlink Shell 1 Snapshot")
    print("=" * 65)

    epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)
    at = datetime(2024, 1, 1, 6, tzinfo=timezone.utc)

    sats = generate_walker_delta(STARLINK_SHELL1.to_spec(epoch))
    print(f"\nPropagating {len(sats)} satellites to {at:%Y-%m-%d %H:%M} UTC...")
    df = constellation_snapshot(sats, at, progress=True)

    print(f"\n{'LABEL':8s} {'LAT (°)':>9} {'LON (°)':>9} {'ALT (km)':>9}")
    print("-" * 40)
    for _, row in df[df["plane"] == 0].iterrows():
        pos = Position(row["x_ecef_km"] * 1000.0, row["y_ecef_km"] * 1000.0,
                       row["z_ecef_km"] * 1000.0, Frame.EARTH_FIXED)
        lat, lon, r = ecef_to_latlon(pos)
        print(f"{row['label']:8s} {lat:>9.3f} {lon:>9.3f} {r / 1000.0 - 6378.137:>9.1f}")

    # ── Generate plots if matplotlib is available ──
    try:
        import matplotlib
        matplotlib.use("Agg")  # Non-interactive backend
        from keprop.viz import generate_report

        series = propagate_series(sats[0].elements, epoch, at, step_seconds=30.0)
        path = generate_report(
            series_df=series,
            walker_df=walker_dataframe(sats),
            output_dir="data/reports/starlink",
            name="Starlink Shell 1",
        )
        print(f"\nReport saved to {path}")

    except ImportError:
        print("\nInstall matplotlib for visualization: pip install matplotlib")


if __name__ == "__main__":
    main()
