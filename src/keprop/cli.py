#!/usr/bin/env python3
"""keprop command-line interface.

Usage::

    keprop propagate -a 6928137 -i 53 --epoch 2024-01-01T00:00:00Z --hours 24
    keprop walker --preset starlink --output data/starlink.csv
    keprop walker -a 6928137 -i 53 --total 1584 --planes 72 --phasing 1
    keprop snapshot --preset starlink --at 2024-01-01T01:00:00Z -o snap.csv
    keprop presets
"""
from __future__ import annotations

import sys
import logging
from datetime import timedelta

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .elements import R_EARTH, OrbitalElements, parse_time, to_datetime
from .exceptions import KepropError
from .propagator import (
    constellation_snapshot,
    propagate_series,
    write_positions_csv,
)
from .walker import (
    CONSTELLATIONS,
    ConstellationSpec,
    WalkerSatellite,
    generate_walker_delta,
    get_constellation,
    list_constellations,
    walker_dataframe,
)

console = Console()

DEFAULT_EPOCH = "2024-01-01T00:00:00Z"


class TimeParam(click.ParamType):
    """ISO-8601 timestamp or Unix milliseconds."""
    name = "time"

    def convert(self, value, param, ctx):
        if not isinstance(value, str):
            return value
        try:
            return parse_time(value)
        except ValueError:
            self.fail(f"{value!r} is not an ISO-8601 time or Unix milliseconds", param, ctx)


TIME = TimeParam()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """keprop — Keplerian constellation propagator."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s — %(message)s")


@main.command()
@click.option("--sma", "-a", "a", type=float, required=True, help="Semi-major axis (m)")
@click.option("--ecc", "-e", "e", type=float, default=0.0, show_default=True, help="Eccentricity")
@click.option("--inc", "-i", "i", type=float, required=True, help="Inclination (deg)")
@click.option("--raan", type=float, default=0.0, show_default=True, help="RAAN (deg)")
@click.option("--argp", type=float, default=0.0, show_default=True, help="Argument of perigee (deg)")
@click.option("--nu", type=float, default=0.0, show_default=True, help="True anomaly at epoch (deg)")
@click.option("--epoch", type=TIME, default=DEFAULT_EPOCH, show_default=True, help="Element epoch")
@click.option("--start", type=TIME, help="Window start (defaults to epoch)")
@click.option("--hours", type=float, default=24.0, show_default=True, help="Window length (h)")
@click.option("--step", type=click.FloatRange(min=0, min_open=True), default=60.0, show_default=True, help="Step (s)")
@click.option("--output", "-o", type=click.Path(), help="Save positions to CSV")
@click.option("--report-dir", type=click.Path(), help="Generate report with plots")
def propagate(
    a: float,
    e: float,
    i: float,
    raan: float,
    argp: float,
    nu: float,
    epoch,
    start,
    hours: float,
    step: float,
    output: str | None,
    report_dir: str | None,
):
    """Propagate a single satellite over a time window."""
    try:
        elements = OrbitalElements(
            a=a, e=e, i=i, raan=raan, arg_perigee=argp, true_anomaly0=nu, epoch=epoch
        )
        begin = to_datetime(start if start is not None else epoch)
        end = begin + timedelta(hours=hours)
        df = propagate_series(elements, begin, end, step)
    except KepropError as exc:
        _fail(exc)

    console.print(
        Panel(
            f"Semi-major axis: {a / 1000.0:.3f} km (altitude {elements.altitude / 1000.0:.1f} km)\n"
            f"Eccentricity: {e:g}\n"
            f"Inclination: {i:.2f}°\n"
            f"Period: {elements.period / 60.0:.2f} min\n"
            f"Epochs: {len(df)} ({begin:%Y-%m-%d %H:%M} → {end:%Y-%m-%d %H:%M})",
            title="Propagation",
            box=box.ROUNDED,
        )
    )
    _display_positions(df)

    if output:
        write_positions_csv(df, output)
        console.print(f"\nPositions saved to {output}")

    if report_dir:
        from .viz import generate_report
        path = generate_report(series_df=df, output_dir=report_dir, name="Satellite")
        console.print(f"Report generated in {path}")


@main.command()
@click.option("--preset", "-p", type=click.Choice(sorted(CONSTELLATIONS)), help="Known constellation")
@click.option("--sma", "-a", "a", type=float, help="Semi-major axis (m)")
@click.option("--inc", "-i", "i", type=float, help="Inclination (deg)")
@click.option("--total", "-t", type=int, help="Total satellites")
@click.option("--planes", "-n", type=int, help="Number of planes")
@click.option("--phasing", "-f", type=int, default=1, show_default=True, help="Phasing factor")
@click.option("--epoch", type=TIME, default=DEFAULT_EPOCH, show_default=True, help="Pattern epoch")
@click.option("--output", "-o", type=click.Path(), help="Save elements to CSV")
@click.option("--report-dir", type=click.Path(), help="Generate report with plots")
def walker(
    preset: str | None,
    a: float | None,
    i: float | None,
    total: int | None,
    planes: int | None,
    phasing: int,
    epoch,
    output: str | None,
    report_dir: str | None,
):
    """Generate a Walker Delta constellation."""
    spec = _build_spec(preset, a, i, total, planes, phasing, epoch)
    sats = _generate(spec)
    df = walker_dataframe(sats)

    console.print(
        Panel(
            f"[bold]{spec.notation}[/bold]\n"
            f"Satellites: [bold green]{len(sats)}[/bold green]\n"
            f"Planes: {spec.plane_count} × {spec.satellites_per_plane}\n"
            f"Altitude: {(spec.a - R_EARTH) / 1000.0:.1f} km",
            title=get_constellation(preset).name if preset else "Walker Delta",
            box=box.ROUNDED,
        )
    )
    _display_walker(sats)

    if output:
        df.to_csv(output, index=False)
        console.print(f"\nElements saved to {output}")

    if report_dir:
        from .viz import generate_report
        path = generate_report(walker_df=df, output_dir=report_dir,
                               name=preset.upper() if preset else spec.notation)
        console.print(f"Report generated in {path}")


@main.command()
@click.option("--preset", "-p", type=click.Choice(sorted(CONSTELLATIONS)), help="Known constellation")
@click.option("--sma", "-a", "a", type=float, help="Semi-major axis (m)")
@click.option("--inc", "-i", "i", type=float, help="Inclination (deg)")
@click.option("--total", "-t", type=int, help="Total satellites")
@click.option("--planes", "-n", type=int, help="Number of planes")
@click.option("--phasing", "-f", type=int, default=1, show_default=True, help="Phasing factor")
@click.option("--epoch", type=TIME, default=DEFAULT_EPOCH, show_default=True, help="Pattern epoch")
@click.option("--at", "at", type=TIME, required=True, help="Evaluation time")
@click.option("--output", "-o", type=click.Path(), help="Save positions to CSV")
def snapshot(
    preset: str | None,
    a: float | None,
    i: float | None,
    total: int | None,
    planes: int | None,
    phasing: int,
    epoch,
    at,
    output: str | None,
):
    """Positions of every satellite in a constellation at one instant."""
    spec = _build_spec(preset, a, i, total, planes, phasing, epoch)
    sats = _generate(spec)

    try:
        df = constellation_snapshot(sats, at, progress=len(sats) > 500)
    except KepropError as exc:
        _fail(exc)

    console.print(f"Propagated {len(df)} satellites to {to_datetime(at):%Y-%m-%d %H:%M:%S} UTC")
    _display_positions(df, key="label")

    if output:
        write_positions_csv(df, output)
        console.print(f"\nPositions saved to {output}")


@main.command()
def presets():
    """List built-in constellation presets."""
    table = Table(title="Constellation Presets", box=box.SIMPLE_HEAVY)
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Operator")
    table.add_column("Pattern", justify="right")
    table.add_column("Alt (km)", justify="right")
    table.add_column("Description")

    for key in list_constellations():
        p = CONSTELLATIONS[key]
        table.add_row(
            key,
            p.name,
            p.operator,
            f"{p.inclination_deg:g}°:{p.total_satellites}/{p.plane_count}/{p.phasing}",
            f"{p.altitude_km:g}",
            p.description,
        )

    console.print(table)


def _build_spec(preset, a, i, total, planes, phasing, epoch) -> ConstellationSpec:
    if preset:
        return get_constellation(preset).to_spec(epoch)

    missing = [flag for flag, value in
               (("--sma", a), ("--inc", i), ("--total", total), ("--planes", planes))
               if value is None]
    if missing:
        console.print(f"[red]Error: provide --preset or {', '.join(missing)}[/red]")
        sys.exit(1)

    return ConstellationSpec(
        a=a, i=i, total_satellites=total, plane_count=planes, phasing=phasing, epoch=epoch
    )


def _generate(spec: ConstellationSpec) -> list[WalkerSatellite]:
    try:
        return generate_walker_delta(spec)
    except KepropError as exc:
        _fail(exc)


def _fail(exc: Exception):
    console.print(f"[red]Error: {exc}[/red]")
    sys.exit(1)


def _display_positions(df, key: str = "time", limit: int = 20):
    """Display the leading rows of a position DataFrame as a rich table."""
    table = Table(box=box.SIMPLE_HEAVY)
    table.add_column(key.title(), style="cyan")
    for frame in ("ECI", "ECEF"):
        for axis in ("X", "Y", "Z"):
            table.add_column(f"{axis} {frame} (km)", justify="right")

    for _, row in df.head(limit).iterrows():
        value = row[key]
        label = f"{value:%Y-%m-%d %H:%M:%S}" if key == "time" else str(value)
        table.add_row(
            label,
            *(f"{row[col]:.3f}" for col in (
                "x_eci_km", "y_eci_km", "z_eci_km",
                "x_ecef_km", "y_ecef_km", "z_ecef_km",
            )),
        )

    if len(df) > limit:
        console.print(f"(showing {limit} of {len(df)} rows)")
    console.print(table)


def _display_walker(sats: list[WalkerSatellite], limit: int = 30):
    """Display generated satellites as a rich table."""
    table = Table(title="Generated Satellites", box=box.SIMPLE_HEAVY)
    table.add_column("Label", style="cyan")
    table.add_column("RAAN (°)", justify="right")
    table.add_column("ν₀ (°)", justify="right")
    table.add_column("Inc (°)", justify="right")

    for sat in sats[:limit]:
        el = sat.elements
        table.add_row(sat.label, f"{el.raan:.3f}", f"{el.true_anomaly0:.3f}", f"{el.i:.2f}")

    if len(sats) > limit:
        console.print(f"(showing {limit} of {len(sats)} satellites)")
    console.print(table)


if __name__ == "__main__":
    main()
