#!/usr/bin/env python3
"""Visualization tools for propagated positions and Walker constellations.

Plots take the DataFrames produced by :mod:`keprop.propagator` and
:mod:`keprop.walker` and can be used interactively (Jupyter) or saved as
PNGs through :func:`generate_report`.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import matplotlib.dates as mdates


plt.rcParams.update({
    "figure.facecolor": "white",
    "axes.facecolor": "#fafafa",
    "axes.grid": True,
    "grid.alpha": 0.3,
    "font.family": "sans-serif",
    "font.size": 10,
})

AXIS_COLORS = {
    "x": "#c0392b",
    "y": "#27ae60",
    "z": "#2980b9",
}


def plot_position_history(
    series_df: pd.DataFrame,
    frame: str = "eci",
    title: Optional[str] = None,
    save_path: Optional[str | Path] = None,
    figsize: tuple = (14, 8),
) -> plt.Figure:
    """Plot position components and radius over time.

    Args:
        series_df: DataFrame from propagate_series()
        frame: ``"eci"`` or ``"ecef"``
        title: Plot title
        save_path: Path to save figure (optional)

    Returns:
        matplotlib Figure
    """
    if frame not in ("eci", "ecef"):
        raise ValueError(f"frame must be 'eci' or 'ecef', got {frame!r}")

    fig, axes = plt.subplots(2, 1, figsize=figsize, sharex=True,
                             gridspec_kw={"height_ratios": [3, 1]})
    times = series_df["time"]

    # Panel 1: components
    ax = axes[0]
    for axis, color in AXIS_COLORS.items():
        ax.plot(times, series_df[f"{axis}_{frame}_km"], linewidth=0.9,
                color=color, label=axis.upper())
    ax.set_ylabel(f"{frame.upper()} position (km)")
    ax.set_title(title or f"Position History ({frame.upper()})")
    ax.legend(loc="upper right", fontsize=8, ncols=3)

    # Panel 2: radius
    ax = axes[1]
    radius = np.sqrt(
        series_df[f"x_{frame}_km"] ** 2
        + series_df[f"y_{frame}_km"] ** 2
        + series_df[f"z_{frame}_km"] ** 2
    )
    ax.plot(times, radius, linewidth=0.9, color="#2c3e50")
    ax.set_ylabel("Radius (km)")
    ax.set_xlabel("Time (UTC)")

    for ax in axes:
        ax.xaxis.set_major_formatter(mdates.DateFormatter("%m-%d %H:%M"))
    fig.autofmt_xdate(rotation=30)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_ground_track(
    series_df: pd.DataFrame,
    title: str = "Ground Track",
    save_path: Optional[str | Path] = None,
    figsize: tuple = (14, 7),
) -> plt.Figure:
    """Plot the sub-satellite point (geocentric latitude/longitude).

    Breaks the line where longitude wraps across ±180°.
    """
    x = series_df["x_ecef_km"].to_numpy()
    y = series_df["y_ecef_km"].to_numpy()
    z = series_df["z_ecef_km"].to_numpy()

    lon = np.degrees(np.arctan2(y, x))
    lat = np.degrees(np.arctan2(z, np.hypot(x, y)))

    # Break the line at dateline crossings
    wraps = np.where(np.abs(np.diff(lon)) > 180.0)[0] + 1
    lon = np.insert(lon, wraps, np.nan)
    lat = np.insert(lat, wraps, np.nan)

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(lon, lat, linewidth=0.8, color="#8e44ad")
    ax.scatter(lon[0], lat[0], color="#2ecc71", s=30, zorder=3, label="Start")
    ax.set_xlim(-180, 180)
    ax.set_ylim(-90, 90)
    ax.set_xticks(range(-180, 181, 30))
    ax.set_yticks(range(-90, 91, 30))
    ax.set_xlabel("Longitude (°)")
    ax.set_ylabel("Latitude (°)")
    ax.set_title(title)
    ax.legend(loc="lower left", fontsize=8)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_walker_geometry(
    walker_df: pd.DataFrame,
    title: str = "Walker Delta Geometry",
    save_path: Optional[str | Path] = None,
    figsize: tuple = (12, 6),
) -> plt.Figure:
    """Scatter of true anomaly at epoch against RAAN, colored by plane.

    Args:
        walker_df: DataFrame from walker_dataframe()
    """
    fig, ax = plt.subplots(figsize=figsize)

    if walker_df.empty:
        ax.text(0.5, 0.5, "No satellites", transform=ax.transAxes,
                ha="center", va="center", fontsize=14, color="#95a5a6")
        return fig

    ax.scatter(
        walker_df["raan_deg"],
        walker_df["true_anomaly0_deg"],
        c=walker_df["plane"],
        cmap="viridis",
        s=12,
        edgecolors="none",
    )
    ax.set_xlim(0, 360)
    ax.set_ylim(0, 360)
    ax.set_xlabel("RAAN (°)")
    ax.set_ylabel("True anomaly at epoch (°)")
    ax.set_title(f"{title} ({len(walker_df)} satellites)")

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def generate_report(
    series_df: Optional[pd.DataFrame] = None,
    walker_df: Optional[pd.DataFrame] = None,
    output_dir: str | Path = "data/reports",
    name: str = "Unknown",
) -> Path:
    """Write a markdown summary and all applicable plots as PNGs.

    Returns the output directory path.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    summary = (
        f"# keprop — Propagation Report\n"
        f"## {name}\n\n"
        f"- **Report generated:** {datetime.now():%Y-%m-%d %H:%M}\n"
    )

    if series_df is not None and not series_df.empty:
        radius = np.sqrt(
            series_df["x_eci_km"] ** 2
            + series_df["y_eci_km"] ** 2
            + series_df["z_eci_km"] ** 2
        )
        summary += (
            f"- **Epochs propagated:** {len(series_df)}\n"
            f"- **Window:** {series_df['time'].iloc[0]} → {series_df['time'].iloc[-1]}\n"
            f"- **Radius range:** {radius.min():.3f} – {radius.max():.3f} km\n"
        )
        plot_position_history(series_df, "eci", title=f"{name} — ECI",
                              save_path=output_dir / "position_eci.png")
        plot_position_history(series_df, "ecef", title=f"{name} — ECEF",
                              save_path=output_dir / "position_ecef.png")
        plot_ground_track(series_df, title=f"{name} — Ground Track",
                          save_path=output_dir / "ground_track.png")

    if walker_df is not None and not walker_df.empty:
        summary += (
            f"- **Satellites:** {len(walker_df)}\n"
            f"- **Planes:** {walker_df['plane'].nunique()}\n"
        )
        plot_walker_geometry(walker_df, title=f"{name} — Geometry",
                             save_path=output_dir / "walker_geometry.png")

    (output_dir / "report.md").write_text(summary, encoding="utf-8")

    plt.close("all")
    return output_dir
