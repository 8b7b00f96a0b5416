#!/usr/bin/env python3
"""
Tests for the keprop command-line interface and report plots.
"""
import matplotlib
matplotlib.use("Agg")

import pandas as pd
import pytest
from click.testing import CliRunner

from keprop.cli import main
from keprop.elements import OrbitalElements
from keprop.propagator import propagate_series
from keprop.viz import (
    generate_report,
    plot_ground_track,
    plot_position_history,
    plot_walker_geometry,
)
from keprop.walker import (
    GALILEO,
    generate_walker_delta,
    walker_dataframe,
)


EPOCH_MS = 1704067200000


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def series_df():
    el = OrbitalElements(
        a=6928137.0, e=0.0, i=53.0, raan=0.0, arg_perigee=0.0,
        true_anomaly0=0.0, epoch=EPOCH_MS,
    )
    return propagate_series(el, EPOCH_MS, EPOCH_MS + 2 * 3600000, 120.0)


class TestCLI:
    def test_presets(self, runner):
        result = runner.invoke(main, ["presets"])
        assert result.exit_code == 0
        assert "starlink" in result.output
        assert "galileo" in result.output

    def test_propagate_writes_csv(self, runner, tmp_path):
        out = tmp_path / "sat.csv"
        result = runner.invoke(main, [
            "propagate", "-a", "6928137", "-i", "53",
            "--epoch", "2024-01-01T00:00:00Z", "--hours", "1", "--step", "600",
            "--output", str(out),
        ])
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out)
        assert len(df) == 7
        assert abs(df["x_eci_km"].iloc[-1] - -4828009.368287535 / 1000.0) < 1e-8

    def test_propagate_invalid_elements(self, runner):
        result = runner.invoke(main, ["propagate", "--sma=-5", "-i", "53"])
        assert result.exit_code == 1
        assert "Semi-major axis" in result.output

    def test_propagate_bad_time(self, runner):
        result = runner.invoke(main, ["propagate", "-a", "6928137", "-i", "53", "--epoch", "noon"])
        assert result.exit_code == 2

    @pytest.mark.parametrize("step", ["0", "-60"])
    def test_propagate_non_positive_step(self, runner, step):
        result = runner.invoke(main, ["propagate", "-a", "6928137", "-i", "53", "--step", step])
        assert result.exit_code == 2
        assert "--step" in result.output

    def test_walker_preset(self, runner, tmp_path):
        out = tmp_path / "walker.csv"
        result = runner.invoke(main, ["walker", "--preset", "galileo", "-o", str(out)])
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out)
        assert len(df) == 24
        assert list(df["label"][:3]) == ["p1s1", "p1s2", "p1s3"]

    def test_walker_explicit(self, runner):
        result = runner.invoke(main, [
            "walker", "-a", "6928137", "-i", "53", "--total", "1584", "--planes", "72",
        ])
        assert result.exit_code == 0, result.output
        assert "1584" in result.output

    def test_walker_not_divisible(self, runner):
        result = runner.invoke(main, [
            "walker", "-a", "6928137", "-i", "53", "--total", "100", "--planes", "7",
        ])
        assert result.exit_code == 1
        assert "split evenly" in result.output

    def test_walker_missing_parameters(self, runner):
        result = runner.invoke(main, ["walker", "-a", "6928137"])
        assert result.exit_code == 1
        assert "--preset" in result.output

    def test_snapshot(self, runner, tmp_path):
        out = tmp_path / "snap.csv"
        result = runner.invoke(main, [
            "snapshot", "--preset", "globalstar",
            "--at", "2024-01-01T01:00:00Z", "-o", str(out),
        ])
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out)
        assert len(df) == 48
        assert "x_ecef_km" in df.columns

    def test_walker_report(self, runner, tmp_path):
        result = runner.invoke(main, [
            "walker", "--preset", "galileo", "--report-dir", str(tmp_path / "rep"),
        ])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "rep" / "report.md").exists()
        assert (tmp_path / "rep" / "walker_geometry.png").exists()


class TestViz:
    def test_position_history(self, series_df):
        fig = plot_position_history(series_df, "ecef")
        assert len(fig.axes) == 2

    def test_position_history_bad_frame(self, series_df):
        with pytest.raises(ValueError):
            plot_position_history(series_df, "lvlh")

    def test_ground_track(self, series_df, tmp_path):
        path = tmp_path / "track.png"
        plot_ground_track(series_df, save_path=path)
        assert path.exists()

    def test_walker_geometry(self):
        df = walker_dataframe(generate_walker_delta(GALILEO.to_spec(EPOCH_MS)))
        fig = plot_walker_geometry(df)
        assert "24 satellites" in fig.axes[0].get_title()

    def test_walker_geometry_empty(self):
        fig = plot_walker_geometry(pd.DataFrame())
        assert len(fig.axes) == 1

    def test_generate_report(self, series_df, tmp_path):
        out = generate_report(series_df=series_df, output_dir=tmp_path, name="TEST")
        report = (out / "report.md").read_text(encoding="utf-8")
        assert "Epochs propagated:** 61" in report
        for name in ("position_eci.png", "position_ecef.png", "ground_track.png"):
            assert (out / name).exists()
