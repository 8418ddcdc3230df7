"""Tests for the corrguide CLI."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from cli import app

runner = CliRunner()


@pytest.fixture()
def prices_csv(abc_prices: pd.DataFrame, tmp_path: Path) -> Path:
    path = tmp_path / "prices.csv"
    abc_prices.to_csv(path)
    return path


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "corrguide CLI" in result.output

    def test_help_lists_groups(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "correlation" in result.output
        assert "weights" in result.output


class TestCorrelationCommands:
    def test_matrix(self, prices_csv: Path) -> None:
        result = runner.invoke(app, ["correlation", "matrix", str(prices_csv)])
        assert result.exit_code == 0
        assert "+0.90" in result.output

    def test_matrix_subset(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "matrix", str(prices_csv), "-t", "A", "-t", "C"]
        )
        assert result.exit_code == 0
        assert "+0.10" in result.output
        assert "+0.90" not in result.output

    def test_pairs(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "pairs", str(prices_csv), "--threshold", "0.7"]
        )
        assert result.exit_code == 0
        assert "1 pair(s) found." in result.output

    def test_diversify(self, prices_csv: Path) -> None:
        result = runner.invoke(app, ["correlation", "diversify", str(prices_csv)])
        assert result.exit_code == 0
        assert "Excluded" in result.output
        assert "Consider dropping B" in result.output

    def test_pairs_rows_name_both_tickers(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "pairs", str(prices_csv), "--threshold", "0.7"]
        )
        assert "Ticker A" in result.output
        assert "+0.9000" in result.output

    def test_pairs_none_found(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "pairs", str(prices_csv), "--threshold", "0.95"]
        )
        assert result.exit_code == 0
        assert "0 pair(s) found." in result.output
        assert "Ticker A" not in result.output

    def test_diversify_shows_conflict_and_scores(self, prices_csv: Path) -> None:
        result = runner.invoke(app, ["correlation", "diversify", str(prices_csv)])
        assert "Conflicts with" in result.output
        assert "high_correlation" in result.output
        assert "Universe score" in result.output

    def test_error_panel_names_error_class(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "pairs", str(prices_csv), "--threshold", "1.5"]
        )
        assert "InvalidThresholdError" in result.output

    def test_unknown_ticker_fails(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "matrix", str(prices_csv), "-t", "A", "-t", "ZZZ"]
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_threshold_fails(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "pairs", str(prices_csv), "--threshold", "1.5"]
        )
        assert result.exit_code == 1

    def test_bad_date_fails(self, prices_csv: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "matrix", str(prices_csv), "--start", "yesterday"]
        )
        assert result.exit_code == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["correlation", "matrix", str(tmp_path / "missing.csv")]
        )
        assert result.exit_code != 0


class TestWeightsCommands:
    def test_complete(self) -> None:
        result = runner.invoke(app, ["weights", "complete", "--roe", "0.5", "--pbr", "0.3"])
        assert result.exit_code == 0
        assert "0.2000" in result.output
        assert "per" in result.output

    def test_complete_requires_two(self) -> None:
        result = runner.invoke(app, ["weights", "complete", "--roe", "0.5"])
        assert result.exit_code == 1
        assert "exactly 2" in result.output

    def test_defaults(self) -> None:
        result = runner.invoke(app, ["weights", "defaults"])
        assert result.exit_code == 0
        assert "0.3334" in result.output

    def test_complete_marks_derived_weight(self) -> None:
        result = runner.invoke(app, ["weights", "complete", "--roe", "0.5", "--pbr", "0.3"])
        assert "(derived)" in result.output
        assert "1.0000" in result.output
