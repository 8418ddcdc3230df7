"""Correlation command group: analysis, pairs and diversification from a price CSV."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from cli.display import (
    error_panel,
    excluded_table,
    guidance_panel,
    heatmap_table,
    pairs_table,
    selection_table,
)
from corrguide.data import DateRange, PriceFrameStore
from corrguide.exceptions import CorrGuideError
from corrguide.pipeline import CorrelationService

correlation_app = typer.Typer(
    name="correlation",
    help="Correlation matrix, high-correlation pairs and diversification.",
)

_SESSION = "cli"


def _analyze(
    prices: Path,
    tickers: Optional[List[str]],
    start: Optional[str],
    end: Optional[str],
) -> CorrelationService:
    """Load prices, run the analysis into the CLI session and return the service."""
    store = PriceFrameStore.from_csv(prices)
    service = CorrelationService(store)
    service.analyze(_SESSION, tickers or list(store.tickers), DateRange(start, end))
    return service


_PRICES = typer.Argument(
    ..., exists=True, dir_okay=False, help="CSV of prices: date column, one column per ticker."
)
_TICKERS = typer.Option(None, "--ticker", "-t", help="Ticker to include. Repeat for multiple.")
_START = typer.Option(None, "--start", help="First observation date (YYYY-MM-DD).")
_END = typer.Option(None, "--end", help="Last observation date (YYYY-MM-DD).")


# ------------------------------------------------------------------
# matrix
# ------------------------------------------------------------------


@correlation_app.command()
def matrix(
    prices: Path = _PRICES,
    ticker: Optional[List[str]] = _TICKERS,
    start: Optional[str] = _START,
    end: Optional[str] = _END,
) -> None:
    """Compute and display the correlation heatmap."""
    try:
        service = _analyze(prices, ticker, start, end)
        heatmap = service.heatmap(_SESSION)
    except CorrGuideError as exc:
        error_panel(exc)
        raise typer.Exit(code=1)
    heatmap_table(heatmap)


# ------------------------------------------------------------------
# pairs
# ------------------------------------------------------------------


@correlation_app.command()
def pairs(
    prices: Path = _PRICES,
    ticker: Optional[List[str]] = _TICKERS,
    start: Optional[str] = _START,
    end: Optional[str] = _END,
    threshold: float = typer.Option(0.7, help="Minimum |correlation| to report."),
) -> None:
    """List ticker pairs whose |correlation| meets the threshold."""
    try:
        service = _analyze(prices, ticker, start, end)
        found = service.high_correlation_pairs(_SESSION, threshold)
    except CorrGuideError as exc:
        error_panel(exc)
        raise typer.Exit(code=1)

    pairs_table(found, threshold)


# ------------------------------------------------------------------
# diversify
# ------------------------------------------------------------------


@correlation_app.command()
def diversify(
    prices: Path = _PRICES,
    ticker: Optional[List[str]] = _TICKERS,
    start: Optional[str] = _START,
    end: Optional[str] = _END,
    threshold: float = typer.Option(0.7, help="Reject candidates at or above this |correlation|."),
) -> None:
    """Greedily select a diversified subset; tickers are visited in the given order."""
    try:
        service = _analyze(prices, ticker, start, end)
        guide = service.diversification_guide(_SESSION, threshold)
    except CorrGuideError as exc:
        error_panel(exc)
        raise typer.Exit(code=1)

    selection_table(guide)
    excluded_table(guide.selection.excluded)
    guidance_panel(guide.recommendations)
