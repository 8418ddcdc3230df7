"""Rich renderers for correlation, diversification and factor weight output."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from corrguide.diversification import DiversificationGuide, ExcludedTicker
from corrguide.exceptions import CorrGuideError
from corrguide.heatmap import HeatmapBucket, HeatmapData
from corrguide.pairs import HighCorrelationPair
from corrguide.weights import FACTOR_NAMES, FactorWeights

console = Console()

_BUCKET_STYLE = {
    HeatmapBucket.HIGH_POSITIVE: "bold red",
    HeatmapBucket.HIGH_NEGATIVE: "bold blue",
    HeatmapBucket.NEUTRAL: "",
}


def _signed(value: float, style: str) -> str:
    text = f"{value:+.4f}"
    return f"[{style}]{text}[/{style}]" if style else text


def _sign_style(value: float) -> str:
    return "red" if value > 0 else "blue"


# ------------------------------------------------------------------
# Panels
# ------------------------------------------------------------------


def error_panel(exc: CorrGuideError) -> None:
    """Print a red panel titled with the failure's error class."""
    console.print(Panel(str(exc), title=type(exc).__name__, border_style="red"))


def guidance_panel(recommendations: Sequence[str]) -> None:
    """Print the diversification recommendations as a bulleted panel."""
    body = "\n".join(f"- {line}" for line in recommendations) or "No guidance."
    console.print(Panel(body, title="Guidance", border_style="blue"))


# ------------------------------------------------------------------
# Tables
# ------------------------------------------------------------------


def heatmap_table(heatmap: HeatmapData, title: str = "Correlation Matrix") -> None:
    """Render a heatmap grid, colouring cells by bucket."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("", style="bold")
    for label in heatmap.column_labels:
        table.add_column(label, justify="right")

    width = len(heatmap.column_labels)
    for i, label in enumerate(heatmap.row_labels):
        cells = heatmap.cells[i * width : (i + 1) * width]
        rendered = []
        for cell in cells:
            style = _BUCKET_STYLE[cell.bucket]
            text = f"{cell.value:+.2f}"
            rendered.append(f"[{style}]{text}[/{style}]" if style else text)
        table.add_row(label, *rendered)
    console.print(table)


def pairs_table(pairs: Sequence[HighCorrelationPair], threshold: float) -> None:
    """Render ranked high-correlation pairs followed by a count line."""
    if pairs:
        table = Table(
            title=f"Pairs with |correlation| >= {threshold:.2f}",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("Ticker A", style="bold")
        table.add_column("Ticker B", style="bold")
        table.add_column("Correlation", justify="right")
        for rank, pair in enumerate(pairs, start=1):
            table.add_row(
                str(rank),
                pair.ticker_a,
                pair.ticker_b,
                _signed(pair.coefficient, _sign_style(pair.coefficient)),
            )
        console.print(table)
    console.print(f"[green]{len(pairs)} pair(s) found.[/green]")


def selection_table(guide: DiversificationGuide) -> None:
    """Render the selected tickers and the score before and after selection."""
    selection = guide.selection
    table = Table(
        title=f"Diversification at threshold {guide.threshold:.2f}",
        show_header=False,
    )
    table.add_column("", style="bold")
    table.add_column("")
    table.add_row("Selected", ", ".join(selection.selected) or "-")
    table.add_row("Score", f"{selection.portfolio_diversification_score:.4f}")
    table.add_row("Universe score", f"{guide.universe_score:.4f}")
    table.add_row(
        "Improvement",
        _signed(guide.score_improvement, "green" if guide.score_improvement > 0 else ""),
    )
    console.print(table)


def excluded_table(excluded: Sequence[ExcludedTicker]) -> None:
    """Render rejected candidates with the selected ticker each collided with."""
    if not excluded:
        console.print("[dim]No candidates excluded.[/dim]")
        return
    table = Table(title="Excluded", show_header=True, header_style="bold cyan")
    table.add_column("Ticker", style="bold")
    table.add_column("Conflicts with")
    table.add_column("Correlation", justify="right")
    table.add_column("Reason", style="dim")
    for item in excluded:
        table.add_row(
            item.ticker,
            item.conflicting_ticker,
            _signed(item.correlation, _sign_style(item.correlation)),
            item.reason.value,
        )
    console.print(table)


def weights_table(weights: FactorWeights, title: str = "Factor Weights") -> None:
    """Render factor weights, marking the derived one."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Factor", style="bold")
    table.add_column("Weight", justify="right")
    for name in FACTOR_NAMES:
        value = str(getattr(weights, name))
        if name == weights.auto_calculated:
            value = f"[yellow]{value}[/yellow] (derived)"
        table.add_row(name, value)
    table.add_row("total", str(weights.total), style="dim")
    console.print(table)
