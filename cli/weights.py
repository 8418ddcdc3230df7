"""Factor weight command group."""

from __future__ import annotations

from typing import Optional

import typer

from cli.display import error_panel, weights_table
from corrguide.exceptions import CorrGuideError
from corrguide.weights import DEFAULT_FACTOR_WEIGHTS, complete_factor_weights

weights_app = typer.Typer(name="weights", help="ROE / PBR / PER factor weights.")


@weights_app.command()
def complete(
    roe: Optional[str] = typer.Option(None, help="ROE weight in [0, 1]."),
    pbr: Optional[str] = typer.Option(None, help="PBR weight in [0, 1]."),
    per: Optional[str] = typer.Option(None, help="PER weight in [0, 1]."),
) -> None:
    """Derive the third factor weight from the two supplied."""
    try:
        weights = complete_factor_weights(roe=roe, pbr=pbr, per=per)
    except CorrGuideError as exc:
        error_panel(exc)
        raise typer.Exit(code=1)
    weights_table(weights)


@weights_app.command()
def defaults() -> None:
    """Show the default factor weights."""
    weights_table(DEFAULT_FACTOR_WEIGHTS, title="Default Factor Weights")
