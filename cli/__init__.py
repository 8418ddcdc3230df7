"""corrguide CLI: Typer app factory and entry point."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from cli.correlation import correlation_app
from cli.weights import weights_app
from corrguide.config import get_settings

app = typer.Typer(
    name="corrguide",
    help="corrguide CLI: correlation analysis and diversification from the terminal.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        from corrguide import __version__

        typer.echo(f"corrguide CLI {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to CORRGUIDE_LOG_LEVEL or WARNING).",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show CLI version and exit.",
    ),
) -> None:
    """Global options applied before any sub-command."""
    level = (log_level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register command groups
app.add_typer(correlation_app)
app.add_typer(weights_app)


if __name__ == "__main__":
    app()
