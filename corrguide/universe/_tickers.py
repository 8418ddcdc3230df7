"""Ticker normalization and universe validation."""

from __future__ import annotations

from collections.abc import Iterable

from corrguide.exceptions import InvalidInputError


def normalize_ticker(ticker: str) -> str:
    """Strip whitespace and upper-case a ticker symbol.

    Raises
    ------
    InvalidInputError
        If *ticker* is not a string or is empty after stripping.
    """
    if not isinstance(ticker, str):
        raise InvalidInputError(
            f"ticker must be a string, got {type(ticker).__name__}"
        )
    symbol = ticker.strip().upper()
    if not symbol:
        raise InvalidInputError("ticker must be a non-empty string")
    return symbol


def normalize_universe(
    tickers: Iterable[str],
    *,
    allow_empty: bool = False,
) -> tuple[str, ...]:
    """Normalize a ticker universe, preserving input order.

    Parameters
    ----------
    tickers : iterable of str
        Raw ticker symbols.
    allow_empty : bool
        Accept an empty universe instead of raising.

    Returns
    -------
    tuple of str
        Normalized, unique tickers in their original order.

    Raises
    ------
    InvalidInputError
        If any ticker is empty, two tickers collide after
        normalization, or the universe is empty and *allow_empty*
        is ``False``.
    """
    if isinstance(tickers, str):
        raise InvalidInputError(
            "tickers must be a collection of symbols, not a single string"
        )

    seen: dict[str, None] = {}
    for raw in tickers:
        symbol = normalize_ticker(raw)
        if symbol in seen:
            raise InvalidInputError(f"duplicate ticker {symbol!r} in universe")
        seen[symbol] = None

    if not seen and not allow_empty:
        raise InvalidInputError("ticker universe must not be empty")
    return tuple(seen)
