"""Ticker normalization rules shared by every component."""

from corrguide.universe._tickers import normalize_ticker, normalize_universe

__all__ = [
    "normalize_ticker",
    "normalize_universe",
]
