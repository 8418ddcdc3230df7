"""Extraction of highly correlated ticker pairs."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from corrguide.correlation import as_correlation_frame
from corrguide.exceptions import InvalidThresholdError


def validate_threshold(threshold: float) -> float:
    """Return *threshold* as a float, rejecting values outside ``[0, 1]``.

    Raises
    ------
    InvalidThresholdError
        If *threshold* is not a real number in the closed unit interval.
    """
    try:
        value = float(threshold)
    except (TypeError, ValueError) as exc:
        raise InvalidThresholdError(
            f"threshold must be a number in [0, 1], got {threshold!r}"
        ) from exc
    if math.isnan(value) or not (0.0 <= value <= 1.0):
        raise InvalidThresholdError(
            f"threshold must be in [0, 1], got {threshold!r}"
        )
    return value


@dataclass(frozen=True)
class HighCorrelationPair:
    """Unordered ticker pair whose |correlation| meets a threshold.

    ``ticker_a`` always sorts before ``ticker_b``.
    """

    ticker_a: str
    ticker_b: str
    coefficient: float

    @property
    def is_positive(self) -> bool:
        """Whether the two tickers move together."""
        return self.coefficient > 0.0

    @property
    def strength(self) -> float:
        """Absolute correlation."""
        return abs(self.coefficient)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker_a": self.ticker_a,
            "ticker_b": self.ticker_b,
            "coefficient": self.coefficient,
            "is_positive": self.is_positive,
        }


def extract_high_correlation_pairs(
    tickers: Sequence[str],
    matrix: pd.DataFrame | Mapping[str, Mapping[str, float]],
    threshold: float,
) -> list[HighCorrelationPair]:
    """List off-diagonal pairs with ``|coefficient| >= threshold``.

    Parameters
    ----------
    tickers : sequence of str
        Universe to scan.
    matrix : pd.DataFrame or mapping
        Correlation matrix containing at least *tickers*.
    threshold : float
        Minimum absolute correlation, in ``[0, 1]``.

    Returns
    -------
    list of HighCorrelationPair
        Sorted by descending ``|coefficient|``; ties are broken by
        ``(ticker_a, ticker_b)``.  Empty when no pair qualifies.

    Raises
    ------
    InvalidThresholdError
        If *threshold* is outside ``[0, 1]``.
    InvalidInputError
        If a ticker is missing from *matrix*.
    """
    threshold = validate_threshold(threshold)
    frame = as_correlation_frame(matrix, tickers)
    labels = list(frame.index)
    values = frame.to_numpy()

    pairs = []
    rows, cols = np.triu_indices(len(labels), k=1)
    for i, j in zip(rows, cols):
        coef = float(values[i, j])
        if abs(coef) < threshold:
            continue
        a, b = sorted((labels[i], labels[j]))
        pairs.append(HighCorrelationPair(a, b, coef))

    pairs.sort(key=lambda p: (-p.strength, p.ticker_a, p.ticker_b))
    return pairs
