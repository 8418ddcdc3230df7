"""Result container for a correlation analysis run."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from corrguide.correlation._engine import as_correlation_frame
from corrguide.universe import normalize_ticker

if TYPE_CHECKING:
    from corrguide.data import DateRange


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CorrelationAnalysisResult:
    """Outcome of one correlation analysis for a session.

    A new analysis for the same session supersedes the previous
    result; results are never merged.

    Attributes
    ----------
    tickers : tuple of str
        Analysed universe in display order.
    matrix : pd.DataFrame
        Tickers x tickers correlation matrix in the same order.
    computed_at : datetime
        UTC timestamp of the computation.
    date_range : DateRange or None
        Observation window the returns were drawn from, when known.
    """

    tickers: tuple[str, ...]
    matrix: pd.DataFrame
    computed_at: datetime = field(default_factory=_utcnow)
    date_range: DateRange | None = None

    def coefficient(self, ticker_a: str, ticker_b: str) -> float:
        """Correlation coefficient between two analysed tickers."""
        return float(
            self.matrix.at[normalize_ticker(ticker_a), normalize_ticker(ticker_b)]
        )

    def submatrix(self, tickers: Sequence[str] | None = None) -> pd.DataFrame:
        """Correlation matrix restricted to *tickers* (all when ``None``)."""
        return as_correlation_frame(self.matrix, tickers)

    def same_as(self, other: CorrelationAnalysisResult) -> bool:
        """Whether *other* holds the same tickers and a bit-identical matrix.

        ``computed_at`` is ignored.
        """
        return (
            self.tickers == other.tickers
            and list(self.matrix.index) == list(other.matrix.index)
            and list(self.matrix.columns) == list(other.matrix.columns)
            and np.array_equal(self.matrix.to_numpy(), other.matrix.to_numpy())
        )

    def to_dict(self, decimals: int | None = None) -> dict[str, Any]:
        """JSON-ready representation with a nested coefficient mapping."""
        values = self.matrix if decimals is None else self.matrix.round(decimals)
        return {
            "tickers": list(self.tickers),
            "computed_at": self.computed_at.isoformat(),
            "date_range": None if self.date_range is None else self.date_range.to_dict(),
            "correlation_matrix": {
                row: {col: float(values.at[row, col]) for col in values.columns}
                for row in values.index
            },
        }
