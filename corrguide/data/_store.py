"""Price series sources supplying aligned returns to the engine."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import pandas as pd

from corrguide.exceptions import (
    InsufficientHistoryError,
    InvalidInputError,
    TickerNotFoundError,
)
from corrguide.universe import normalize_ticker, normalize_universe

logger = logging.getLogger(__name__)


def _coerce_date(value: date | str | None, label: str) -> date | None:
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise InvalidInputError(f"{label} date {value!r} is not ISO formatted") from exc


@dataclass(frozen=True)
class DateRange:
    """Inclusive observation window; ``None`` leaves a side open.

    Parameters
    ----------
    start : date or None
        First observation date.
    end : date or None
        Last observation date.
    """

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _coerce_date(self.start, "start"))
        object.__setattr__(self, "end", _coerce_date(self.end, "end"))
        if self.start is not None and self.end is not None and self.start > self.end:
            raise InvalidInputError(
                f"date range start {self.start} is after end {self.end}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": None if self.start is None else self.start.isoformat(),
            "end": None if self.end is None else self.end.isoformat(),
        }


@runtime_checkable
class PriceSeriesStore(Protocol):
    """Supplier of aligned return series.

    Implementations return a dates x tickers frame of returns with no
    missing values, columns in the requested order.
    """

    def fetch_aligned_returns(
        self,
        tickers: Sequence[str],
        date_range: DateRange,
    ) -> pd.DataFrame:
        """
        Raises:
            TickerNotFoundError: A ticker is unknown to the store
            InsufficientHistoryError: Too little history in the window
        """
        ...


def returns_from_prices(prices: pd.DataFrame) -> pd.DataFrame:
    """Simple returns from a dates x tickers price frame.

    Dates where any ticker lacks a price are dropped first so every
    return spans the same pair of observation dates.
    """
    aligned = prices.sort_index().dropna(how="any")
    return aligned.pct_change(fill_method=None).iloc[1:]


class PriceFrameStore:
    """
    In-memory price series store backed by a dates x tickers frame.

    Column labels are normalized like tickers.  Returns are computed
    on request for the requested window only.
    """

    def __init__(self, prices: pd.DataFrame, min_observations: int = 2):
        """
        Initialize the store.

        Args:
            prices: Close prices indexed by date, one column per ticker
            min_observations: Minimum number of returns per request
        """
        frame = prices.copy()
        frame.index = pd.DatetimeIndex(pd.to_datetime(frame.index))
        frame.columns = [normalize_ticker(str(c)) for c in frame.columns]
        if frame.columns.has_duplicates:
            raise InvalidInputError("price frame has duplicate ticker columns")
        self._prices = frame.sort_index().astype("float64")
        self._min_observations = min_observations

    @classmethod
    def from_csv(cls, path: str | Path, min_observations: int = 2) -> PriceFrameStore:
        """Load a CSV with a date column first and one column per ticker."""
        prices = pd.read_csv(path, index_col=0, parse_dates=True)
        logger.info(f"Loaded {prices.shape[1]} price series from {path}")
        return cls(prices, min_observations=min_observations)

    @property
    def tickers(self) -> tuple[str, ...]:
        return tuple(self._prices.columns)

    def fetch_aligned_returns(
        self,
        tickers: Sequence[str],
        date_range: DateRange,
    ) -> pd.DataFrame:
        universe = normalize_universe(tickers)
        unknown = [t for t in universe if t not in self._prices.columns]
        if unknown:
            raise TickerNotFoundError(f"no price history for tickers {unknown}")

        start = None if date_range.start is None else pd.Timestamp(date_range.start)
        end = None if date_range.end is None else pd.Timestamp(date_range.end)
        window = self._prices.loc[start:end, list(universe)]

        returns = returns_from_prices(window)
        if len(returns) < self._min_observations:
            raise InsufficientHistoryError(
                f"{len(returns)} aligned returns for {list(universe)} in "
                f"{date_range.to_dict()}, need at least {self._min_observations}"
            )
        return returns
