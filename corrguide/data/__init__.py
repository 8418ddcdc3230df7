"""Price series sources and observation windows."""

from corrguide.data._store import (
    DateRange,
    PriceFrameStore,
    PriceSeriesStore,
    returns_from_prices,
)

__all__ = [
    "DateRange",
    "PriceFrameStore",
    "PriceSeriesStore",
    "returns_from_prices",
]
