"""Configuration for heatmap projection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from corrguide.exceptions import ConfigurationError


class HeatmapBucket(str, Enum):
    """Presentation bucket for a correlation cell.

    The partition of ``[-1, 1]`` is fixed by ``HeatmapConfig.high_cutoff``:
    values at or above the cutoff are high-positive, values at or below
    its negation are high-negative, everything else is neutral.
    """

    HIGH_POSITIVE = "high-positive"
    NEUTRAL = "neutral"
    HIGH_NEGATIVE = "high-negative"


@dataclass(frozen=True)
class HeatmapConfig:
    """Immutable configuration for heatmap construction.

    Parameters
    ----------
    high_cutoff : float
        Absolute coefficient at which a cell leaves the neutral bucket.
        Must be in ``(0, 1]``.
    decimals : int or None
        Rounding applied to cell values.  ``None`` keeps full precision.
    """

    high_cutoff: float = 0.7
    decimals: int | None = 4

    def __post_init__(self) -> None:
        if not (0.0 < self.high_cutoff <= 1.0):
            raise ConfigurationError(
                f"high_cutoff must be in (0, 1], got {self.high_cutoff}"
            )
        if self.decimals is not None and self.decimals < 0:
            raise ConfigurationError(
                f"decimals must be non-negative, got {self.decimals}"
            )

    def bucket_for(self, value: float) -> HeatmapBucket:
        """Bucket of a single coefficient."""
        if value >= self.high_cutoff:
            return HeatmapBucket.HIGH_POSITIVE
        if value <= -self.high_cutoff:
            return HeatmapBucket.HIGH_NEGATIVE
        return HeatmapBucket.NEUTRAL

    @classmethod
    def for_full_precision(cls) -> HeatmapConfig:
        """Default buckets without rounding cell values."""
        return cls(decimals=None)
