"""Configuration and enums for diversification selection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from corrguide.exceptions import ConfigurationError


class ExclusionReason(str, Enum):
    """Why a candidate was left out of the diversified selection."""

    HIGH_CORRELATION = "high_correlation"


@dataclass(frozen=True)
class DiversificationConfig:
    """Immutable configuration for greedy diversification.

    Parameters
    ----------
    threshold : float
        Absolute correlation to any already-selected ticker at which
        a candidate is rejected.  Must be in ``[0, 1]``.
    """

    threshold: float = 0.7

    def __post_init__(self) -> None:
        if not (0.0 <= self.threshold <= 1.0):
            raise ConfigurationError(
                f"threshold must be in [0, 1], got {self.threshold}"
            )

    @classmethod
    def for_strict(cls) -> DiversificationConfig:
        """Reject moderately correlated candidates (|rho| >= 0.5)."""
        return cls(threshold=0.5)

    @classmethod
    def for_relaxed(cls) -> DiversificationConfig:
        """Reject only near-duplicates (|rho| >= 0.9)."""
        return cls(threshold=0.9)
