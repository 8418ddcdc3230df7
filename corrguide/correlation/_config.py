"""Configuration for correlation matrix construction."""

from __future__ import annotations

from dataclasses import dataclass

from corrguide.exceptions import ConfigurationError


@dataclass(frozen=True)
class CorrelationConfig:
    """Immutable configuration for the correlation engine.

    Parameters
    ----------
    min_observations : int
        Minimum number of aligned return observations per series.
        Pearson correlation is undefined below 2.
    max_workers : int
        Number of worker threads for the upper-triangle computation.
        ``1`` runs serially.  The row partition is fixed for a given
        universe size, so results are bit-identical across settings.
    """

    min_observations: int = 2
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.min_observations < 2:
            raise ConfigurationError(
                f"min_observations must be >= 2, got {self.min_observations}"
            )
        if self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be >= 1, got {self.max_workers}"
            )

    # -- factory methods -----------------------------------------------------

    @classmethod
    def for_serial(cls) -> CorrelationConfig:
        """Single-threaded computation (default)."""
        return cls()

    @classmethod
    def for_parallel(cls, max_workers: int = 4) -> CorrelationConfig:
        """Thread-parallel computation across upper-triangle rows."""
        return cls(max_workers=max_workers)

    @classmethod
    def for_daily_quarter(cls) -> CorrelationConfig:
        """Require roughly a quarter of daily returns (63 observations)."""
        return cls(min_observations=63)
