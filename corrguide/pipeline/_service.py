"""Session-aware correlation analysis service.

Entry point for request handlers: every call names its session
explicitly, and results are read from and written to an
``AnalysisSessionCache`` instead of ambient module state.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import pandas as pd

from corrguide.config import Settings, get_settings
from corrguide.correlation import (
    CorrelationAnalysisResult,
    CorrelationConfig,
    compute_correlation_matrix,
)
from corrguide.data import DateRange, PriceSeriesStore
from corrguide.diversification import (
    DiversificationConfig,
    DiversificationGuide,
    DiversificationSelection,
    Priority,
    build_diversification_guide,
    optimize_diversification,
)
from corrguide.exceptions import InvalidInputError
from corrguide.heatmap import HeatmapConfig, HeatmapData, build_heatmap
from corrguide.pairs import HighCorrelationPair, extract_high_correlation_pairs
from corrguide.session import AnalysisSessionCache
from corrguide.universe import normalize_universe

logger = logging.getLogger(__name__)


class CorrelationService:
    """
    Correlation analysis, heatmap, pair ranking and diversification.

    ``analyze`` is the only operation that reads price data; the others
    reuse the session's cached analysis.  ``diversify`` also accepts a
    matrix directly so it can run without any cached analysis.
    """

    def __init__(
        self,
        store: PriceSeriesStore,
        cache: AnalysisSessionCache | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the service.

        Args:
            store: Source of aligned return series
            cache: Session cache (a new one honouring the settings TTL
                when omitted)
            settings: Runtime defaults (process settings when omitted)
        """
        self._settings = settings or get_settings()
        self._store = store
        if cache is None:
            cache = AnalysisSessionCache(ttl_seconds=self._settings.session_ttl_seconds)
        self._cache = cache
        self._correlation = CorrelationConfig(
            min_observations=self._settings.min_observations,
            max_workers=self._settings.max_workers,
        )
        self._heatmap = HeatmapConfig(
            high_cutoff=self._settings.heatmap_high_cutoff,
            decimals=self._settings.heatmap_decimals,
        )
        self._diversification = DiversificationConfig(
            threshold=self._settings.default_threshold
        )

    @property
    def cache(self) -> AnalysisSessionCache:
        return self._cache

    def _threshold(self, threshold: float | None) -> float:
        return self._diversification.threshold if threshold is None else threshold

    # ------------------------------------------------------------------
    # Analysis lifecycle
    # ------------------------------------------------------------------

    def analyze(
        self,
        session_id: str,
        tickers: Sequence[str],
        date_range: DateRange | None = None,
    ) -> CorrelationAnalysisResult:
        """
        Fetch returns, compute the correlation matrix and cache it.

        The new result replaces any earlier analysis of the session.

        Raises:
            InvalidInputError: Empty or duplicate tickers
            InsufficientDataError: Fewer than 2 tickers or observations
            UpstreamDataError: The store could not supply the series
        """
        universe = normalize_universe(tickers)
        date_range = date_range or DateRange()
        logger.info(
            f"Correlation analysis requested - session: {session_id}, "
            f"tickers: {len(universe)}"
        )

        returns = self._store.fetch_aligned_returns(universe, date_range)
        matrix = compute_correlation_matrix(universe, returns, self._correlation)
        result = CorrelationAnalysisResult(
            tickers=universe,
            matrix=matrix,
            date_range=date_range,
        )
        self._cache.put(session_id, result)

        logger.info(
            f"Correlation analysis complete - session: {session_id}, "
            f"observations: {len(returns)}"
        )
        return result

    def get_result(self, session_id: str) -> CorrelationAnalysisResult:
        """
        Return the session's cached analysis.

        Raises:
            NoAnalysisAvailableError: No analysis has been run
        """
        return self._cache.get(session_id)

    def delete_result(self, session_id: str) -> bool:
        """Delete the session's cached analysis."""
        removed = self._cache.delete(session_id)
        logger.info(f"Correlation analysis deleted - session: {session_id}, removed: {removed}")
        return removed

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def heatmap(
        self,
        session_id: str,
        tickers: Sequence[str] | None = None,
    ) -> HeatmapData:
        """
        Heatmap of the cached matrix.

        Args:
            session_id: Session whose analysis to use
            tickers: Subset and order of tickers; all analysed tickers
                when None or empty
        """
        result = self._cache.get(session_id)
        labels = tickers if tickers else result.tickers
        return build_heatmap(labels, result.matrix, self._heatmap)

    def high_correlation_pairs(
        self,
        session_id: str,
        threshold: float | None = None,
    ) -> list[HighCorrelationPair]:
        """Pairs of the cached analysis with |correlation| >= threshold."""
        result = self._cache.get(session_id)
        pairs = extract_high_correlation_pairs(
            result.tickers, result.matrix, self._threshold(threshold)
        )
        logger.debug(f"{len(pairs)} high-correlation pairs for session {session_id}")
        return pairs

    def diversification_guide(
        self,
        session_id: str,
        threshold: float | None = None,
        priority: Priority = None,
    ) -> DiversificationGuide:
        """Diversification guideline over the cached analysis."""
        result = self._cache.get(session_id)
        return build_diversification_guide(
            result.tickers, result.matrix, self._threshold(threshold), priority
        )

    def diversify(
        self,
        candidates: Sequence[str],
        threshold: float | None = None,
        priority: Priority = None,
        *,
        matrix: pd.DataFrame | Mapping[str, Mapping[str, float]] | None = None,
        session_id: str | None = None,
    ) -> DiversificationSelection:
        """
        Greedy diversified selection of *candidates*.

        Uses *matrix* when given, otherwise the session's cached matrix.

        Raises:
            InvalidInputError: Neither matrix nor session_id given
            NoAnalysisAvailableError: session_id has no cached analysis
        """
        if matrix is None:
            if session_id is None:
                raise InvalidInputError("diversify requires a matrix or a session_id")
            matrix = self._cache.get(session_id).matrix
        selection = optimize_diversification(
            candidates, matrix, self._threshold(threshold), priority
        )
        logger.info(
            f"Diversification complete - selected: {len(selection.selected)}, "
            f"excluded: {len(selection.excluded)}, "
            f"score: {selection.portfolio_diversification_score:.2f}"
        )
        return selection
