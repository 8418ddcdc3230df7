"""Tests for the session-aware correlation service."""

from __future__ import annotations

import pandas as pd
import pytest

from corrguide.config import Settings
from corrguide.data import DateRange, PriceFrameStore
from corrguide.exceptions import (
    InsufficientDataError,
    InvalidInputError,
    InvalidThresholdError,
    NoAnalysisAvailableError,
    TickerNotFoundError,
)
from corrguide.heatmap import HeatmapBucket
from corrguide.pipeline import CorrelationService
from corrguide.session import AnalysisSessionCache


@pytest.fixture()
def service(abc_prices: pd.DataFrame, settings: Settings) -> CorrelationService:
    return CorrelationService(PriceFrameStore(abc_prices), settings=settings)


class TestAnalyze:
    def test_recovers_correlations(self, service: CorrelationService) -> None:
        result = service.analyze("s1", ["a", "b", "c"])
        assert result.tickers == ("A", "B", "C")
        assert result.coefficient("A", "B") == pytest.approx(0.9, abs=1e-9)
        assert result.coefficient("A", "C") == pytest.approx(0.1, abs=1e-9)
        assert result.coefficient("C", "B") == pytest.approx(0.2, abs=1e-9)
        assert result.coefficient("B", "B") == 1.0

    def test_caches_result(self, service: CorrelationService) -> None:
        result = service.analyze("s1", ["A", "B", "C"])
        assert service.get_result("s1") is result

    def test_records_date_range(self, service: CorrelationService) -> None:
        window = DateRange("2024-02-01", "2024-05-31")
        result = service.analyze("s1", ["A", "B"], window)
        assert result.date_range == window
        assert result.to_dict()["date_range"] == {"start": "2024-02-01", "end": "2024-05-31"}

    def test_idempotent(self, service: CorrelationService) -> None:
        first = service.analyze("s1", ["A", "B", "C"])
        second = service.analyze("s1", ["A", "B", "C"])
        assert second.same_as(first)

    def test_parallel_matches_serial(
        self, abc_prices: pd.DataFrame, service: CorrelationService
    ) -> None:
        parallel = CorrelationService(
            PriceFrameStore(abc_prices),
            settings=Settings(_env_file=None, max_workers=3),
        )
        assert parallel.analyze("p", ["A", "B", "C"]).same_as(
            service.analyze("s", ["A", "B", "C"])
        )

    def test_reanalysis_replaces(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        service.analyze("s1", ["A", "C"])
        assert service.get_result("s1").tickers == ("A", "C")

    def test_sessions_isolated(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        service.analyze("s2", ["B", "C"])
        assert service.get_result("s1").tickers == ("A", "B", "C")
        assert service.get_result("s2").tickers == ("B", "C")

    def test_failure_keeps_previous_result(self, service: CorrelationService) -> None:
        previous = service.analyze("s1", ["A", "B", "C"])
        with pytest.raises(TickerNotFoundError):
            service.analyze("s1", ["A", "ZZZ"])
        assert service.get_result("s1") is previous

    def test_zero_variance_ticker(
        self, abc_prices: pd.DataFrame, settings: Settings
    ) -> None:
        prices = abc_prices.assign(D=10.0)
        service = CorrelationService(PriceFrameStore(prices), settings=settings)
        result = service.analyze("s1", ["A", "D"])
        assert result.coefficient("A", "D") == 0.0
        assert result.coefficient("D", "D") == 1.0

    def test_single_ticker(self, service: CorrelationService) -> None:
        with pytest.raises(InsufficientDataError, match="at least 2 tickers"):
            service.analyze("s1", ["A"])

    def test_duplicate_tickers(self, service: CorrelationService) -> None:
        with pytest.raises(InvalidInputError, match="duplicate"):
            service.analyze("s1", ["A", "a"])


class TestSessionLifecycle:
    def test_nothing_before_analysis(self, service: CorrelationService) -> None:
        with pytest.raises(NoAnalysisAvailableError):
            service.get_result("s1")
        with pytest.raises(NoAnalysisAvailableError):
            service.heatmap("s1")
        with pytest.raises(NoAnalysisAvailableError):
            service.high_correlation_pairs("s1")
        with pytest.raises(NoAnalysisAvailableError):
            service.diversification_guide("s1")

    def test_delete_result(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        assert service.delete_result("s1") is True
        assert service.delete_result("s1") is False
        with pytest.raises(NoAnalysisAvailableError):
            service.high_correlation_pairs("s1")

    def test_shared_cache(self, abc_prices: pd.DataFrame, settings: Settings) -> None:
        cache = AnalysisSessionCache()
        store = PriceFrameStore(abc_prices)
        CorrelationService(store, cache=cache, settings=settings).analyze("s1", ["A", "B"])
        other = CorrelationService(store, cache=cache, settings=settings)
        assert other.cache is cache
        assert other.get_result("s1").tickers == ("A", "B")

    def test_ttl_from_settings(self, abc_prices: pd.DataFrame) -> None:
        service = CorrelationService(
            PriceFrameStore(abc_prices),
            settings=Settings(_env_file=None, session_ttl_seconds=30),
        )
        assert service.cache.ttl_seconds == 30


class TestDerivedViews:
    def test_heatmap_defaults_to_all_tickers(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        heatmap = service.heatmap("s1")
        assert heatmap.row_labels == ("A", "B", "C")
        assert heatmap.cell("A", "B").bucket is HeatmapBucket.HIGH_POSITIVE
        assert heatmap.cell("A", "C").bucket is HeatmapBucket.NEUTRAL

    @pytest.mark.parametrize("tickers", [None, []])
    def test_heatmap_empty_selection_means_all(
        self, service: CorrelationService, tickers: list[str] | None
    ) -> None:
        service.analyze("s1", ["A", "B", "C"])
        assert len(service.heatmap("s1", tickers).cells) == 9

    def test_heatmap_subset(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        heatmap = service.heatmap("s1", ["c", "a"])
        assert heatmap.row_labels == ("C", "A")
        assert heatmap.cell("C", "A").value == pytest.approx(0.1, abs=1e-4)

    def test_heatmap_unknown_ticker(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B"])
        with pytest.raises(InvalidInputError):
            service.heatmap("s1", ["A", "C"])

    def test_pairs_default_threshold(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        pairs = service.high_correlation_pairs("s1")
        assert [(p.ticker_a, p.ticker_b) for p in pairs] == [("A", "B")]

    def test_pairs_explicit_threshold(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        assert len(service.high_correlation_pairs("s1", 0.0)) == 3

    def test_pairs_invalid_threshold(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        with pytest.raises(InvalidThresholdError):
            service.high_correlation_pairs("s1", 1.5)

    def test_diversification_guide(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        guide = service.diversification_guide("s1")
        assert guide.selection.selected == ("A", "C")
        assert guide.selection.excluded_tickers == ("B",)


class TestDiversify:
    def test_from_session(self, service: CorrelationService) -> None:
        service.analyze("s1", ["A", "B", "C"])
        selection = service.diversify(["A", "B", "C"], session_id="s1")
        assert selection.selected == ("A", "C")
        assert selection.portfolio_diversification_score == pytest.approx(0.9, abs=1e-9)

    def test_from_matrix_without_analysis(
        self, service: CorrelationService, abc_matrix: pd.DataFrame
    ) -> None:
        selection = service.diversify(["A", "B", "C"], 0.7, matrix=abc_matrix)
        assert selection.selected == ("A", "C")
        assert selection.excluded[0].conflicting_ticker == "A"

    def test_settings_threshold_default(
        self, abc_prices: pd.DataFrame, abc_matrix: pd.DataFrame
    ) -> None:
        service = CorrelationService(
            PriceFrameStore(abc_prices),
            settings=Settings(_env_file=None, default_threshold=0.95),
        )
        selection = service.diversify(["A", "B", "C"], matrix=abc_matrix)
        assert selection.threshold == 0.95
        assert selection.selected == ("A", "B", "C")

    def test_priority(self, service: CorrelationService, abc_matrix: pd.DataFrame) -> None:
        selection = service.diversify(["A", "B", "C"], 0.7, ["B"], matrix=abc_matrix)
        assert selection.selected == ("B", "C")

    def test_requires_matrix_or_session(self, service: CorrelationService) -> None:
        with pytest.raises(InvalidInputError, match="matrix or a session_id"):
            service.diversify(["A", "B"])

    def test_session_without_analysis(self, service: CorrelationService) -> None:
        with pytest.raises(NoAnalysisAvailableError):
            service.diversify(["A", "B"], session_id="missing")
