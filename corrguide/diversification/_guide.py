"""Diversification guideline summarising a correlation analysis."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from corrguide.diversification._optimizer import (
    DiversificationSelection,
    Priority,
    compute_diversification_score,
    optimize_diversification,
)
from corrguide.pairs import HighCorrelationPair, extract_high_correlation_pairs
from corrguide.universe import normalize_universe


@dataclass(frozen=True)
class DiversificationGuide:
    """Selection plus the context needed to explain it.

    Attributes
    ----------
    threshold : float
        Correlation threshold applied throughout.
    selection : DiversificationSelection
        Greedy selection over the analysed universe.
    high_correlation_pairs : tuple of HighCorrelationPair
        Pairs at or above ``threshold`` in the full universe.
    universe_score : float
        Diversification score of the full universe.
    recommendations : tuple of str
        Plain-text guidance lines.
    """

    threshold: float
    selection: DiversificationSelection
    high_correlation_pairs: tuple[HighCorrelationPair, ...]
    universe_score: float
    recommendations: tuple[str, ...]

    @property
    def score_improvement(self) -> float:
        return self.selection.portfolio_diversification_score - self.universe_score

    def to_dict(self) -> dict[str, Any]:
        return {
            "threshold": self.threshold,
            "selection": self.selection.to_dict(),
            "high_correlation_pairs": [p.to_dict() for p in self.high_correlation_pairs],
            "universe_score": self.universe_score,
            "score_improvement": self.score_improvement,
            "recommendations": list(self.recommendations),
        }


def _recommendations(
    universe: tuple[str, ...],
    selection: DiversificationSelection,
    pairs: list[HighCorrelationPair],
    universe_score: float,
) -> tuple[str, ...]:
    lines = []
    if not pairs:
        lines.append(
            f"No pair reaches |correlation| >= {selection.threshold:.2f}; "
            "the universe is already diversified at this threshold."
        )
        return tuple(lines)

    for pair in pairs:
        direction = "together" if pair.is_positive else "in opposite directions"
        lines.append(
            f"{pair.ticker_a} and {pair.ticker_b} move {direction} "
            f"(correlation {pair.coefficient:+.2f})."
        )
    for item in selection.excluded:
        lines.append(
            f"Consider dropping {item.ticker}: correlation "
            f"{item.correlation:+.2f} with {item.conflicting_ticker}."
        )
    lines.append(
        f"Keeping {len(selection.selected)} of {len(universe)} assets moves the "
        f"diversification score from {universe_score:.2f} to "
        f"{selection.portfolio_diversification_score:.2f}."
    )
    return tuple(lines)


def build_diversification_guide(
    tickers: Sequence[str],
    matrix: pd.DataFrame | Mapping[str, Mapping[str, float]],
    threshold: float,
    priority: Priority = None,
) -> DiversificationGuide:
    """Build a diversification guide for *tickers*.

    Runs :func:`optimize_diversification` and
    :func:`extract_high_correlation_pairs` at the same threshold and
    compares the selection's score with that of the full universe.
    """
    universe = normalize_universe(tickers, allow_empty=True)
    selection = optimize_diversification(universe, matrix, threshold, priority)
    pairs = extract_high_correlation_pairs(universe, matrix, selection.threshold)
    universe_score = compute_diversification_score(universe, matrix)
    return DiversificationGuide(
        threshold=selection.threshold,
        selection=selection,
        high_correlation_pairs=tuple(pairs),
        universe_score=universe_score,
        recommendations=_recommendations(universe, selection, pairs, universe_score),
    )
