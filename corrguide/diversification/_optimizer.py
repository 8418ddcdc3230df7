"""Greedy correlation-aware subset selection.

Candidates are visited in priority order and accepted unless their
absolute correlation to *any* already-selected ticker meets the
threshold.  This is a heuristic: an exact maximum low-redundancy subset
is a combinatorial (NP-hard) search and is not attempted.  The result
depends only on the candidate order, which is made total by breaking
priority ties on the ticker name, so repeated calls are reproducible.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

import numpy as np
import pandas as pd

from corrguide.correlation import as_correlation_frame
from corrguide.diversification._config import ExclusionReason
from corrguide.exceptions import InvalidInputError
from corrguide.pairs import validate_threshold
from corrguide.universe import normalize_ticker, normalize_universe

logger = logging.getLogger(__name__)

Priority = Union[Mapping[str, float], Callable[[str], float], Sequence[str], None]


@dataclass(frozen=True)
class ExcludedTicker:
    """A rejected candidate and the selected ticker it collided with."""

    ticker: str
    reason: ExclusionReason
    conflicting_ticker: str
    correlation: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "reason": self.reason.value,
            "conflicting_ticker": self.conflicting_ticker,
            "correlation": self.correlation,
        }


@dataclass(frozen=True)
class DiversificationSelection:
    """Outcome of one greedy diversification pass.

    Attributes
    ----------
    selected : tuple of str
        Accepted tickers in acceptance order.
    excluded : tuple of ExcludedTicker
        Rejected tickers in visiting order.
    portfolio_diversification_score : float
        ``1 - mean(|rho|)`` over unordered pairs of ``selected``;
        ``1.0`` with fewer than two selected tickers.
    threshold : float
        Threshold the selection was made with.
    """

    selected: tuple[str, ...]
    excluded: tuple[ExcludedTicker, ...]
    portfolio_diversification_score: float
    threshold: float

    @property
    def excluded_tickers(self) -> tuple[str, ...]:
        return tuple(e.ticker for e in self.excluded)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected": list(self.selected),
            "excluded": [e.to_dict() for e in self.excluded],
            "portfolio_diversification_score": self.portfolio_diversification_score,
            "threshold": self.threshold,
        }


def order_candidates(
    candidates: Sequence[str],
    priority: Priority = None,
) -> tuple[str, ...]:
    """Sort candidates into the total order used for greedy selection.

    Parameters
    ----------
    candidates : sequence of str
        Unique candidate tickers.
    priority : mapping, callable, sequence or None
        ``None`` keeps input order.  A mapping or callable yields a
        score per ticker, higher first; tickers absent from a mapping
        (or scored NaN) come last.  A sequence of tickers is an
        explicit ranking, earlier first; unlisted tickers come last.
        Equal priorities are broken by ticker name.

    Returns
    -------
    tuple of str
        Normalized candidates in visiting order.
    """
    universe = normalize_universe(candidates, allow_empty=True)
    if priority is None:
        return universe

    if isinstance(priority, Mapping):
        scores = {normalize_ticker(k): float(v) for k, v in priority.items()}
        score_of: Callable[[str], float] = lambda t: scores.get(t, -math.inf)
    elif callable(priority):
        score_of = lambda t: float(priority(t))
    elif isinstance(priority, Sequence) and not isinstance(priority, str):
        rank = {}
        for position, ticker in enumerate(priority):
            rank.setdefault(normalize_ticker(ticker), position)
        return tuple(sorted(universe, key=lambda t: (rank.get(t, len(rank)), t)))
    else:
        raise InvalidInputError(
            f"priority must be a mapping, callable or sequence, got {type(priority).__name__}"
        )

    def _key(ticker: str) -> tuple[float, str]:
        score = score_of(ticker)
        if math.isnan(score):
            score = -math.inf
        return (-score, ticker)

    return tuple(sorted(universe, key=_key))


def compute_diversification_score(
    tickers: Sequence[str],
    matrix: pd.DataFrame | Mapping[str, Mapping[str, float]],
) -> float:
    """Return ``1 - mean(|rho|)`` over unordered pairs of *tickers*.

    Defined as ``1.0`` when fewer than two tickers are given.
    """
    universe = normalize_universe(tickers, allow_empty=True)
    if len(universe) < 2:
        return 1.0
    values = as_correlation_frame(matrix, universe).to_numpy()
    upper = np.abs(values[np.triu_indices(len(universe), k=1)])
    return float(min(1.0, max(0.0, 1.0 - upper.mean())))


def optimize_diversification(
    candidates: Sequence[str],
    matrix: pd.DataFrame | Mapping[str, Mapping[str, float]],
    threshold: float,
    priority: Priority = None,
) -> DiversificationSelection:
    """Greedily select a low-redundancy subset of *candidates*.

    Parameters
    ----------
    candidates : sequence of str
        Unique candidate tickers.
    matrix : pd.DataFrame or mapping
        Correlation matrix covering every candidate.
    threshold : float
        A candidate whose maximum absolute correlation to the current
        selection is ``>= threshold`` is rejected.  At ``0`` only an
        exactly zero correlation is accepted.  Must be in ``[0, 1]``.
    priority : mapping, callable, sequence or None
        Visiting order, see :func:`order_candidates`.

    Returns
    -------
    DiversificationSelection

    Raises
    ------
    InvalidThresholdError
        If *threshold* is outside ``[0, 1]``.
    InvalidInputError
        On duplicate candidates or candidates missing from *matrix*.
    """
    threshold = validate_threshold(threshold)
    ordered = order_candidates(candidates, priority)
    if not ordered:
        return DiversificationSelection((), (), 1.0, threshold)

    frame = as_correlation_frame(matrix, ordered)
    values = frame.to_numpy()

    selected: list[int] = []
    excluded: list[ExcludedTicker] = []
    for idx, ticker in enumerate(ordered):
        if not selected:
            selected.append(idx)
            continue

        strengths = np.abs(values[idx, selected])
        best = int(np.argmax(strengths))
        strength = strengths[best]
        # exactly uncorrelated candidates survive even at threshold 0
        if strength >= threshold and (threshold > 0.0 or strength > 0.0):
            conflict = selected[best]
            excluded.append(
                ExcludedTicker(
                    ticker=ticker,
                    reason=ExclusionReason.HIGH_CORRELATION,
                    conflicting_ticker=ordered[conflict],
                    correlation=float(values[idx, conflict]),
                )
            )
        else:
            selected.append(idx)

    chosen = tuple(ordered[i] for i in selected)
    score = compute_diversification_score(chosen, frame)

    logger.debug(
        f"Diversification at threshold {threshold:.2f}: "
        f"selected {len(chosen)}, excluded {len(excluded)}, score {score:.4f}"
    )
    return DiversificationSelection(chosen, tuple(excluded), score, threshold)
