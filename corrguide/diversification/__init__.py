"""Greedy, deterministic diversification of a ticker universe.

Selects a low-redundancy subset of candidates against a correlation
threshold, records why each rejected candidate was excluded, and scores
the resulting selection.
"""

from corrguide.diversification._config import DiversificationConfig, ExclusionReason
from corrguide.diversification._guide import (
    DiversificationGuide,
    build_diversification_guide,
)
from corrguide.diversification._optimizer import (
    DiversificationSelection,
    ExcludedTicker,
    Priority,
    compute_diversification_score,
    optimize_diversification,
    order_candidates,
)

__all__ = [
    "DiversificationConfig",
    "DiversificationGuide",
    "DiversificationSelection",
    "ExcludedTicker",
    "ExclusionReason",
    "Priority",
    "build_diversification_guide",
    "compute_diversification_score",
    "optimize_diversification",
    "order_candidates",
]
