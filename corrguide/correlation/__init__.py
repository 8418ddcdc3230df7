"""Pearson correlation matrix construction.

Builds exactly symmetric, NaN-free correlation matrices from aligned
return series and wraps them in session-scoped analysis results.
"""

from corrguide.correlation._config import CorrelationConfig
from corrguide.correlation._engine import (
    as_correlation_frame,
    compute_correlation_matrix,
)
from corrguide.correlation._result import CorrelationAnalysisResult

__all__ = [
    "CorrelationAnalysisResult",
    "CorrelationConfig",
    "as_correlation_frame",
    "compute_correlation_matrix",
]
