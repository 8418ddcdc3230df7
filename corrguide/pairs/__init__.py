"""Ranked extraction of highly correlated ticker pairs."""

from corrguide.pairs._extractor import (
    HighCorrelationPair,
    extract_high_correlation_pairs,
    validate_threshold,
)

__all__ = [
    "HighCorrelationPair",
    "extract_high_correlation_pairs",
    "validate_threshold",
]
