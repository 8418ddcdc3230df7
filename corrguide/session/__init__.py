"""Session-scoped caching of correlation analyses."""

from corrguide.session._cache import AnalysisSessionCache

__all__ = [
    "AnalysisSessionCache",
]
