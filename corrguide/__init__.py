"""Correlation analysis and diversification guidance for asset universes.

Modules
-------
universe
    Ticker normalization and universe validation.
data
    Price series stores supplying aligned returns for a date range.
correlation
    Exactly symmetric, NaN-free Pearson correlation matrices.
heatmap
    Render-ready heatmap grids with fixed presentation buckets.
pairs
    Ranked extraction of highly correlated ticker pairs.
diversification
    Greedy, deterministic low-redundancy subset selection and the
    diversification score.
session
    Per-session cache of the latest correlation analysis.
pipeline
    Session-aware service combining the components above.
weights
    Completion of three-factor weightings.
"""

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

logging.getLogger("corrguide").addHandler(logging.NullHandler())

from corrguide.exceptions import (
    ConfigurationError,
    CorrGuideError,
    InsufficientDataError,
    InsufficientHistoryError,
    InvalidInputError,
    InvalidThresholdError,
    NoAnalysisAvailableError,
    TickerNotFoundError,
    UpstreamDataError,
)

__all__ = [
    "ConfigurationError",
    "CorrGuideError",
    "InsufficientDataError",
    "InsufficientHistoryError",
    "InvalidInputError",
    "InvalidThresholdError",
    "NoAnalysisAvailableError",
    "TickerNotFoundError",
    "UpstreamDataError",
]

try:
    __version__ = _pkg_version("corrguide")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
