"""Custom exception hierarchy for the corrguide library."""


class CorrGuideError(Exception):
    """Base exception for all corrguide library errors."""


class ConfigurationError(CorrGuideError):
    """Invalid configuration parameters or missing required arguments."""


class InvalidInputError(CorrGuideError):
    """Malformed caller input: empty or duplicate tickers, bad date range."""


class InvalidThresholdError(InvalidInputError):
    """Correlation threshold outside the closed interval [0, 1]."""


class InsufficientDataError(CorrGuideError):
    """Too few tickers or observations to compute correlations."""


class NoAnalysisAvailableError(CorrGuideError):
    """No cached correlation analysis exists for the requested session."""


class UpstreamDataError(CorrGuideError):
    """The price series store failed to supply aligned returns."""


class TickerNotFoundError(UpstreamDataError):
    """A requested ticker is unknown to the price series store."""


class InsufficientHistoryError(UpstreamDataError):
    """The price series store holds too little history for the date range."""
