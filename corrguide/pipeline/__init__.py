"""Session-aware orchestration of the correlation components."""

from corrguide.pipeline._service import CorrelationService

__all__ = [
    "CorrelationService",
]
