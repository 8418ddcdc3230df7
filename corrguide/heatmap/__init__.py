"""Render-ready heatmap grids built from correlation matrices."""

from corrguide.heatmap._builder import HeatmapCell, HeatmapData, build_heatmap
from corrguide.heatmap._config import HeatmapBucket, HeatmapConfig

__all__ = [
    "HeatmapBucket",
    "HeatmapCell",
    "HeatmapConfig",
    "HeatmapData",
    "build_heatmap",
]
