"""Projection of a correlation matrix into a render-ready grid."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from corrguide.correlation import as_correlation_frame
from corrguide.heatmap._config import HeatmapBucket, HeatmapConfig


@dataclass(frozen=True)
class HeatmapCell:
    """One cell of the heatmap grid."""

    row: str
    column: str
    value: float
    bucket: HeatmapBucket


@dataclass(frozen=True)
class HeatmapData:
    """Flat heatmap grid.

    Attributes
    ----------
    row_labels : tuple of str
        Row tickers, in the requested order.
    column_labels : tuple of str
        Column tickers, identical to ``row_labels``.
    cells : tuple of HeatmapCell
        Row-major cells; ``cells[i * n + j]`` is row ``i``, column ``j``.
    """

    row_labels: tuple[str, ...]
    column_labels: tuple[str, ...]
    cells: tuple[HeatmapCell, ...]

    def cell(self, row: str, column: str) -> HeatmapCell:
        """Look up a cell by its labels."""
        i = self.row_labels.index(row)
        j = self.column_labels.index(column)
        return self.cells[i * len(self.column_labels) + j]

    def to_frame(self) -> pd.DataFrame:
        """Cell values as a rows x columns frame."""
        n = len(self.column_labels)
        rows = [
            [c.value for c in self.cells[i * n : (i + 1) * n]]
            for i in range(len(self.row_labels))
        ]
        return pd.DataFrame(
            rows, index=list(self.row_labels), columns=list(self.column_labels)
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "row_labels": list(self.row_labels),
            "column_labels": list(self.column_labels),
            "cells": [
                {
                    "row": c.row,
                    "column": c.column,
                    "value": c.value,
                    "bucket": c.bucket.value,
                }
                for c in self.cells
            ],
        }


def build_heatmap(
    tickers: Sequence[str],
    matrix: pd.DataFrame | Mapping[str, Mapping[str, float]],
    config: HeatmapConfig | None = None,
) -> HeatmapData:
    """Project *matrix* onto a flat heatmap grid for *tickers*.

    Parameters
    ----------
    tickers : sequence of str
        Labels for both axes, in display order.
    matrix : pd.DataFrame or mapping
        Correlation matrix containing at least *tickers*.
    config : HeatmapConfig or None
        Bucket cutoff and rounding.  Defaults to ``HeatmapConfig()``.

    Returns
    -------
    HeatmapData
        Grid with one bucketed cell per ticker pair, diagonal included.

    Raises
    ------
    InvalidInputError
        If a ticker is missing from *matrix* or the universe is invalid.
    """
    if config is None:
        config = HeatmapConfig()

    frame = as_correlation_frame(matrix, tickers)
    labels = tuple(frame.index)
    values = frame.to_numpy()

    cells = []
    for i, row in enumerate(labels):
        for j, column in enumerate(labels):
            raw = float(values[i, j])
            value = raw if config.decimals is None else round(raw, config.decimals)
            cells.append(HeatmapCell(row, column, value, config.bucket_for(raw)))

    return HeatmapData(row_labels=labels, column_labels=labels, cells=tuple(cells))
