"""Pearson correlation matrix construction from aligned return series."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import numpy.typing as npt
import pandas as pd

from corrguide.correlation._config import CorrelationConfig
from corrguide.exceptions import InsufficientDataError, InvalidInputError
from corrguide.universe import normalize_ticker, normalize_universe

logger = logging.getLogger(__name__)

ReturnsInput = pd.DataFrame | Mapping[str, Sequence[float]]


def _collect_series(
    tickers: tuple[str, ...],
    returns: ReturnsInput,
    min_observations: int,
) -> npt.NDArray[np.float64]:
    """Stack the requested series into an (n_obs, n_tickers) array."""
    if isinstance(returns, pd.DataFrame):
        columns = {normalize_ticker(str(col)): col for col in returns.columns}
        raw = {
            t: returns[columns[t]].to_numpy(dtype=np.float64)
            for t in tickers
            if t in columns
        }
    else:
        keyed = {normalize_ticker(k): v for k, v in returns.items()}
        raw = {
            t: np.asarray(keyed[t], dtype=np.float64)
            for t in tickers
            if t in keyed
        }

    missing = [t for t in tickers if t not in raw]
    if missing:
        raise InvalidInputError(f"no return series supplied for {missing}")

    lengths = {t: len(s) for t, s in raw.items()}
    if len(set(lengths.values())) > 1:
        raise InsufficientDataError(
            f"return series lengths disagree: {lengths}"
        )

    data = np.column_stack([raw[t] for t in tickers])
    if np.isnan(data).any():
        holes = [t for i, t in enumerate(tickers) if np.isnan(data[:, i]).any()]
        raise InsufficientDataError(
            f"return series are not aligned; missing observations for {holes}"
        )
    if not np.isfinite(data).all():
        raise InvalidInputError("return series contain infinite values")

    n_obs = data.shape[0]
    if n_obs < min_observations:
        raise InsufficientDataError(
            f"correlation requires at least {min_observations} observations "
            f"per series, got {n_obs}"
        )
    return data


def _upper_rows(
    centered: npt.NDArray[np.float64],
    norms: npt.NDArray[np.float64],
    rows: npt.NDArray[np.intp],
    out: npt.NDArray[np.float64],
) -> None:
    """Fill ``out[i, j]`` and ``out[j, i]`` for every ``i`` in *rows*, ``j > i``.

    Each row touches a disjoint set of cells, so rows may be filled
    concurrently without locking.
    """
    for i in rows:
        if i + 1 >= centered.shape[1]:
            continue
        cov = centered[:, i] @ centered[:, i + 1 :]
        denom = norms[i] * norms[i + 1 :]
        with np.errstate(divide="ignore", invalid="ignore"):
            coef = np.where(denom > 0.0, cov / np.where(denom > 0.0, denom, 1.0), 0.0)
        # float drift can push |coef| just past 1
        coef = np.clip(coef, -1.0, 1.0)
        out[i, i + 1 :] = coef
        out[i + 1 :, i] = coef


def compute_correlation_matrix(
    tickers: Sequence[str],
    returns: ReturnsInput,
    config: CorrelationConfig | None = None,
) -> pd.DataFrame:
    """Compute the symmetric Pearson correlation matrix of return series.

    Only the upper triangle is computed; the lower triangle is filled
    by mirroring and the diagonal is set to exactly ``1.0``, so the
    result is exactly symmetric.  A series with zero variance has a
    coefficient of ``0.0`` against every other series.

    Parameters
    ----------
    tickers : sequence of str
        Ordered universe of at least 2 unique tickers.
    returns : pd.DataFrame or mapping
        Aligned return series, either a dates x tickers frame or a
        mapping of ticker to a sequence of returns.
    config : CorrelationConfig or None
        Engine configuration.  Defaults to ``CorrelationConfig()``.

    Returns
    -------
    pd.DataFrame
        Tickers x tickers correlation matrix in the order of *tickers*.

    Raises
    ------
    InvalidInputError
        On empty or duplicate tickers, tickers without a series, or
        infinite returns.
    InsufficientDataError
        On fewer than 2 tickers, too few observations, or series of
        different lengths.
    """
    if config is None:
        config = CorrelationConfig()

    universe = normalize_universe(tickers, allow_empty=True)
    if len(universe) < 2:
        raise InsufficientDataError(
            f"correlation requires at least 2 tickers, got {len(universe)}"
        )

    data = _collect_series(universe, returns, config.min_observations)
    n = len(universe)

    constant = np.all(data == data[0], axis=0)
    # Pearson is scale-free; unit max-abs columns keep the products finite
    scale = np.max(np.abs(data), axis=0)
    scale[scale == 0.0] = 1.0
    scaled = data / scale
    centered = scaled - scaled.mean(axis=0)
    centered[:, constant] = 0.0
    norms = np.sqrt(np.einsum("ij,ij->j", centered, centered))
    norms[constant] = 0.0

    out = np.zeros((n, n), dtype=np.float64)
    row_chunks = np.array_split(np.arange(n - 1), min(config.max_workers, n - 1))

    if config.max_workers == 1 or len(row_chunks) == 1:
        for chunk in row_chunks:
            _upper_rows(centered, norms, chunk, out)
    else:
        with ThreadPoolExecutor(max_workers=len(row_chunks)) as pool:
            futures = [
                pool.submit(_upper_rows, centered, norms, chunk, out)
                for chunk in row_chunks
            ]
            for future in futures:
                future.result()

    np.fill_diagonal(out, 1.0)

    if constant.any():
        flat = [t for t, c in zip(universe, constant) if c]
        logger.debug(f"Zero-variance series treated as uncorrelated: {flat}")

    return pd.DataFrame(out, index=list(universe), columns=list(universe))


def as_correlation_frame(
    matrix: pd.DataFrame | Mapping[str, Mapping[str, float]],
    tickers: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Coerce a correlation matrix into a labelled, NaN-free frame.

    Accepts either a square DataFrame or a nested mapping
    ``{ticker: {ticker: coefficient}}``.  Labels are normalized, NaN
    coefficients become ``0.0`` and the diagonal is forced to ``1.0``.

    Parameters
    ----------
    matrix : pd.DataFrame or mapping
        Correlation matrix.
    tickers : sequence of str or None
        Subset and order to return.  ``None`` keeps the matrix order.

    Raises
    ------
    InvalidInputError
        If the matrix is not square with matching labels, or a
        requested ticker is absent.
    """
    if isinstance(matrix, pd.DataFrame):
        frame = matrix.copy()
    else:
        frame = pd.DataFrame({k: dict(v) for k, v in matrix.items()}).T

    frame.index = [normalize_ticker(str(t)) for t in frame.index]
    frame.columns = [normalize_ticker(str(t)) for t in frame.columns]
    if set(frame.index) != set(frame.columns) or frame.shape[0] != frame.shape[1]:
        raise InvalidInputError(
            "correlation matrix must be square with identical row and column labels"
        )
    if frame.index.has_duplicates:
        raise InvalidInputError("correlation matrix has duplicate labels")

    if tickers is None:
        order = list(frame.index)
    else:
        order = list(normalize_universe(tickers, allow_empty=True))
        absent = [t for t in order if t not in frame.index]
        if absent:
            raise InvalidInputError(f"tickers not present in correlation matrix: {absent}")

    frame = frame.loc[order, order].astype(np.float64).fillna(0.0)
    values = frame.to_numpy(copy=True)
    np.fill_diagonal(values, 1.0)
    return pd.DataFrame(values, index=order, columns=order)
