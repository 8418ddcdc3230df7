"""Shared test fixtures for the corrguide test suite."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
import pandas as pd
import pytest

from corrguide.config import Settings


def correlated_returns(
    corr: npt.NDArray[np.float64],
    n_obs: int,
    seed: int = 42,
) -> npt.NDArray[np.float64]:
    """Returns whose sample correlation equals *corr* up to rounding.

    Orthonormal, centered columns are mixed by the Cholesky factor of
    *corr*, so the sample covariance is exactly ``corr``.
    """
    rng = np.random.default_rng(seed)
    z = rng.normal(size=(n_obs, corr.shape[0]))
    z -= z.mean(axis=0)
    q, _ = np.linalg.qr(z)
    return q @ np.linalg.cholesky(corr).T


@pytest.fixture()
def abc_corr() -> npt.NDArray[np.float64]:
    """Target correlations A-B=0.9, A-C=0.1, B-C=0.2."""
    return np.array(
        [
            [1.0, 0.9, 0.1],
            [0.9, 1.0, 0.2],
            [0.1, 0.2, 1.0],
        ]
    )


@pytest.fixture()
def abc_matrix(abc_corr: npt.NDArray[np.float64]) -> pd.DataFrame:
    """Correlation matrix for tickers A, B, C."""
    return pd.DataFrame(abc_corr, index=["A", "B", "C"], columns=["A", "B", "C"])


@pytest.fixture()
def abc_returns(abc_corr: npt.NDArray[np.float64]) -> pd.DataFrame:
    """Daily returns for A, B, C realising ``abc_corr``."""
    data = 0.0005 + 0.01 * correlated_returns(abc_corr, n_obs=120)
    return pd.DataFrame(
        data,
        columns=["A", "B", "C"],
        index=pd.bdate_range("2024-01-02", periods=120, freq="B"),
    )


@pytest.fixture()
def abc_prices(abc_returns: pd.DataFrame) -> pd.DataFrame:
    """Prices for A, B, C whose simple returns are ``abc_returns``."""
    base = pd.DataFrame(
        [[100.0, 50.0, 20.0]],
        columns=abc_returns.columns,
        index=[abc_returns.index[0] - pd.offsets.BDay(1)],
    )
    grown = (1.0 + abc_returns).cumprod() * base.iloc[0]
    return pd.concat([base, grown])


@pytest.fixture()
def returns_df() -> pd.DataFrame:
    """Synthetic returns: 8 assets, 250 obs, seed 42."""
    rng = np.random.default_rng(42)
    data = rng.normal(loc=0.001, scale=0.02, size=(250, 8))
    tickers = [f"TICK_{i:02d}" for i in range(8)]
    return pd.DataFrame(
        data,
        columns=tickers,
        index=pd.bdate_range("2023-01-02", periods=250, freq="B"),
    )


@pytest.fixture()
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)
