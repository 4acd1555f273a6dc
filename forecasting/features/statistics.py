"""
Return and dispersion statistics used by the feature bundle.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VolatilityProfile:
    """Historical volatility summary of a price history."""

    historical: float = 0.0
    annualized: float = 0.0
    percentile: int = 0


def simple_returns(prices: Sequence[float]) -> np.ndarray:
    """Day-over-day percentage changes."""
    arr = np.asarray(prices, dtype=float)
    if len(arr) < 2:
        return np.empty(0, dtype=float)
    return np.diff(arr) / arr[:-1]


def log_returns(prices: Sequence[float]) -> np.ndarray:
    """Day-over-day log returns."""
    arr = np.asarray(prices, dtype=float)
    if len(arr) < 2:
        return np.empty(0, dtype=float)
    return np.diff(np.log(arr))


def volatility_profile(
    prices: Sequence[float],
    period: int = 20,
    trading_days: int = 252,
) -> VolatilityProfile:
    """Population std of log returns, annualized, plus the percentile rank
    of the latest absolute move among all moves (largest first).

    Histories shorter than ``period`` give an all-zero profile.
    """
    if len(prices) < max(period, 2):
        return VolatilityProfile()

    returns = log_returns(prices)
    historical = float(np.std(returns))
    moves = np.sort(np.abs(returns))[::-1]
    current = abs(returns[-1])
    rank = int(np.argmax(moves <= current))
    return VolatilityProfile(
        historical=historical,
        annualized=historical * math.sqrt(trading_days),
        percentile=round(rank / len(moves) * 100),
    )


def detect_anomalies(prices: Sequence[float], threshold: float = 3.0) -> tuple[int, ...]:
    """Indices whose z-score magnitude exceeds ``threshold``."""
    arr = np.asarray(prices, dtype=float)
    if len(arr) < 10:
        return ()
    std = arr.std()
    if std == 0:
        return ()
    z = np.abs(arr - arr.mean()) / std
    anomalies = tuple(int(i) for i in np.flatnonzero(z > threshold))
    if anomalies:
        logger.debug("Detected %d anomalous prices.", len(anomalies))
    return anomalies
