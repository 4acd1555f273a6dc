"""Shared fixtures for the forecasting tests."""

from datetime import date, timedelta

import numpy as np
import pytest

from forecasting.data.models import PricePoint, PriceSeries


def make_series(closes, start: date = date(2024, 1, 1), spread: float = 0.01) -> PriceSeries:
    """Daily series with highs/lows ``spread`` around each close."""
    return PriceSeries(
        PricePoint(
            date=start + timedelta(days=i),
            open=float(c),
            high=float(c) * (1 + spread),
            low=float(c) * (1 - spread),
            close=float(c),
            volume=1000 + i,
        )
        for i, c in enumerate(closes)
    )


@pytest.fixture
def series_factory():
    return make_series


@pytest.fixture
def random_walk_series() -> PriceSeries:
    """120 days of a positive random walk around 50."""
    rng = np.random.default_rng(42)
    prices = 50.0 + np.cumsum(rng.normal(0, 0.5, 120))
    prices = np.maximum(prices, 1.0)
    return make_series(prices)


@pytest.fixture
def flat_series() -> PriceSeries:
    return make_series([100.0] * 40)


@pytest.fixture
def seeded_rng() -> np.random.Generator:
    return np.random.default_rng(7)
