"""
Feature extraction.

Turns one price history into an immutable `FeatureBundle`, computed once
per forecast request and shared read-only by every forecast model.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

import numpy as np

from forecasting.config import FeatureConfig, IndicatorConfig
from forecasting.data.models import PriceSeries
from forecasting.features.statistics import (
    VolatilityProfile,
    detect_anomalies,
    log_returns,
    volatility_profile,
)
from forecasting.features.technical import IndicatorSet, TechnicalFeatures, detect_patterns
from forecasting.features.temporal import Seasonality, TemporalFeatures

logger = logging.getLogger(__name__)


class MarketRegime(str, Enum):
    BULL = "bull"
    BEAR = "bear"
    SIDEWAYS = "sideways"


@dataclass(frozen=True, eq=False)
class FeatureBundle:
    """Snapshot of everything the forecast models may read."""

    prices: np.ndarray
    volumes: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    dates: tuple[date, ...]
    indicators: IndicatorSet
    volatility: float
    momentum: float
    seasonality: Seasonality
    regime: MarketRegime
    volatility_profile: VolatilityProfile = field(default_factory=VolatilityProfile)
    anomalies: tuple[int, ...] = ()
    patterns: tuple[str, ...] = ()

    @property
    def last_price(self) -> float | None:
        return float(self.prices[-1]) if len(self.prices) else None

    @property
    def last_date(self) -> date | None:
        return self.dates[-1] if self.dates else None


class FeatureExtractor:
    """Derives a `FeatureBundle` from a `PriceSeries`.

    Short histories degrade to neutral values (zero momentum, sideways
    regime, empty indicators) rather than failing.
    """

    def __init__(
        self,
        cfg: FeatureConfig | None = None,
        indicator_cfg: IndicatorConfig | None = None,
    ) -> None:
        self._cfg = cfg or FeatureConfig()
        self._indicator_cfg = indicator_cfg or IndicatorConfig()
        self._technical = TechnicalFeatures(self._indicator_cfg)
        self._temporal = TemporalFeatures()

    def extract(self, series: PriceSeries) -> FeatureBundle:
        """Compute the feature bundle for ``series``."""
        prices = series.closes
        cfg = self._cfg

        bundle = FeatureBundle(
            prices=prices,
            volumes=series.volumes,
            highs=series.highs,
            lows=series.lows,
            dates=series.dates,
            indicators=self._technical.compute(prices, series.highs, series.lows),
            volatility=self.volatility(prices),
            momentum=self.momentum(prices, cfg.momentum_window),
            seasonality=self._temporal.compute(series.dates),
            regime=self.regime(prices, cfg.regime_window, cfg.regime_threshold),
            volatility_profile=volatility_profile(
                prices, cfg.volatility_period, cfg.trading_days_per_year
            ),
            anomalies=detect_anomalies(prices, cfg.anomaly_threshold),
            patterns=tuple(
                detect_patterns(prices, self._indicator_cfg.pattern_lookback)
            ),
        )
        logger.info(
            "Extracted features from %d points: regime=%s volatility=%.4f momentum=%.4f",
            len(series),
            bundle.regime.value,
            bundle.volatility,
            bundle.momentum,
        )
        return bundle

    # ------------------------------------------------------------------
    # Scalar features
    # ------------------------------------------------------------------

    @staticmethod
    def volatility(prices: np.ndarray) -> float:
        """Population standard deviation of log returns."""
        returns = log_returns(prices)
        if len(returns) == 0:
            return 0.0
        return float(np.std(returns))

    @staticmethod
    def momentum(prices: np.ndarray, window: int = 10) -> float:
        """Relative change between the last two ``window``-point averages."""
        if len(prices) < 2 * window:
            return 0.0
        recent = np.mean(prices[-window:])
        older = np.mean(prices[-2 * window:-window])
        return float((recent - older) / older)

    @staticmethod
    def regime(
        prices: np.ndarray,
        window: int = 20,
        threshold: float = 0.05,
    ) -> MarketRegime:
        """Classify the trailing ``window`` return as bull, bear or sideways."""
        if len(prices) < window:
            return MarketRegime.SIDEWAYS
        recent = prices[-window:]
        change = (recent[-1] - recent[0]) / recent[0]
        if change > threshold:
            return MarketRegime.BULL
        if change < -threshold:
            return MarketRegime.BEAR
        return MarketRegime.SIDEWAYS
