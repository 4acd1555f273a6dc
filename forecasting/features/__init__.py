"""
Feature engineering sub-package.

Indicator library (`technical`)
-------------------------------
- `rsi`, `sma`, `ema`, `macd`, `bollinger_bands`, `stochastic`, `atr`, `adx`
- `detect_patterns` — trend / volatility labels
- `TechnicalFeatures` — computes the whole IndicatorSet

Bundle
------
- `FeatureExtractor.extract(series)` → `FeatureBundle`
"""

from forecasting.features.extractor import FeatureBundle, FeatureExtractor, MarketRegime
from forecasting.features.statistics import VolatilityProfile
from forecasting.features.technical import (
    IndicatorSet,
    TechnicalFeatures,
    adx,
    atr,
    bollinger_bands,
    detect_patterns,
    ema,
    macd,
    rsi,
    sma,
    stochastic,
)
from forecasting.features.temporal import Seasonality, TemporalFeatures

__all__ = [
    "FeatureBundle",
    "FeatureExtractor",
    "IndicatorSet",
    "MarketRegime",
    "Seasonality",
    "TechnicalFeatures",
    "TemporalFeatures",
    "VolatilityProfile",
    "adx",
    "atr",
    "bollinger_bands",
    "detect_patterns",
    "ema",
    "macd",
    "rsi",
    "sma",
    "stochastic",
]
