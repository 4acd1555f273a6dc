"""
Forecasting Core
================

Numerical core for instrument price analysis.

Architecture
------------
- **Indicators**: RSI, SMA, EMA, MACD, Bollinger, Stochastic, ATR, ADX, pattern labels
- **Features**: volatility, momentum, regime, seasonality → immutable FeatureBundle
- **Models**: trend-decay ("lstm") · mean-reversion ("arima") → Ensemble
- **Validation**: accuracy / MAPE / RMSE against realized prices, TTL cache per symbol

Quick start (CLI)
-----------------
    python -m forecasting forecast --csv prices.csv --days 7
    python -m forecasting validate --forecast forecast.json --actual realized.csv
    python -m forecasting indicators --csv prices.csv
    python -m forecasting models

Public API
----------
    from forecasting import ForecastEngine, PriceSeries
    engine = ForecastEngine()
    sequence = engine.forecast(PriceSeries.from_frame(df), horizon_days=7)
"""

# ── Public façade ──────────────────────────────────────────────────
from forecasting.config import ForecastConfig, config
from forecasting.data.models import (
    ForecastPoint,
    ForecastSequence,
    PricePoint,
    PriceSeries,
    ValidationPoint,
    ValidationResult,
)
from forecasting.engine import ForecastEngine
from forecasting.features.extractor import FeatureBundle, FeatureExtractor, MarketRegime
from forecasting.models.ensemble import EnsembleCombiner
from forecasting.models.registry import ModelDescriptor, ModelRegistry
from forecasting.validation.engine import ValidationEngine

__all__ = [
    "ForecastConfig",
    "config",
    "ForecastEngine",
    "PricePoint",
    "PriceSeries",
    "ForecastPoint",
    "ForecastSequence",
    "ValidationPoint",
    "ValidationResult",
    "FeatureBundle",
    "FeatureExtractor",
    "MarketRegime",
    "EnsembleCombiner",
    "ModelDescriptor",
    "ModelRegistry",
    "ValidationEngine",
]
