"""
Forecast models sub-package.

Strategy Pattern — every model implements `BaseForecastModel`:
    generate(bundle, horizon_days) → ForecastSequence

Concrete models
---------------
- `TrendDecayModel`     — RSI/MACD drift decayed over the horizon ("lstm")
- `MeanReversionModel`  — half mean return plus random shock ("arima")
- `FallbackModel`       — near-flat walk for short histories

Ensemble
--------
- `EnsembleCombiner`    — confidence-weighted merge, union-envelope bounds

Registry
--------
- `ModelRegistry`       — read-only `ModelDescriptor` lookup for reporting
"""

from forecasting.models.base import BaseForecastModel
from forecasting.models.ensemble import EnsembleCombiner, apply_volatility_intervals
from forecasting.models.fallback import FallbackModel
from forecasting.models.mean_reversion import MeanReversionModel
from forecasting.models.registry import ModelDescriptor, ModelRegistry
from forecasting.models.trend_decay import TrendDecayModel

__all__ = [
    "BaseForecastModel",
    "EnsembleCombiner",
    "FallbackModel",
    "MeanReversionModel",
    "ModelDescriptor",
    "ModelRegistry",
    "TrendDecayModel",
    "apply_volatility_intervals",
]
