"""
Data sub-package.

- `PricePoint`, `PriceSeries`          — OHLCV input supplied by the market-data collaborator
- `ForecastPoint`, `ForecastSequence`  — model output
- `ValidationPoint`, `ValidationResult` — forecast vs realized comparison
- `validate_price_series`              — boundary checks for malformed input
"""

from forecasting.data.models import (
    ForecastPoint,
    ForecastSequence,
    PricePoint,
    PriceSeries,
    ValidationPoint,
    ValidationResult,
)
from forecasting.data.validators import validate_ohlc_lengths, validate_price_series

__all__ = [
    "ForecastPoint",
    "ForecastSequence",
    "PricePoint",
    "PriceSeries",
    "ValidationPoint",
    "ValidationResult",
    "validate_ohlc_lengths",
    "validate_price_series",
]
