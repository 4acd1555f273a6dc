"""
Forecast validation.

Compares a forecast sequence against realized prices:
- Per-point accuracy  = max(0, 1 - |predicted - actual| / actual)
- Overall accuracy, MAPE, RMSE over the points with a realized price
- MAE and interval calibration (share of actuals inside the bounds)

Forecast days without a realized price are kept, unvalidated, and do
not count towards any aggregate.
"""

import logging
import math
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone

import numpy as np

from forecasting.data.models import (
    ForecastPoint,
    ForecastSequence,
    ValidationPoint,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Scores forecast sequences against realized prices."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def validate(
        self,
        forecast: ForecastSequence,
        realized: Mapping[date, float],
        symbol: str = "",
    ) -> ValidationResult:
        """Validate ``forecast`` against ``realized`` closing prices.

        Args:
            forecast: Previously produced forecast points.
            realized: Realized price per date; non-positive prices are
                treated as missing.
            symbol: Instrument identifier echoed into the result.

        Returns:
            ValidationResult; every aggregate is 0 when no point matched.
        """
        points = tuple(self._validate_point(p, realized.get(p.date)) for p in forecast)
        validated = [p for p in points if p.is_validated]

        if not validated:
            logger.info("[Validation] %s: no realized prices for %d points.", symbol, len(points))
            return ValidationResult(
                symbol=symbol,
                points=points,
                overall_accuracy=0.0,
                mape=0.0,
                rmse=0.0,
                last_validated=self._clock(),
            )

        predicted = np.array([p.predicted for p in validated])
        actual = np.array([p.actual for p in validated])
        errors = np.abs(predicted - actual)
        in_interval = [p.lower_bound <= p.actual <= p.upper_bound for p in validated]

        result = ValidationResult(
            symbol=symbol,
            points=points,
            overall_accuracy=float(np.mean([p.accuracy for p in validated])),
            mape=float(np.mean(errors / actual)),
            rmse=math.sqrt(float(np.mean(errors ** 2))),
            mae=float(np.mean(errors)),
            calibration=float(np.mean(in_interval)),
            last_validated=self._clock(),
        )
        logger.info("[Validation] %s", result)
        return result

    @staticmethod
    def _validate_point(point: ForecastPoint, actual: float | None) -> ValidationPoint:
        fields = {
            name: getattr(point, name) for name in ForecastPoint.__dataclass_fields__
        }
        if actual is None or actual <= 0:
            return ValidationPoint(**fields)

        actual = float(actual)
        accuracy = max(0.0, 1 - abs(point.predicted - actual) / actual)
        return ValidationPoint(**fields, actual=actual, accuracy=accuracy)
