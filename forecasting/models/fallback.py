"""
Fallback forecast model.

Used when the history is too short for the ensemble, or the ensemble
produced nothing: a near-flat random walk with intervals that widen
linearly with the horizon.
"""

import logging

import numpy as np

from forecasting.config import ModelConfig
from forecasting.data.models import ForecastPoint, ForecastSequence
from forecasting.features.extractor import FeatureBundle
from forecasting.models.base import BaseForecastModel

logger = logging.getLogger(__name__)


class FallbackModel(BaseForecastModel):
    model_id = "fallback"
    features_used = frozenset({"price_history", "technical_indicators", "volume"})

    def __init__(
        self,
        cfg: ModelConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(rng)
        self._cfg = cfg or ModelConfig()

    def generate(
        self,
        bundle: FeatureBundle,
        horizon_days: int,
        rng: np.random.Generator | None = None,
    ) -> ForecastSequence:
        """Always yields ``horizon_days`` points, even for an empty history."""
        if horizon_days <= 0:
            return []

        rng = rng if rng is not None else self._rng
        cfg = self._cfg
        price = bundle.last_price if bundle.last_price is not None else cfg.fallback_base_price

        points: ForecastSequence = []
        for day, target in enumerate(self.forecast_dates(bundle.last_date, horizon_days), start=1):
            price = price * (cfg.fallback_drift_low + rng.random() * cfg.fallback_drift_span)
            interval = price * cfg.fallback_interval_step * day
            points.append(ForecastPoint(
                date=target,
                predicted=price,
                confidence=self.decaying_confidence(
                    day,
                    cfg.fallback_confidence_start,
                    cfg.fallback_confidence_step,
                    cfg.fallback_confidence_floor,
                ),
                upper_bound=price + interval,
                lower_bound=price - interval,
                model_used=self.model_id,
                features_used=self.features_used,
            ))
        return points
