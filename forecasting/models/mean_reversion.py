"""
Mean-reversion forecast model (reported as "arima").

Simulation stand-in for an ARIMA fit: each day applies half the
historical mean return plus a symmetric random shock of up to one
standard deviation of returns.
"""

import logging

import numpy as np

from forecasting.config import ModelConfig
from forecasting.data.models import ForecastPoint, ForecastSequence
from forecasting.features.extractor import FeatureBundle
from forecasting.features.statistics import simple_returns
from forecasting.models.base import BaseForecastModel

logger = logging.getLogger(__name__)


class MeanReversionModel(BaseForecastModel):
    model_id = "arima"
    features_used = frozenset({"price_returns", "volatility", "mean_reversion"})

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
        if horizon_days <= 0 or bundle.last_price is None:
            return []

        rng = rng if rng is not None else self._rng
        cfg = self._cfg
        returns = simple_returns(bundle.prices)
        mean_return = float(returns.mean()) if len(returns) else 0.0
        std_return = float(returns.std()) if len(returns) else 0.0

        price = bundle.last_price
        points: ForecastSequence = []
        for day, target in enumerate(self.forecast_dates(bundle.last_date, horizon_days), start=1):
            shock = (rng.random() - 0.5) * std_return * cfg.reversion_shock_scale
            price = price * (1 + mean_return * cfg.reversion_factor + shock)

            points.append(ForecastPoint(
                date=target,
                predicted=price,
                confidence=self.decaying_confidence(
                    day,
                    cfg.reversion_confidence_start,
                    cfg.reversion_confidence_step,
                    cfg.reversion_confidence_floor,
                ),
                upper_bound=price * (1 + cfg.reversion_band),
                lower_bound=price * (1 - cfg.reversion_band),
                model_used=self.model_id,
                features_used=self.features_used,
            ))

        logger.debug(
            "[%s] %d days from %.4f (mean=%.5f std=%.5f)",
            self.model_id, len(points), bundle.last_price, mean_return, std_return,
        )
        return points
