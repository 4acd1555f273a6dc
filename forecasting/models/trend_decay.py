"""
Trend-decay forecast model (reported as "lstm").

Simulation stand-in for a recurrent network: the latest RSI and MACD
set a small daily drift that decays geometrically with the horizon,
and a non-negative volatility term is added on top.
"""

import logging

import numpy as np

from forecasting.config import ModelConfig
from forecasting.data.models import ForecastPoint, ForecastSequence
from forecasting.features.extractor import FeatureBundle
from forecasting.features.technical import latest
from forecasting.models.base import BaseForecastModel

logger = logging.getLogger(__name__)


class TrendDecayModel(BaseForecastModel):
    """RSI/MACD-driven drift, decayed by ``trend_decay ** (day - 1)``."""

    model_id = "lstm"
    features_used = frozenset({"price_history", "rsi", "macd", "volume", "volatility"})

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
        rsi = latest(bundle.indicators, "rsi", 50.0)
        macd = latest(bundle.indicators, "macd", 0.0)

        price = bundle.last_price
        points: ForecastSequence = []
        for day, target in enumerate(self.forecast_dates(bundle.last_date, horizon_days), start=1):
            drift = self.trend_factor(rsi, macd, day)
            noise = bundle.volatility * rng.random() * cfg.trend_volatility_scale
            price = price * (1 + drift + noise)

            points.append(ForecastPoint(
                date=target,
                predicted=price,
                confidence=self.decaying_confidence(
                    day,
                    cfg.trend_confidence_start,
                    cfg.trend_confidence_step,
                    cfg.trend_confidence_floor,
                ),
                upper_bound=price * (1 + cfg.trend_band),
                lower_bound=price * (1 - cfg.trend_band),
                model_used=self.model_id,
                features_used=self.features_used,
            ))

        logger.debug(
            "[%s] %d days from %.4f (rsi=%.1f macd=%.4f)",
            self.model_id, len(points), bundle.last_price, rsi, macd,
        )
        return points

    def trend_factor(self, rsi: float, macd: float, day: int) -> float:
        """Directional nudge for 1-indexed ``day``."""
        cfg = self._cfg
        factor = 0.0
        if rsi > cfg.trend_rsi_overbought:
            factor -= cfg.trend_rsi_nudge
        elif rsi < cfg.trend_rsi_oversold:
            factor += cfg.trend_rsi_nudge

        if macd > 0:
            factor += cfg.trend_macd_nudge
        elif macd < 0:
            factor -= cfg.trend_macd_nudge

        return factor * cfg.trend_decay ** (day - 1)
