"""
Abstract base class for all forecast models.

Defines the Strategy Pattern interface that every concrete model
(trend-decay, mean-reversion, fallback) implements, so a trained model
can later replace a heuristic without touching the ensemble or the
validation engine.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta

import numpy as np

from forecasting.data.models import ForecastSequence
from forecasting.features.extractor import FeatureBundle

logger = logging.getLogger(__name__)


class BaseForecastModel(ABC):
    """Abstract interface for all forecast models.

    Attributes:
        model_id:      Identifier reported in ``ForecastPoint.model_used``
                       and used as the ModelRegistry key.
        features_used: Feature tags attached to every emitted point.

    Randomness comes from an injected `numpy.random.Generator`; pass a
    seeded one (or an explicit ``rng`` to `generate`) for reproducible
    output.
    """

    model_id: str = ""
    features_used: frozenset[str] = frozenset()

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def generate(
        self,
        bundle: FeatureBundle,
        horizon_days: int,
        rng: np.random.Generator | None = None,
    ) -> ForecastSequence:
        """Produce one forecast point per day for ``horizon_days`` days.

        Args:
            bundle: Features of the price history.
            horizon_days: Number of consecutive future days.
            rng: Overrides the model's own generator for this call.

        Returns:
            Points dated from the day after the history ends, or an
            empty list when there is nothing to forecast from.
        """
        ...

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @staticmethod
    def forecast_dates(last_date: date | None, horizon_days: int) -> list[date]:
        """Consecutive calendar days following ``last_date`` (today if None)."""
        start = last_date if last_date is not None else date.today()
        return [start + timedelta(days=i) for i in range(1, horizon_days + 1)]

    @staticmethod
    def decaying_confidence(day: int, start: float, step: float, floor: float) -> float:
        """Confidence for 1-indexed ``day``: ``start - step * day``, floored.

        Day 1 is already one step below ``start``.
        """
        return max(floor, start - step * day)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model_id={self.model_id!r})"
