"""
Forecast engine.

Explicitly constructed facade over the forecasting core. Implements the
full forecast flow:
1. Validate the incoming price series (boundary checks)
2. Extract the feature bundle once
3. Run every model concurrently, each with its own child generator
4. Combine the sequences (ensemble)
5. Fall back to the degenerate model when history or output is missing

and the validation flow (fresh computation, optionally cached per symbol).
"""

import logging
import threading
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import numpy as np

from forecasting.config import ForecastConfig, config
from forecasting.data.models import ForecastSequence, PriceSeries, ValidationResult
from forecasting.data.validators import validate_price_series
from forecasting.features.extractor import FeatureBundle, FeatureExtractor
from forecasting.models.base import BaseForecastModel
from forecasting.models.ensemble import EnsembleCombiner, apply_volatility_intervals
from forecasting.models.fallback import FallbackModel
from forecasting.models.mean_reversion import MeanReversionModel
from forecasting.models.registry import ModelDescriptor, ModelRegistry
from forecasting.models.trend_decay import TrendDecayModel
from forecasting.shared.errors import InvalidHorizonError
from forecasting.utils.cache import ValidationCache
from forecasting.validation.engine import ValidationEngine

logger = logging.getLogger(__name__)


class ForecastEngine:
    """Main entry point for forecasts and forecast validation.

    Holds its collaborators explicitly; callers construct one engine
    and pass it around rather than importing a shared instance.
    """

    def __init__(
        self,
        cfg: ForecastConfig | None = None,
        *,
        extractor: FeatureExtractor | None = None,
        models: Sequence[BaseForecastModel] | None = None,
        combiner: EnsembleCombiner | None = None,
        fallback: BaseForecastModel | None = None,
        validator: ValidationEngine | None = None,
        registry: ModelRegistry | None = None,
        cache: ValidationCache | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._cfg = cfg or config
        self._rng = rng if rng is not None else np.random.default_rng(self._cfg.random_seed)
        self._rng_lock = threading.Lock()

        self._extractor = extractor or FeatureExtractor(self._cfg.features, self._cfg.indicators)
        self._models = list(models) if models is not None else [
            TrendDecayModel(self._cfg.model),
            MeanReversionModel(self._cfg.model),
        ]
        self._combiner = combiner or EnsembleCombiner()
        self._fallback = fallback or FallbackModel(self._cfg.model)
        self._validator = validator or ValidationEngine()
        self._registry = (
            registry if registry is not None
            else ModelRegistry.default(rng=self._spawn(1)[0])
        )
        self._cache = cache or ValidationCache(
            ttl_seconds=self._cfg.cache.validation_ttl_seconds,
            redis_url=self._cfg.cache.redis_url,
        )

    @property
    def registry(self) -> ModelRegistry:
        return self._registry

    @property
    def cache(self) -> ValidationCache:
        return self._cache

    # ------------------------------------------------------------------
    # Forecast path
    # ------------------------------------------------------------------

    def extract_features(self, series: PriceSeries) -> FeatureBundle:
        """Validate ``series`` (when strict) and compute its feature bundle."""
        if self._cfg.strict_input:
            validate_price_series(series)
        return self._extractor.extract(series)

    def forecast(
        self,
        series: PriceSeries,
        horizon_days: int | None = None,
        symbol: str = "",
    ) -> ForecastSequence:
        """Generate an ensemble forecast of ``horizon_days`` days.

        Args:
            series: Chronologically ordered price history.
            horizon_days: Days to forecast (config default when None).
            symbol: Instrument identifier, for logging only.

        Returns:
            ForecastSequence starting the day after ``series`` ends.

        Raises:
            InvalidHorizonError: If ``horizon_days`` < 1.
            InvalidPriceSeriesError: If strict input checks reject ``series``.
        """
        horizon = self._cfg.default_horizon_days if horizon_days is None else horizon_days
        if horizon < 1:
            raise InvalidHorizonError(horizon)
        if horizon > self._cfg.max_recommended_horizon:
            logger.warning("Horizon of %d days for %s is unusually long.", horizon, symbol)

        bundle = self.extract_features(series)

        if len(series) < self._cfg.min_history_points:
            logger.warning(
                "Insufficient history for %s (%d < %d points). Using fallback.",
                symbol, len(series), self._cfg.min_history_points,
            )
            return self._run_fallback(bundle, horizon)

        sequences = self._run_models(bundle, horizon)
        combined = self._combiner.combine(sequences)
        if not combined:
            logger.warning("Ensemble produced no points for %s. Using fallback.", symbol)
            return self._run_fallback(bundle, horizon)

        if self._cfg.volatility_intervals:
            combined = apply_volatility_intervals(
                combined, bundle.volatility, self._cfg.model.default_interval_volatility
            )

        logger.info(
            "Generated %d forecast points for %s from %d models.",
            len(combined), symbol or "<unnamed>", len(sequences),
        )
        return combined

    def _run_models(self, bundle: FeatureBundle, horizon: int) -> list[ForecastSequence]:
        """Evaluate every model concurrently; output order follows ``self._models``."""
        if not self._models:
            return []

        rngs = self._spawn(len(self._models))
        workers = max(1, min(self._cfg.max_workers, len(self._models)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(model.generate, bundle, horizon, rng)
                for model, rng in zip(self._models, rngs)
            ]
            return [future.result() for future in futures]

    def _run_fallback(self, bundle: FeatureBundle, horizon: int) -> ForecastSequence:
        return self._fallback.generate(bundle, horizon, self._spawn(1)[0])

    def _spawn(self, n: int) -> list[np.random.Generator]:
        # Generator is not thread-safe; spawn children under a lock
        with self._rng_lock:
            return self._rng.spawn(n)

    # ------------------------------------------------------------------
    # Validation path
    # ------------------------------------------------------------------

    def validate(
        self,
        symbol: str,
        forecast: ForecastSequence,
        realized: Mapping[date, float],
    ) -> ValidationResult:
        """Validate ``forecast`` now and refresh the cache for ``symbol``."""
        result = self._validator.validate(forecast, realized, symbol)
        self._cache.set(symbol, result)
        return result

    def get_or_validate(
        self,
        symbol: str,
        forecast: ForecastSequence,
        realized: Mapping[date, float],
    ) -> ValidationResult:
        """Return a cached validation for ``symbol`` or compute one (single-flight)."""
        return self._cache.get_or_compute(
            symbol, lambda: self._validator.validate(forecast, realized, symbol)
        )

    def cached_validation(self, symbol: str) -> ValidationResult | None:
        return self._cache.get(symbol)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def model_performance(self) -> list[ModelDescriptor]:
        return self._registry.performance()
