"""
Forecasting configuration.

Deployment values (Redis, TTL, seed, history threshold) come from
`forecasting.settings`, which reads the environment. Indicator periods
and model constants are defined here: they describe the forecasting
heuristics and are not meant to vary per deployment.
"""

from dataclasses import dataclass, field

from forecasting.settings import get_settings


@dataclass(frozen=True)
class IndicatorConfig:
    """Technical indicator periods."""

    rsi_period: int = 14
    sma_windows: tuple[int, ...] = (20, 50, 200)
    ema_windows: tuple[int, ...] = (12, 26)
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    bollinger_window: int = 20
    bollinger_std: float = 2.0
    stochastic_k: int = 14
    stochastic_d: int = 3
    atr_period: int = 14
    adx_period: int = 14
    pattern_lookback: int = 20


@dataclass(frozen=True)
class FeatureConfig:
    """Feature bundle parameters."""

    momentum_window: int = 10
    regime_window: int = 20
    regime_threshold: float = 0.05
    volatility_period: int = 20
    anomaly_threshold: float = 3.0
    trading_days_per_year: int = 252


@dataclass(frozen=True)
class ModelConfig:
    """Constants of the simulated forecast models."""

    # Trend-decay ("lstm")
    trend_rsi_oversold: float = 30.0
    trend_rsi_overbought: float = 70.0
    trend_rsi_nudge: float = 0.001
    trend_macd_nudge: float = 0.0005
    trend_decay: float = 0.95
    trend_volatility_scale: float = 0.5
    trend_confidence_start: float = 0.95
    trend_confidence_step: float = 0.05
    trend_confidence_floor: float = 0.6
    trend_band: float = 0.05

    # Mean-reversion ("arima")
    reversion_factor: float = 0.5
    reversion_shock_scale: float = 2.0
    reversion_confidence_start: float = 0.9
    reversion_confidence_step: float = 0.08
    reversion_confidence_floor: float = 0.5
    reversion_band: float = 0.08

    # Fallback
    fallback_base_price: float = 100.0
    fallback_drift_low: float = 0.999
    fallback_drift_span: float = 0.002
    fallback_confidence_start: float = 0.95
    fallback_confidence_step: float = 0.05
    fallback_confidence_floor: float = 0.6
    fallback_interval_step: float = 0.03

    # Volatility-scaled intervals
    default_interval_volatility: float = 0.02


@dataclass(frozen=True)
class CacheConfig:
    """Validation cache settings, read from the environment."""

    redis_url: str | None = field(default_factory=lambda: get_settings().redis_url)
    validation_ttl_seconds: int = field(
        default_factory=lambda: get_settings().validation_cache_ttl
    )


@dataclass(frozen=True)
class ForecastConfig:
    """Top-level configuration aggregating all sub-configs."""

    indicators: IndicatorConfig = field(default_factory=IndicatorConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    min_history_points: int = field(
        default_factory=lambda: get_settings().min_history_points
    )
    default_horizon_days: int = field(
        default_factory=lambda: get_settings().default_horizon_days
    )
    random_seed: int | None = field(default_factory=lambda: get_settings().random_seed)

    # Longer horizons are allowed but logged
    max_recommended_horizon: int = 30
    # Upper bound on threads used to run the models side by side
    max_workers: int = 4
    # Reject malformed series before they reach the indicators
    strict_input: bool = True
    # Replace ensemble bounds with volatility-scaled intervals
    volatility_intervals: bool = False


# Default instance (immutable)
config = ForecastConfig()
