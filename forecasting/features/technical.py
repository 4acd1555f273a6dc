"""
Technical indicator library.

Pure functions over numeric sequences:
- Moving averages (SMA, EMA)
- RSI, MACD, Bollinger Bands
- Stochastic Oscillator, ATR, simplified ADX
- Trend / volatility pattern labels

Every indicator is aligned with the TAIL of its input: index 0 of the
output corresponds to the first fully-computed point. Inputs shorter
than the warm-up period yield an empty array, never an exception.
"""

import logging
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from forecasting.config import IndicatorConfig

logger = logging.getLogger(__name__)

# Indicator name → aligned values
IndicatorSet = dict[str, np.ndarray]


class MACDResult(NamedTuple):
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


class BollingerBands(NamedTuple):
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


class StochasticResult(NamedTuple):
    k: np.ndarray
    d: np.ndarray


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _empty() -> np.ndarray:
    return np.empty(0, dtype=float)


def _windows(values: np.ndarray, period: int) -> np.ndarray:
    """Trailing windows of ``period`` values, one row per full window."""
    return sliding_window_view(values, period)


# ----------------------------------------------------------------------
# Moving averages
# ----------------------------------------------------------------------


def sma(values: Sequence[float], period: int) -> np.ndarray:
    """Simple moving average. Output length ``len(values) - period + 1``."""
    arr = _as_array(values)
    if period <= 0 or len(arr) < period:
        return _empty()
    return _windows(arr, period).mean(axis=1)


def ema(values: Sequence[float], period: int) -> np.ndarray:
    """Exponential moving average seeded with the SMA of the first window.

    Multiplier is ``2 / (period + 1)``; output length matches `sma`.
    """
    arr = _as_array(values)
    if period <= 0 or len(arr) < period:
        return _empty()
    seed = arr[:period].mean()
    seq = pd.Series(np.concatenate(([seed], arr[period:])))
    return seq.ewm(alpha=2.0 / (period + 1), adjust=False).mean().to_numpy()


# ----------------------------------------------------------------------
# Oscillators
# ----------------------------------------------------------------------


def rsi(closes: Sequence[float], period: int = 14) -> np.ndarray:
    """Relative Strength Index over simple rolling averages of gains/losses.

    A window with zero average loss scores 100. Output length
    ``len(closes) - period``; empty when ``len(closes) <= period``.
    """
    arr = _as_array(closes)
    if period <= 0 or len(arr) < period + 1:
        return _empty()

    delta = np.diff(arr)
    gains = np.clip(delta, 0.0, None)
    losses = np.clip(-delta, 0.0, None)
    avg_gain = _windows(gains, period).mean(axis=1)
    avg_loss = _windows(losses, period).mean(axis=1)

    with np.errstate(divide="ignore", invalid="ignore"):
        rs = avg_gain / avg_loss
        values = 100.0 - 100.0 / (1.0 + rs)
    return np.where(avg_loss == 0, 100.0, values)


def macd(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDResult:
    """MACD line, signal line and histogram.

    The fast EMA is trimmed to where it overlaps the (shorter) slow EMA,
    so the MACD line has the slow EMA's length. The histogram is aligned
    with the signal line.
    """
    arr = _as_array(closes)
    ema_fast = ema(arr, fast)
    ema_slow = ema(arr, slow)
    if len(ema_fast) == 0 or len(ema_slow) == 0:
        return MACDResult(_empty(), _empty(), _empty())

    offset = len(ema_fast) - len(ema_slow)
    if offset >= 0:
        line = ema_fast[offset:] - ema_slow
    else:
        line = ema_fast - ema_slow[-offset:]

    signal_line = ema(line, signal)
    if len(signal_line) == 0:
        return MACDResult(line, _empty(), _empty())
    histogram = line[signal - 1:] - signal_line
    return MACDResult(line, signal_line, histogram)


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    k_period: int = 14,
    d_period: int = 3,
) -> StochasticResult:
    """Stochastic oscillator %K and its SMA %D.

    A flat window (highest high == lowest low) gives %K = 50.
    """
    h, l, c = _as_array(highs), _as_array(lows), _as_array(closes)
    if not len(h) == len(l) == len(c) or k_period <= 0 or len(c) < k_period:
        return StochasticResult(_empty(), _empty())

    highest = _windows(h, k_period).max(axis=1)
    lowest = _windows(l, k_period).min(axis=1)
    span = highest - lowest
    with np.errstate(divide="ignore", invalid="ignore"):
        k = np.where(span == 0, 50.0, 100.0 * (c[k_period - 1:] - lowest) / span)
    return StochasticResult(k, sma(k, d_period))


# ----------------------------------------------------------------------
# Volatility / trend strength
# ----------------------------------------------------------------------


def bollinger_bands(
    closes: Sequence[float],
    period: int = 20,
    std_dev_multiplier: float = 2.0,
) -> BollingerBands:
    """SMA middle band with bands at a multiple of the population std."""
    arr = _as_array(closes)
    if period <= 0 or len(arr) < period:
        return BollingerBands(_empty(), _empty(), _empty())

    windows = _windows(arr, period)
    middle = windows.mean(axis=1)
    width = std_dev_multiplier * windows.std(axis=1)
    return BollingerBands(middle + width, middle, middle - width)


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> np.ndarray:
    """Average True Range as the SMA of true ranges."""
    h, l, c = _as_array(highs), _as_array(lows), _as_array(closes)
    if len(h) < 2 or not len(h) == len(l) == len(c):
        return _empty()

    prev_close = c[:-1]
    true_range = np.maximum.reduce([
        h[1:] - l[1:],
        np.abs(h[1:] - prev_close),
        np.abs(l[1:] - prev_close),
    ])
    return sma(true_range, period)


def adx(highs: Sequence[float], period: int = 14) -> np.ndarray:
    """Simplified directional-strength proxy, NOT Wilder's ADX.

    For each point, looks at the preceding ``period`` highs and scores
    ``|last - first| / (max - min) * 100`` clamped to [0, 100]. A flat
    window scores 0. Output length ``len(highs) - period``.
    """
    h = _as_array(highs)
    if period <= 0 or len(h) < period + 1:
        return _empty()

    windows = _windows(h[:-1], period)
    trend = np.abs(windows[:, -1] - windows[:, 0])
    spread = windows.max(axis=1) - windows.min(axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        strength = np.where(spread == 0, 0.0, trend / spread * 100.0)
    return np.clip(strength, 0.0, 100.0)


# ----------------------------------------------------------------------
# Pattern labels
# ----------------------------------------------------------------------


def detect_patterns(prices: Sequence[float], lookback: int = 20) -> list[str]:
    """Label the trailing ``lookback`` prices with trend/volatility patterns."""
    arr = _as_array(prices)
    if len(arr) < lookback:
        return []

    recent = arr[-lookback:]
    trend = recent[-1] - recent[0]
    spread = recent.max() - recent.min()

    patterns: list[str] = []
    # Inclusive so a flat window (trend 0, spread 0) reads as sideways
    if abs(trend) <= spread * 0.1:
        patterns.append("Sideways consolidation")
    elif trend > 0:
        patterns.append("Uptrend")
        if trend > spread * 0.5:
            patterns.append("Strong bullish momentum")
    else:
        patterns.append("Downtrend")
        if abs(trend) > spread * 0.5:
            patterns.append("Strong bearish momentum")

    # Last 5 points moving much more than the ones before them
    if lookback > 5:
        recent_spread = np.ptp(recent[-5:])
        earlier_spread = np.ptp(recent[:-5])
        if recent_spread > earlier_spread * 1.5:
            patterns.append("Volatility breakout")

    return patterns


def latest(indicators: IndicatorSet, name: str, default: float) -> float:
    """Most recent value of an indicator, or ``default`` when it is empty."""
    values = indicators.get(name)
    if values is None or len(values) == 0:
        return default
    return float(values[-1])


class TechnicalFeatures:
    """Computes the full IndicatorSet for one price history."""

    def __init__(self, cfg: IndicatorConfig | None = None) -> None:
        self._cfg = cfg or IndicatorConfig()

    def compute(
        self,
        closes: Sequence[float],
        highs: Sequence[float] | None = None,
        lows: Sequence[float] | None = None,
    ) -> IndicatorSet:
        """Compute all indicators.

        OHLC-based indicators (stochastic, ATR, ADX) are only included
        when both ``highs`` and ``lows`` are given.

        Returns:
            Mapping of indicator name to a read-only array (possibly empty).
        """
        cfg = self._cfg
        result: IndicatorSet = {"rsi": rsi(closes, cfg.rsi_period)}

        for w in cfg.sma_windows:
            result[f"sma_{w}"] = sma(closes, w)
        for w in cfg.ema_windows:
            result[f"ema_{w}"] = ema(closes, w)

        m = macd(closes, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)
        result["macd"] = m.macd
        result["macd_signal"] = m.signal
        result["macd_histogram"] = m.histogram

        bands = bollinger_bands(closes, cfg.bollinger_window, cfg.bollinger_std)
        result["bollinger_upper"] = bands.upper
        result["bollinger_middle"] = bands.middle
        result["bollinger_lower"] = bands.lower

        if highs is not None and lows is not None:
            stoch = stochastic(highs, lows, closes, cfg.stochastic_k, cfg.stochastic_d)
            result["stochastic_k"] = stoch.k
            result["stochastic_d"] = stoch.d
            result["atr"] = atr(highs, lows, closes, cfg.atr_period)
            result["adx"] = adx(highs, cfg.adx_period)

        for values in result.values():
            values.setflags(write=False)

        logger.debug(
            "Computed %d indicators (%d empty).",
            len(result),
            sum(1 for v in result.values() if len(v) == 0),
        )
        return result
