"""
Tests for the technical indicator library.

Covers:
- Moving averages (alignment, seeding)
- RSI bounds and warm-up
- MACD / signal / histogram alignment
- Stochastic, Bollinger, ATR, ADX
- Pattern labels
- TechnicalFeatures.compute
"""

import numpy as np
import pytest


# ---------------------------------------------------------------------------
# Moving averages
# ---------------------------------------------------------------------------


class TestMovingAverages:
    def test_sma_aligned_with_tail(self):
        from forecasting.features.technical import sma
        result = sma([1, 2, 3, 4, 5, 6, 7, 8], 5)
        assert result.tolist() == pytest.approx([3.0, 4.0, 5.0, 6.0])

    def test_sma_short_input_is_empty(self):
        from forecasting.features.technical import sma
        assert len(sma([1, 2, 3], 5)) == 0
        assert len(sma([], 5)) == 0
        assert len(sma([1, 2, 3], 0)) == 0

    def test_ema_seeded_with_sma(self):
        from forecasting.features.technical import ema, sma
        values = [10, 11, 12, 11, 13, 14, 15, 14, 16]
        e = ema(values, 4)
        s = sma(values, 4)
        assert len(e) == len(s)
        assert e[0] == pytest.approx(s[0])

    def test_ema_known_values(self):
        from forecasting.features.technical import ema
        # alpha = 0.5; seed = mean(1, 2, 3) = 2
        result = ema([1, 2, 3, 4, 5, 6], 3)
        assert result.tolist() == pytest.approx([2.0, 3.0, 4.0, 5.0])

    def test_ema_of_constant_is_constant(self):
        from forecasting.features.technical import ema
        result = ema([7.5] * 30, 12)
        assert np.allclose(result, 7.5)


# ---------------------------------------------------------------------------
# RSI
# ---------------------------------------------------------------------------


class TestRSI:
    def test_empty_until_period_plus_one(self):
        from forecasting.features.technical import rsi
        assert len(rsi(list(range(1, 15)), 14)) == 0
        assert len(rsi(list(range(1, 16)), 14)) == 1

    def test_length(self):
        from forecasting.features.technical import rsi
        assert len(rsi(np.linspace(10, 20, 50), 14)) == 36

    def test_bounded(self, random_walk_series):
        from forecasting.features.technical import rsi
        values = rsi(random_walk_series.closes, 14)
        assert len(values) > 0
        assert np.all(values >= 0)
        assert np.all(values <= 100)

    def test_no_losses_scores_100(self):
        from forecasting.features.technical import rsi
        assert np.all(rsi(np.arange(1.0, 40.0), 14) == 100.0)
        assert np.all(rsi([50.0] * 30, 14) == 100.0)

    def test_only_losses_scores_0(self):
        from forecasting.features.technical import rsi
        values = rsi(np.arange(40.0, 1.0, -1.0), 14)
        assert np.allclose(values, 0.0)


# ---------------------------------------------------------------------------
# MACD
# ---------------------------------------------------------------------------


class TestMACD:
    def test_lengths(self):
        from forecasting.features.technical import macd
        closes = 50 + np.sin(np.arange(60) / 5.0)
        result = macd(closes, 12, 26, 9)
        assert len(result.macd) == 60 - 26 + 1
        assert len(result.signal) == len(result.macd) - 9 + 1
        assert len(result.histogram) == len(result.signal)

    def test_histogram_aligned_with_signal(self):
        from forecasting.features.technical import macd
        closes = 50 + np.cumsum(np.random.default_rng(1).normal(0, 1, 80))
        result = macd(closes)
        expected = result.macd[-len(result.signal):] - result.signal
        assert np.allclose(result.histogram, expected)

    def test_short_input_is_empty(self):
        from forecasting.features.technical import macd
        result = macd(list(range(1, 20)))
        assert all(len(part) == 0 for part in result)

    def test_constant_prices_give_zero_line(self):
        from forecasting.features.technical import macd
        result = macd([25.0] * 60)
        assert np.allclose(result.macd, 0.0)
        assert np.allclose(result.histogram, 0.0)


# ---------------------------------------------------------------------------
# Stochastic / Bollinger / ATR / ADX
# ---------------------------------------------------------------------------


class TestStochastic:
    def test_flat_window_scores_50(self):
        from forecasting.features.technical import stochastic
        flat = [10.0] * 20
        result = stochastic(flat, flat, flat, 14, 3)
        assert np.all(result.k == 50.0)
        assert np.allclose(result.d, 50.0)

    def test_lengths(self):
        from forecasting.features.technical import stochastic
        closes = np.linspace(10, 20, 30)
        result = stochastic(closes + 1, closes - 1, closes, 14, 3)
        assert len(result.k) == 30 - 14 + 1
        assert len(result.d) == len(result.k) - 3 + 1

    def test_close_at_high_scores_100(self):
        from forecasting.features.technical import stochastic
        closes = np.arange(1.0, 21.0)
        result = stochastic(closes, closes - 1, closes, 14, 3)
        assert np.allclose(result.k, 100.0)

    def test_mismatched_lengths_are_empty(self):
        from forecasting.features.technical import stochastic
        result = stochastic([1.0] * 20, [1.0] * 19, [1.0] * 20)
        assert len(result.k) == 0 and len(result.d) == 0


class TestBollingerBands:
    def test_band_ordering(self, random_walk_series):
        from forecasting.features.technical import bollinger_bands
        bands = bollinger_bands(random_walk_series.closes, 20, 2.0)
        assert len(bands.middle) == len(random_walk_series) - 19
        assert np.all(bands.upper >= bands.middle)
        assert np.all(bands.middle >= bands.lower)

    def test_middle_is_sma(self, random_walk_series):
        from forecasting.features.technical import bollinger_bands, sma
        bands = bollinger_bands(random_walk_series.closes, 20)
        assert np.allclose(bands.middle, sma(random_walk_series.closes, 20))

    def test_constant_prices_collapse_bands(self):
        from forecasting.features.technical import bollinger_bands
        bands = bollinger_bands([5.0] * 25, 20)
        assert np.allclose(bands.upper, bands.lower)


class TestATR:
    def test_length(self):
        from forecasting.features.technical import atr
        closes = np.linspace(10, 20, 30)
        assert len(atr(closes + 1, closes - 1, closes, 14)) == 30 - 14

    def test_constant_range(self):
        from forecasting.features.technical import atr
        closes = np.full(30, 100.0)
        result = atr(closes + 1, closes - 1, closes, 14)
        assert np.allclose(result, 2.0)

    def test_too_short(self):
        from forecasting.features.technical import atr
        assert len(atr([1.0], [1.0], [1.0])) == 0


class TestADX:
    def test_length(self):
        from forecasting.features.technical import adx
        assert len(adx(np.linspace(1, 2, 30), 14)) == 30 - 14

    def test_flat_window_scores_zero(self):
        from forecasting.features.technical import adx
        assert np.all(adx([3.0] * 20, 14) == 0.0)

    def test_monotonic_highs_score_100(self):
        from forecasting.features.technical import adx
        assert np.allclose(adx(np.arange(1.0, 31.0), 14), 100.0)

    def test_bounded(self, random_walk_series):
        from forecasting.features.technical import adx
        values = adx(random_walk_series.highs, 14)
        assert np.all((values >= 0) & (values <= 100))


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


class TestPatterns:
    def test_short_input_has_no_labels(self):
        from forecasting.features.technical import detect_patterns
        assert detect_patterns(list(range(10))) == []

    def test_uptrend(self):
        from forecasting.features.technical import detect_patterns
        labels = detect_patterns(np.arange(1.0, 21.0))
        assert labels == ["Uptrend", "Strong bullish momentum"]

    def test_downtrend(self):
        from forecasting.features.technical import detect_patterns
        labels = detect_patterns(np.arange(20.0, 0.0, -1.0))
        assert labels == ["Downtrend", "Strong bearish momentum"]

    def test_flat_is_sideways(self):
        from forecasting.features.technical import detect_patterns
        assert detect_patterns([10.0] * 25) == ["Sideways consolidation"]

    def test_volatility_breakout(self):
        from forecasting.features.technical import detect_patterns
        prices = [10.0, 10.1] * 7 + [10.0, 10.0, 12.0, 8.0, 11.0, 10.0]
        assert "Volatility breakout" in detect_patterns(prices)


# ---------------------------------------------------------------------------
# TechnicalFeatures
# ---------------------------------------------------------------------------


class TestTechnicalFeatures:
    def test_computes_expected_keys(self, random_walk_series):
        from forecasting.features.technical import TechnicalFeatures
        s = random_walk_series
        indicators = TechnicalFeatures().compute(s.closes, s.highs, s.lows)
        for key in (
            "rsi", "sma_20", "sma_50", "sma_200", "ema_12", "ema_26",
            "macd", "macd_signal", "macd_histogram",
            "bollinger_upper", "bollinger_middle", "bollinger_lower",
            "stochastic_k", "stochastic_d", "atr", "adx",
        ):
            assert key in indicators

    def test_short_windows_are_empty_not_errors(self, random_walk_series):
        from forecasting.features.technical import TechnicalFeatures
        indicators = TechnicalFeatures().compute(random_walk_series.closes)
        assert len(indicators["sma_200"]) == 0
        assert "atr" not in indicators

    def test_arrays_are_read_only(self, random_walk_series):
        from forecasting.features.technical import TechnicalFeatures
        indicators = TechnicalFeatures().compute(random_walk_series.closes)
        with pytest.raises(ValueError):
            indicators["rsi"][0] = 1.0

    def test_latest_uses_default_for_empty(self):
        from forecasting.features.technical import latest
        indicators = {"rsi": np.array([40.0, 55.0]), "macd": np.empty(0)}
        assert latest(indicators, "rsi", 50.0) == 55.0
        assert latest(indicators, "macd", 0.0) == 0.0
        assert latest(indicators, "missing", -1.0) == -1.0
