"""
Tests for the ensemble combiner and volatility-scaled intervals.
"""

from datetime import date, timedelta

import pytest


def _point(day: int, predicted: float, confidence: float, band: float, model: str, features=()):
    from forecasting.data.models import ForecastPoint
    return ForecastPoint(
        date=date(2024, 6, 1) + timedelta(days=day),
        predicted=predicted,
        confidence=confidence,
        upper_bound=predicted * (1 + band),
        lower_bound=predicted * (1 - band),
        model_used=model,
        features_used=frozenset(features),
    )


class TestEnsembleCombiner:
    def test_empty_input(self):
        from forecasting.models.ensemble import EnsembleCombiner
        assert EnsembleCombiner().combine([]) == []

    def test_single_sequence_keeps_prices(self):
        from forecasting.models.ensemble import EnsembleCombiner
        seq = [_point(i, 100.0 + i, 0.9, 0.05, "lstm") for i in range(3)]
        combined = EnsembleCombiner().combine([seq])
        assert [p.predicted for p in combined] == pytest.approx([100.0, 101.0, 102.0])
        assert all(p.model_used == "ensemble" for p in combined)

    def test_confidence_weighted_price(self):
        from forecasting.models.ensemble import EnsembleCombiner
        a = [_point(0, 100.0, 0.9, 0.05, "lstm", {"rsi"})]
        b = [_point(0, 110.0, 0.6, 0.08, "arima", {"price_returns"})]
        (p,) = EnsembleCombiner().combine([a, b])
        assert p.predicted == pytest.approx((100.0 * 0.9 + 110.0 * 0.6) / 1.5)
        assert p.confidence == pytest.approx(0.75)
        assert p.features_used == frozenset({"rsi", "price_returns"})
        assert p.date == a[0].date

    def test_price_within_model_range(self):
        from forecasting.models.ensemble import EnsembleCombiner
        a = [_point(i, 100.0 - i, 0.95 - 0.05 * i, 0.05, "lstm") for i in range(5)]
        b = [_point(i, 90.0 + 3 * i, 0.9 - 0.08 * i, 0.08, "arima") for i in range(5)]
        for pa, pb, p in zip(a, b, EnsembleCombiner().combine([a, b])):
            assert min(pa.predicted, pb.predicted) <= p.predicted <= max(pa.predicted, pb.predicted)

    def test_union_envelope(self):
        from forecasting.models.ensemble import EnsembleCombiner
        a = [_point(0, 100.0, 0.9, 0.05, "lstm")]
        b = [_point(0, 101.0, 0.9, 0.08, "arima")]
        (p,) = EnsembleCombiner().combine([a, b])
        assert p.upper_bound == pytest.approx(101.0 * 1.08)
        assert p.lower_bound == pytest.approx(101.0 * 0.92)
        assert p.upper_bound >= max(a[0].upper_bound, b[0].upper_bound)
        assert p.lower_bound <= min(a[0].lower_bound, b[0].lower_bound)

    def test_uneven_lengths(self):
        from forecasting.models.ensemble import EnsembleCombiner
        a = [_point(i, 100.0, 0.9, 0.05, "lstm") for i in range(2)]
        b = [_point(i, 110.0, 0.9, 0.05, "arima") for i in range(4)]
        combined = EnsembleCombiner().combine([a, b])
        assert len(combined) == 4
        assert combined[0].predicted == pytest.approx(105.0)
        assert combined[3].predicted == pytest.approx(110.0)

    def test_zero_confidence_uses_plain_mean(self):
        from forecasting.models.ensemble import EnsembleCombiner
        a = [_point(0, 100.0, 0.0, 0.05, "lstm")]
        b = [_point(0, 120.0, 0.0, 0.05, "arima")]
        (p,) = EnsembleCombiner().combine([a, b])
        assert p.predicted == pytest.approx(110.0)
        assert p.confidence == 0.0


class TestVolatilityIntervals:
    def test_interval_width(self):
        from forecasting.models.ensemble import apply_volatility_intervals
        seq = [_point(0, 100.0, 0.9, 0.05, "ensemble")]
        (p,) = apply_volatility_intervals(seq, 0.03)
        # 100 * 0.03 * ((1 - 0.9) * 2 + 1) = 3.6
        assert p.upper_bound == pytest.approx(103.6)
        assert p.lower_bound == pytest.approx(96.4)
        assert p.predicted == 100.0

    def test_default_volatility_when_zero(self):
        from forecasting.models.ensemble import apply_volatility_intervals
        seq = [_point(0, 100.0, 1.0, 0.05, "ensemble")]
        (p,) = apply_volatility_intervals(seq, 0.0, default_volatility=0.02)
        assert p.upper_bound == pytest.approx(102.0)

    def test_input_is_untouched(self):
        from forecasting.models.ensemble import apply_volatility_intervals
        seq = [_point(0, 100.0, 0.9, 0.05, "ensemble")]
        apply_volatility_intervals(seq, 0.5)
        assert seq[0].upper_bound == pytest.approx(105.0)
