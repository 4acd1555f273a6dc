"""
Tests for forecast validation against realized prices.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

FIXED_NOW = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)


def _forecast(predictions, start=date(2024, 6, 1)):
    from forecasting.data.models import ForecastPoint
    return [
        ForecastPoint(
            date=start + timedelta(days=i),
            predicted=price,
            confidence=0.9,
            upper_bound=price * 1.05,
            lower_bound=price * 0.95,
            model_used="ensemble",
        )
        for i, price in enumerate(predictions)
    ]


@pytest.fixture
def engine():
    from forecasting.validation.engine import ValidationEngine
    return ValidationEngine(clock=lambda: FIXED_NOW)


class TestValidationEngine:
    def test_no_realized_prices(self, engine):
        result = engine.validate(_forecast([100.0, 101.0]), {}, "ACME")
        assert result.overall_accuracy == 0.0
        assert result.mape == 0.0
        assert result.rmse == 0.0
        assert result.validated_count == 0
        assert len(result.points) == 2
        assert result.last_validated == FIXED_NOW

    def test_perfect_forecast(self, engine):
        forecast = _forecast([100.0, 102.0, 104.0])
        realized = {p.date: p.predicted for p in forecast}
        result = engine.validate(forecast, realized, "ACME")
        assert result.overall_accuracy == pytest.approx(1.0)
        assert result.mape == pytest.approx(0.0)
        assert result.rmse == pytest.approx(0.0)
        assert result.calibration == pytest.approx(1.0)
        assert result.validated_count == 3

    def test_partial_match(self, engine):
        forecast = _forecast([110.0, 50.0, 80.0])
        realized = {
            forecast[0].date: 100.0,
            forecast[1].date: 50.0,
        }
        result = engine.validate(forecast, realized, "ACME")
        assert result.validated_count == 2
        assert result.points[0].accuracy == pytest.approx(0.9)
        assert result.points[1].accuracy == pytest.approx(1.0)
        assert not result.points[2].is_validated
        assert result.overall_accuracy == pytest.approx(0.95)
        assert result.mape == pytest.approx(0.05)
        assert result.mae == pytest.approx(5.0)
        assert result.rmse == pytest.approx((100.0 / 2) ** 0.5)
        # 100 is outside [104.5, 115.5]; 50 is inside
        assert result.calibration == pytest.approx(0.5)

    def test_accuracy_floored_at_zero(self, engine):
        forecast = _forecast([300.0])
        result = engine.validate(forecast, {forecast[0].date: 100.0})
        assert result.points[0].accuracy == 0.0
        assert result.mape == pytest.approx(2.0)

    def test_non_positive_actual_is_missing(self, engine):
        forecast = _forecast([100.0, 100.0])
        realized = {forecast[0].date: 0.0, forecast[1].date: -5.0}
        result = engine.validate(forecast, realized)
        assert result.validated_count == 0
        assert result.overall_accuracy == 0.0

    def test_points_keep_forecast_fields(self, engine):
        forecast = _forecast([100.0])
        result = engine.validate(forecast, {forecast[0].date: 99.0}, "ACME")
        point = result.points[0]
        assert point.predicted == 100.0
        assert point.model_used == "ensemble"
        assert point.actual == 99.0
        assert result.symbol == "ACME"
