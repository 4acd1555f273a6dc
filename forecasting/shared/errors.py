"""
Errors raised at the boundary of the forecasting core.

Indicator, feature, model, ensemble and validation code never raises on
insufficient data; these errors are reserved for malformed input and
bad lookups.
"""


class ForecastingError(Exception):
    """Base error for the forecasting core."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidPriceSeriesError(ForecastingError):
    """Raised when a price series is malformed (ordering, values, lengths)."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid price series: {reason}")
        self.reason = reason


class InvalidHorizonError(ForecastingError):
    """Raised when the forecast horizon is not a positive number of days."""

    def __init__(self, horizon: int) -> None:
        super().__init__(
            f"Invalid forecast horizon: {horizon}. Must be at least 1 day."
        )
        self.horizon = horizon


class UnknownModelError(ForecastingError):
    """Raised when a model id is not present in the registry."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Unknown model: {model_id}")
        self.model_id = model_id
