"""
Boundary checks for price input.

The indicator and model layers assume well-formed data; these checks
run in the engine (when ``strict_input`` is on) so malformed series are
rejected with a descriptive error instead of being silently miscomputed.
"""

import logging
from collections.abc import Sequence

import numpy as np

from forecasting.data.models import PriceSeries
from forecasting.shared.errors import InvalidPriceSeriesError

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Series validation rules
# -------------------------------------------------------------------

VALIDATION_RULES = {
    "dates_strictly_increasing": lambda s: all(
        a < b for a, b in zip(s.dates, s.dates[1:])
    ),
    "prices_positive": lambda s: bool(
        np.all(s.closes > 0) and np.all(s.opens > 0)
        and np.all(s.highs > 0) and np.all(s.lows > 0)
    ),
    "high_gte_low": lambda s: bool(np.all(s.highs >= s.lows)),
    "volume_non_negative": lambda s: bool(np.all(s.volumes >= 0)),
}


def validate_price_series(series: PriceSeries) -> PriceSeries:
    """Apply every rule in `VALIDATION_RULES` to ``series``.

    Returns:
        The same series, for chaining.

    Raises:
        InvalidPriceSeriesError: Naming the first rule that failed.
    """
    for rule_name, rule_fn in VALIDATION_RULES.items():
        if not rule_fn(series):
            logger.warning("Validation rule '%s' failed for %r", rule_name, series)
            raise InvalidPriceSeriesError(rule_name.replace("_", " "))
    return series


def validate_ohlc_lengths(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> None:
    """Reject raw OHLC arrays whose lengths disagree."""
    if not len(highs) == len(lows) == len(closes):
        raise InvalidPriceSeriesError(
            f"mismatched lengths (highs={len(highs)}, lows={len(lows)}, "
            f"closes={len(closes)})"
        )
