"""
Temporal / calendar features.

Counts observations by weekday and by month. Diagnostic only: the
forecast models do not consume seasonality.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Seasonality:
    """Observation counts by calendar position.

    ``day_of_week[0]`` is Monday; ``month_of_year[0]`` is January.
    """

    day_of_week: tuple[int, ...] = (0,) * 7
    month_of_year: tuple[int, ...] = (0,) * 12

    def to_dict(self) -> dict:
        return {
            "day_of_week": list(self.day_of_week),
            "month_of_year": list(self.month_of_year),
        }


class TemporalFeatures:
    """Generates calendar counts from observation dates."""

    def compute(self, dates: Sequence[date]) -> Seasonality:
        """Count observations per weekday and per month.

        Args:
            dates: Observation dates of the price history.

        Returns:
            Seasonality counts (all zero for an empty history).
        """
        if len(dates) == 0:
            return Seasonality()

        dt = pd.to_datetime(pd.Series(list(dates)))
        weekdays = dt.dt.dayofweek.value_counts().reindex(range(7), fill_value=0)
        months = dt.dt.month.value_counts().reindex(range(1, 13), fill_value=0)

        logger.debug("Computed seasonality over %d observations.", len(dt))
        return Seasonality(
            day_of_week=tuple(int(v) for v in weekdays),
            month_of_year=tuple(int(v) for v in months),
        )
