"""
Ensemble combination of forecast sequences.

Merges the day-by-day output of several models into one sequence:
- price       = confidence-weighted mean of the model prices
- confidence  = arithmetic mean of the model confidences
- bounds      = union envelope (max of uppers, min of lowers)
- features    = union of the model feature tags

The envelope never narrows as models are added.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace

from forecasting.data.models import ForecastPoint, ForecastSequence

logger = logging.getLogger(__name__)


class EnsembleCombiner:
    """Combines forecast sequences day by day.

    Stateless: it only reads its inputs, so one instance may be shared
    across threads.
    """

    model_id = "ensemble"

    def combine(self, sequences: Sequence[ForecastSequence]) -> ForecastSequence:
        """Merge ``sequences`` into one confidence-weighted sequence.

        Sequences shorter than the longest are skipped on the days they
        lack; a day no sequence covers is omitted. An empty input gives
        an empty output.
        """
        if not sequences:
            logger.warning("[Ensemble] No model sequences to combine.")
            return []

        num_days = max(len(s) for s in sequences)
        combined: ForecastSequence = []

        for day in range(num_days):
            day_points = [s[day] for s in sequences if day < len(s)]
            if not day_points:
                continue
            combined.append(self._combine_day(day_points))

        logger.debug(
            "[Ensemble] Combined %d sequences into %d days.",
            len(sequences), len(combined),
        )
        return combined

    def _combine_day(self, points: list[ForecastPoint]) -> ForecastPoint:
        prices = [p.predicted for p in points]
        confidences = [p.confidence for p in points]

        total_weight = sum(confidences)
        if total_weight > 0:
            price = sum(p * c for p, c in zip(prices, confidences)) / total_weight
        else:
            price = sum(prices) / len(prices)
        # Keep rounding error from leaving the model range
        price = min(max(price, min(prices)), max(prices))

        return ForecastPoint(
            date=points[0].date,
            predicted=price,
            confidence=sum(confidences) / len(confidences),
            upper_bound=max(p.upper_bound for p in points),
            lower_bound=min(p.lower_bound for p in points),
            model_used=self.model_id,
            features_used=frozenset().union(*(p.features_used for p in points)),
        )


def apply_volatility_intervals(
    sequence: ForecastSequence,
    volatility: float,
    default_volatility: float = 0.02,
) -> ForecastSequence:
    """Replace each point's bounds with a volatility-scaled interval.

    Interval = ``predicted * v * ((1 - confidence) * 2 + 1)``, where ``v``
    is ``volatility`` or ``default_volatility`` when it is zero, so
    low-confidence days get wider intervals.
    """
    v = volatility or default_volatility
    widened: ForecastSequence = []
    for point in sequence:
        interval = point.predicted * v * ((1 - point.confidence) * 2 + 1)
        widened.append(replace(
            point,
            upper_bound=point.predicted + interval,
            lower_bound=point.predicted - interval,
        ))
    return widened
