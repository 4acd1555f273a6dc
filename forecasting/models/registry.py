"""
Model registry.

Read-only table of model metadata used for comparison and reporting
views. Descriptors are created once when the registry is built and are
never touched by forecasting calls.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, timezone

import numpy as np

from forecasting.shared.errors import UnknownModelError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelDescriptor:
    """Reported performance and timing of one model."""

    id: str
    display_name: str
    declared_accuracy: float
    precision: float
    recall: float
    f1: float
    mape: float
    rmse: float
    training_time_ms: float
    prediction_time_ms: float
    last_trained: datetime | None = None

    @classmethod
    def from_accuracy(
        cls,
        model_id: str,
        display_name: str,
        accuracy: float,
        training_time_ms: float,
        prediction_time_ms: float,
        last_trained: datetime | None = None,
    ) -> "ModelDescriptor":
        """Derive the reported scores from a declared accuracy."""
        return cls(
            id=model_id,
            display_name=display_name,
            declared_accuracy=accuracy,
            precision=accuracy * 0.95,
            recall=accuracy * 0.98,
            f1=accuracy * 0.96,
            mape=(1 - accuracy) * 0.1,
            rmse=(1 - accuracy) * 5,
            training_time_ms=training_time_ms,
            prediction_time_ms=prediction_time_ms,
            last_trained=last_trained,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "declared_accuracy": self.declared_accuracy,
            "precision": round(self.precision, 4),
            "recall": round(self.recall, 4),
            "f1": round(self.f1, 4),
            "mape": round(self.mape, 4),
            "rmse": round(self.rmse, 4),
            "training_time_ms": round(self.training_time_ms, 1),
            "prediction_time_ms": round(self.prediction_time_ms, 3),
            "last_trained": self.last_trained.isoformat() if self.last_trained else None,
        }


# (id, display name, declared accuracy)
DEFAULT_MODELS = (
    ("lstm", "LSTM Neural Network", 0.87),
    ("arima", "ARIMA Time Series", 0.82),
    ("ensemble", "Ensemble Model", 0.91),
)


class ModelRegistry:
    """Lookup of `ModelDescriptor` by model id."""

    def __init__(self, descriptors: Iterable[ModelDescriptor]) -> None:
        self._models: dict[str, ModelDescriptor] = {d.id: d for d in descriptors}

    @classmethod
    def default(
        cls,
        rng: np.random.Generator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> "ModelRegistry":
        """Registry of the lstm / arima / ensemble descriptors.

        Training (60-360 s) and prediction (1-11 ms) timings are drawn
        once from ``rng``.
        """
        rng = rng if rng is not None else np.random.default_rng()
        now = (clock or (lambda: datetime.now(timezone.utc)))()
        descriptors = [
            ModelDescriptor.from_accuracy(
                model_id,
                name,
                accuracy,
                training_time_ms=(rng.random() * 300 + 60) * 1000,
                prediction_time_ms=rng.random() * 10 + 1,
                last_trained=now,
            )
            for model_id, name, accuracy in DEFAULT_MODELS
        ]
        logger.info("Model registry initialised with %d models.", len(descriptors))
        return cls(descriptors)

    def get(self, model_id: str) -> ModelDescriptor:
        try:
            return self._models[model_id]
        except KeyError:
            raise UnknownModelError(model_id) from None

    def ids(self) -> list[str]:
        return list(self._models)

    def performance(self) -> list[ModelDescriptor]:
        """All descriptors in registration order."""
        return list(self._models.values())

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)
