"""
Core data structures exchanged with the host application.

- `PricePoint` / `PriceSeries`  — chronologically ordered OHLCV input
- `ForecastPoint`               — one forecast day (``ForecastSequence`` is a list of them)
- `ValidationPoint`             — a forecast day with its realized price
- `ValidationResult`            — per-symbol validation summary

All of them are plain values: the core creates fresh instances per call
and never mutates what the caller passed in.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd


def _readonly(values: Iterable[float]) -> np.ndarray:
    arr = np.asarray(list(values), dtype=float)
    arr.setflags(write=False)
    return arr


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


@dataclass(frozen=True)
class PricePoint:
    """A single OHLCV observation."""

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: int = 0


class PriceSeries:
    """An immutable, chronologically ordered sequence of `PricePoint`.

    Column views (`closes`, `highs`, ...) are read-only numpy arrays so
    the indicator layer can consume them without copying.
    """

    def __init__(self, points: Iterable[PricePoint]) -> None:
        self._points: tuple[PricePoint, ...] = tuple(points)
        self.opens = _readonly(p.open for p in self._points)
        self.highs = _readonly(p.high for p in self._points)
        self.lows = _readonly(p.low for p in self._points)
        self.closes = _readonly(p.close for p in self._points)
        volumes = np.asarray([p.volume for p in self._points], dtype=np.int64)
        volumes.setflags(write=False)
        self.volumes = volumes

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "PriceSeries":
        """Build a series from mappings with date/open/high/low/close/volume keys.

        A ``price`` key may stand in for any missing OHLC field.
        """
        points = []
        for rec in records:
            close = rec.get("close", rec.get("price"))
            points.append(PricePoint(
                date=_as_date(rec["date"]),
                open=float(rec.get("open", close)),
                high=float(rec.get("high", close)),
                low=float(rec.get("low", close)),
                close=float(close),
                volume=int(rec.get("volume", 0) or 0),
            ))
        return cls(points)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "PriceSeries":
        """Build a series from a DataFrame (column names are case-insensitive)."""
        frame = df.rename(columns={c: str(c).strip().lower() for c in df.columns})
        if "close" not in frame.columns and "price" in frame.columns:
            frame = frame.assign(close=frame["price"])
        for col in ("open", "high", "low"):
            if col not in frame.columns:
                frame = frame.assign(**{col: frame["close"]})
        if "volume" not in frame.columns:
            frame = frame.assign(volume=0)
        frame = frame.assign(
            date=pd.to_datetime(frame["date"]).dt.date,
            volume=frame["volume"].fillna(0).astype(np.int64),
        )
        return cls.from_records(
            frame[["date", "open", "high", "low", "close", "volume"]].to_dict("records")
        )

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a DataFrame with one row per point."""
        return pd.DataFrame(
            [asdict(p) for p in self._points],
            columns=["date", "open", "high", "low", "close", "volume"],
        )

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self._points)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return PriceSeries(self._points[index])
        return self._points[index]

    def __repr__(self) -> str:
        if not self._points:
            return "PriceSeries(empty)"
        return (
            f"PriceSeries({len(self)} points, "
            f"{self._points[0].date} → {self._points[-1].date})"
        )

    @property
    def dates(self) -> tuple[date, ...]:
        return tuple(p.date for p in self._points)

    @property
    def last_date(self) -> date | None:
        return self._points[-1].date if self._points else None

    def tail(self, n: int) -> "PriceSeries":
        """Return the last ``n`` points as a new series."""
        if n <= 0:
            return PriceSeries(())
        return PriceSeries(self._points[-n:])


@dataclass(frozen=True)
class ForecastPoint:
    """A forecast for one future day."""

    date: date
    predicted: float
    confidence: float
    upper_bound: float
    lower_bound: float
    model_used: str
    features_used: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "predicted": self.predicted,
            "confidence": self.confidence,
            "upper_bound": self.upper_bound,
            "lower_bound": self.lower_bound,
            "model_used": self.model_used,
            "features_used": sorted(self.features_used),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ForecastPoint":
        return cls(
            date=_as_date(data["date"]),
            predicted=float(data["predicted"]),
            confidence=float(data["confidence"]),
            upper_bound=float(data["upper_bound"]),
            lower_bound=float(data["lower_bound"]),
            model_used=str(data["model_used"]),
            features_used=frozenset(data.get("features_used", ())),
        )


# Ordered forecast days, consecutive dates, one point per horizon day
ForecastSequence = list[ForecastPoint]


@dataclass(frozen=True)
class ValidationPoint(ForecastPoint):
    """A forecast day paired with its realized price, when one exists."""

    actual: float | None = None
    accuracy: float | None = None

    @property
    def is_validated(self) -> bool:
        return self.actual is not None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["actual"] = self.actual
        data["accuracy"] = self.accuracy
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ValidationPoint":
        base = ForecastPoint.from_dict(data)
        actual = data.get("actual")
        accuracy = data.get("accuracy")
        return cls(
            **{f: getattr(base, f) for f in base.__dataclass_fields__},
            actual=float(actual) if actual is not None else None,
            accuracy=float(accuracy) if accuracy is not None else None,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Comparison of a forecast sequence against realized prices."""

    symbol: str
    points: tuple[ValidationPoint, ...]
    overall_accuracy: float
    mape: float
    rmse: float
    last_validated: datetime
    mae: float = 0.0
    calibration: float = 0.0

    @property
    def validated_count(self) -> int:
        return sum(1 for p in self.points if p.is_validated)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "points": [p.to_dict() for p in self.points],
            "overall_accuracy": self.overall_accuracy,
            "mape": self.mape,
            "rmse": self.rmse,
            "mae": self.mae,
            "calibration": self.calibration,
            "last_validated": self.last_validated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ValidationResult":
        return cls(
            symbol=data["symbol"],
            points=tuple(ValidationPoint.from_dict(p) for p in data["points"]),
            overall_accuracy=float(data["overall_accuracy"]),
            mape=float(data["mape"]),
            rmse=float(data["rmse"]),
            mae=float(data.get("mae", 0.0)),
            calibration=float(data.get("calibration", 0.0)),
            last_validated=datetime.fromisoformat(data["last_validated"]),
        )

    def __str__(self) -> str:
        return (
            f"{self.symbol}: Accuracy={self.overall_accuracy:.2%} | "
            f"MAPE={self.mape:.2%} | RMSE={self.rmse:.4f} | "
            f"validated={self.validated_count}/{len(self.points)}"
        )
