"""
CLI entry point for the forecasting core.

Usage:
    # Forecast the next 7 days from a CSV of daily prices
    python -m forecasting forecast --csv prices.csv --days 7 --seed 42

    # Same, saved as JSON for a later `validate`
    python -m forecasting forecast --csv prices.csv --output forecast.json

    # Validate a stored forecast against realized prices
    python -m forecasting validate --forecast forecast.json --actual realized.csv

    # Latest value of every technical indicator
    python -m forecasting indicators --csv prices.csv

    # List registered models
    python -m forecasting models

CSV files need a ``date`` column and a ``close`` (or ``price``) column;
``open``, ``high``, ``low`` and ``volume`` are optional.
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

import pandas as pd

from forecasting.config import ForecastConfig, config
from forecasting.data.models import ForecastPoint, PriceSeries
from forecasting.engine import ForecastEngine
from forecasting.features.technical import latest
from forecasting.settings import get_settings
from forecasting.shared.errors import ForecastingError
from forecasting.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def _load_series(path: Path) -> PriceSeries:
    return PriceSeries.from_frame(pd.read_csv(path))


def _build_engine(args: argparse.Namespace) -> ForecastEngine:
    cfg: ForecastConfig = config
    seed = getattr(args, "seed", None)
    if seed is not None:
        cfg = dataclasses.replace(cfg, random_seed=seed)
    return ForecastEngine(cfg)


def cmd_forecast(args: argparse.Namespace) -> None:
    """Forecast from a CSV price history."""
    series = _load_series(args.csv)
    engine = _build_engine(args)
    sequence = engine.forecast(series, horizon_days=args.days, symbol=args.symbol)

    if args.output:
        args.output.write_text(
            json.dumps([p.to_dict() for p in sequence], indent=2), encoding="utf-8"
        )
        logger.info("Wrote %d forecast points to %s", len(sequence), args.output)
        return

    for p in sequence:
        logger.info(
            "%s | %s | Close=%.3f | CI=[%.3f, %.3f] | Conf=%.2f | Model=%s",
            args.symbol,
            p.date,
            p.predicted,
            p.lower_bound,
            p.upper_bound,
            p.confidence,
            p.model_used,
        )


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate a JSON forecast against a CSV of realized prices."""
    points = json.loads(args.forecast.read_text(encoding="utf-8"))
    forecast = [ForecastPoint.from_dict(p) for p in points]
    actual = _load_series(args.actual)
    realized = {p.date: p.close for p in actual}

    engine = _build_engine(args)
    result = engine.validate(args.symbol, forecast, realized)

    if args.output:
        args.output.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        logger.info("Wrote validation result to %s", args.output)
        logger.info("%s", result)
        return

    for p in result.points:
        if p.is_validated:
            logger.info(
                "%s | predicted=%.3f actual=%.3f accuracy=%.2f%%",
                p.date, p.predicted, p.actual, p.accuracy * 100,
            )
        else:
            logger.info("%s | predicted=%.3f (no realized price)", p.date, p.predicted)
    logger.info("%s", result)


def cmd_indicators(args: argparse.Namespace) -> None:
    """Show the latest value of each indicator and the pattern labels."""
    series = _load_series(args.csv)
    engine = _build_engine(args)
    bundle = engine.extract_features(series)

    for name in sorted(bundle.indicators):
        value = latest(bundle.indicators, name, float("nan"))
        logger.info("%-18s %s", name, "n/a" if value != value else f"{value:.4f}")
    logger.info(
        "regime=%s volatility=%.4f momentum=%.4f",
        bundle.regime.value, bundle.volatility, bundle.momentum,
    )
    logger.info("patterns: %s", ", ".join(bundle.patterns) or "none")


def cmd_models(args: argparse.Namespace) -> None:
    """List the registered model descriptors."""
    engine = _build_engine(args)
    for d in engine.model_performance():
        logger.info(
            "%-9s %-22s accuracy=%.2f precision=%.3f recall=%.3f f1=%.3f mape=%.4f rmse=%.3f",
            d.id, d.display_name, d.declared_accuracy,
            d.precision, d.recall, d.f1, d.mape, d.rmse,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forecasting",
        description="Technical indicators, ensemble forecasts and forecast validation",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Forecast
    fc_parser = subparsers.add_parser("forecast", help="Forecast from a CSV price history")
    fc_parser.add_argument("--csv", type=Path, required=True, help="Price history CSV")
    fc_parser.add_argument("--days", type=int, default=None, help="Horizon days (default from settings)")
    fc_parser.add_argument("--symbol", default="", help="Instrument symbol (used in log lines)")
    fc_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    fc_parser.add_argument("--output", type=Path, default=None, help="Write the forecast to a JSON file")
    fc_parser.set_defaults(func=cmd_forecast)

    # Validate
    val_parser = subparsers.add_parser("validate", help="Validate a forecast against realized prices")
    val_parser.add_argument("--forecast", type=Path, required=True, help="Forecast JSON file")
    val_parser.add_argument("--actual", type=Path, required=True, help="Realized prices CSV")
    val_parser.add_argument("--symbol", default="", help="Instrument symbol")
    val_parser.add_argument("--output", type=Path, default=None, help="Write the result to a JSON file")
    val_parser.set_defaults(func=cmd_validate)

    # Indicators
    ind_parser = subparsers.add_parser("indicators", help="Show latest technical indicators")
    ind_parser.add_argument("--csv", type=Path, required=True, help="Price history CSV")
    ind_parser.set_defaults(func=cmd_indicators)

    # Models
    models_parser = subparsers.add_parser("models", help="List registered models")
    models_parser.set_defaults(func=cmd_models)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(get_settings().log_level)
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except ForecastingError as exc:
        logger.error("%s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
