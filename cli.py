"""
Chartlens CLI - technical indicator charts from the command line.

Usage:
    chartlens chart SYMBOL [--range RANGE] [--market MARKET] [--indicator NAME] [--ma] [--output FILE]
    chartlens compute CSV --indicator NAME [--period N] [--param KEY=VALUE] [--places N]
    chartlens indicators
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from adapters import YahooHistoryAdapter, read_bars
from config import ConfigError, get_config
from domain import IndicatorKind, IndicatorError, compute, min_bars, warmup
from domain.indicators import INDICATORS, parse_kind
from orchestration.chart_service import ChartService
from ports import AdapterError
from presentation.json_api import indicators_to_json, to_json

logger = logging.getLogger("chartlens")


def _parse_value(raw: str) -> Any:
    """Interpret a --param value as bool, int or float where possible."""
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            continue
    return raw


def _parse_params(kind: IndicatorKind, period: int | None, pairs: list[str]) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if period is not None:
        defaults = INDICATORS[kind].defaults if kind in INDICATORS else {}
        if "period" in defaults:
            params["period"] = period
        elif "k_period" in defaults:
            params["k_period"] = period
        else:
            raise IndicatorError(f"--period does not apply to {kind.value}; use --param")

    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise IndicatorError(f"Expected KEY=VALUE, got {pair!r}")
        params[key.strip()] = _parse_value(value.strip())
    return params


def _write_output(payload: dict[str, Any], output: str | None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        print(f"Output written to {output}", file=sys.stderr)
    else:
        print(text)


def cmd_chart(args: argparse.Namespace) -> int:
    """Fetch history and print chart JSON."""
    config = get_config()
    service = ChartService(YahooHistoryAdapter(config), config)

    result = service.get_chart(
        args.symbol,
        range=args.range,
        market=args.market,
        indicator=args.indicator,
        overlays=True if args.ma else None,
    )
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    _write_output(to_json(result.chart), args.output)
    return 0


def cmd_compute(args: argparse.Namespace) -> int:
    """Compute one indicator over a CSV file."""
    config = get_config()
    kind = parse_kind(args.indicator)

    params = config.indicator_params(kind)
    params.update(_parse_params(kind, args.period, args.param))
    places = args.places if args.places is not None else config.engine.decimal_places

    bars = read_bars(args.csv)
    logger.debug(f"Loaded {len(bars)} bars from {args.csv}")

    result = compute(
        bars,
        kind,
        params,
        places=places,
        validate=config.engine.validate_input,
    )
    if bars and kind is not IndicatorKind.NONE and not result.get(kind.value):
        print(
            f"Warning: {len(bars)} bar(s) is too short for {kind.value} "
            f"(needs {max(min_bars(kind, params), warmup(kind, params) + 1)})",
            file=sys.stderr,
        )

    _write_output(indicators_to_json(result), args.output)
    return 0


def cmd_indicators(args: argparse.Namespace) -> int:
    """List supported indicators."""
    print(f"\n{'Indicator':<12} {'Defaults':<46} {'Warm-up':>8} {'Min bars':>9}")
    print("-" * 78)
    for kind, spec in INDICATORS.items():
        defaults = ", ".join(f"{k}={v}" for k, v in spec.defaults.items()) or "-"
        print(f"{kind.value:<12} {defaults:<46} {warmup(kind):>8} {min_bars(kind):>9}")
    print()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="chartlens",
        description="Technical indicator charts",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Chart command
    chart_parser = subparsers.add_parser("chart", help="Build chart JSON for a symbol")
    chart_parser.add_argument("symbol", help="Ticker symbol, e.g. 005930 or AAPL")
    chart_parser.add_argument("-r", "--range", help="1w, 1m, 3m, 6m or 1y")
    chart_parser.add_argument("-m", "--market", help="KR or US")
    chart_parser.add_argument("-i", "--indicator", help="Indicator name (see 'indicators')")
    chart_parser.add_argument("--ma", action="store_true", help="Include MA overlays")
    chart_parser.add_argument("-o", "--output", help="Output file path")
    chart_parser.set_defaults(func=cmd_chart)

    # Compute command
    compute_parser = subparsers.add_parser("compute", help="Compute an indicator over a CSV file")
    compute_parser.add_argument("csv", help="CSV with time,open,high,low,close,volume columns")
    compute_parser.add_argument("-i", "--indicator", required=True, help="Indicator name")
    compute_parser.add_argument("--period", type=int, help="Main lookback period")
    compute_parser.add_argument(
        "-p", "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Indicator parameter (repeatable)",
    )
    compute_parser.add_argument("--places", type=int, help="Decimal places (default from config)")
    compute_parser.add_argument("-o", "--output", help="Output file path")
    compute_parser.set_defaults(func=cmd_compute)

    # Indicators command
    indicators_parser = subparsers.add_parser("indicators", help="List supported indicators")
    indicators_parser.set_defaults(func=cmd_indicators)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        return args.func(args)
    except (AdapterError, ConfigError, IndicatorError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
