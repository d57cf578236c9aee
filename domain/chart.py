"""
Chart assembly.

Turns an OHLC series into the chart payload served to clients:
line data, candlesticks, the selected indicator and optional MA overlays.
Also normalizes loosely-typed chart requests the way the web API does.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

from .enums import CHART_RANGE_ALIASES, ChartRange, IndicatorKind, Market
from .indicators import (
    IndicatorResult,
    OHLCBar,
    ScalarPoint,
    compute,
    moving_average_overlay,
    quantize,
    to_decimal,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Request normalization
# ============================================================================

@dataclass(frozen=True)
class ChartRequest:
    """Validated chart request."""
    symbol: str
    range: ChartRange = ChartRange.WEEK
    market: Market = Market.KR
    indicator: IndicatorKind = IndicatorKind.NONE


def parse_range(value: str | ChartRange | None, default: ChartRange = ChartRange.WEEK) -> ChartRange:
    """Parse a range label, falling back to default for unknown values."""
    if isinstance(value, ChartRange):
        return value
    if value in CHART_RANGE_ALIASES:
        return CHART_RANGE_ALIASES[value]
    try:
        return ChartRange(value)
    except ValueError:
        return default


def parse_market(value: str | Market | None, default: Market = Market.KR) -> Market:
    """Parse a market code, falling back to default for unknown values."""
    if isinstance(value, Market):
        return value
    try:
        return Market(value)
    except ValueError:
        return default


def parse_indicator(value: str | IndicatorKind | None) -> IndicatorKind:
    """Parse an indicator name coming from a request.

    Unknown names select no indicator. Code that calls the engine directly
    goes through compute(), which rejects them instead.
    """
    if isinstance(value, IndicatorKind):
        return value
    try:
        return IndicatorKind(value)
    except ValueError:
        return IndicatorKind.NONE


def normalize_request(
    symbol: str | None,
    range: str | ChartRange | None = None,
    market: str | Market | None = None,
    indicator: str | IndicatorKind | None = None,
    *,
    default_range: ChartRange = ChartRange.WEEK,
    default_market: Market = Market.KR,
) -> ChartRequest:
    """
    Build a ChartRequest from raw query values.

    Raises:
        ValidationError: If symbol is missing
    """
    from ports import ValidationError

    if not symbol or not symbol.strip():
        raise ValidationError(reason="Symbol is required", field="symbol", value=symbol)

    return ChartRequest(
        symbol=symbol.strip().upper(),
        range=parse_range(range, default_range),
        market=parse_market(market, default_market),
        indicator=parse_indicator(indicator),
    )


def _months_back(day: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the month's length."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def start_date_for_range(chart_range: ChartRange, today: date | None = None) -> date:
    """
    First date included in a chart range.

    Example:
        >>> start_date_for_range(ChartRange.MONTH, date(2024, 3, 31))
        datetime.date(2024, 2, 29)
    """
    today = today or date.today()

    if chart_range is ChartRange.WEEK:
        return today - timedelta(days=7)
    if chart_range is ChartRange.MONTH:
        return _months_back(today, 1)
    if chart_range is ChartRange.QUARTER:
        return _months_back(today, 3)
    if chart_range is ChartRange.HALF_YEAR:
        return _months_back(today, 6)
    return _months_back(today, 12)


# ============================================================================
# Row normalization
# ============================================================================

def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> list[OHLCBar]:
    """
    Convert raw price-history rows to bars.

    Rows without a close (or a time) are dropped. Missing open/high/low
    fall back to the close and missing volume to 0, so partially filled
    intraday rows still render as flat candles.
    """
    bars = []
    dropped = 0

    for row in rows:
        close = row.get("close")
        time = row.get("time")
        if close is None or time is None:
            dropped += 1
            continue

        bars.append(OHLCBar(
            time=time,
            open=_or_default(row.get("open"), close),
            high=_or_default(row.get("high"), close),
            low=_or_default(row.get("low"), close),
            close=close,
            volume=int(to_decimal(_or_default(row.get("volume"), 0))),
        ))

    if dropped:
        logger.warning(f"Dropped {dropped} price row(s) without close")

    return bars


def _or_default(value: Any, default: Any) -> Any:
    # Empty strings behave like nulls in CSV exports
    if value is None or value == "":
        return default
    return value


# ============================================================================
# Chart payload
# ============================================================================

@dataclass(frozen=True)
class PricePoint:
    """Line-chart point."""
    time: str | int
    price: Decimal


@dataclass
class ChartData:
    """
    Chart payload for one symbol.

    Attributes:
        data: Close prices for the line chart
        ohlc: Bars for the candlestick chart
        indicators: Selected indicator keyed by name ({} when none)
        overlays: Moving-average overlays keyed "ma<period>" (empty unless requested)
    """
    data: list[PricePoint]
    ohlc: list[OHLCBar]
    indicators: IndicatorResult = field(default_factory=dict)
    overlays: dict[str, list[ScalarPoint]] = field(default_factory=dict)


def build_chart(
    bars: Sequence[OHLCBar],
    indicator: IndicatorKind | str = IndicatorKind.NONE,
    *,
    params: Mapping[str, Any] | None = None,
    precomputed: IndicatorResult | None = None,
    places: int | None = None,
    overlay_periods: Iterable[int] | None = None,
) -> ChartData:
    """
    Assemble chart data for a series.

    Precomputed indicator data (e.g. from a nightly batch) is used as-is
    when it has any points; otherwise the indicator is computed in-process.

    Args:
        bars: OHLC series, ascending by time
        indicator: Indicator to attach
        params: Indicator parameter overrides
        precomputed: Indicator payload already available for this series
        places: Round indicator and overlay values half-up
        overlay_periods: SMA overlay periods, e.g. (5, 20, 60)

    Returns:
        ChartData
    """
    bars = list(bars)

    if precomputed and any(precomputed.values()):
        indicators = dict(precomputed)
        logger.debug(f"Using precomputed indicators: {', '.join(indicators)}")
    else:
        indicators = compute(bars, indicator, params, places=places)

    overlays = {}
    if overlay_periods:
        overlays = moving_average_overlay(bars, overlay_periods)
        if places is not None:
            overlays = {
                name: [ScalarPoint(p.time, quantize(p.value, places)) for p in points]
                for name, points in overlays.items()
            }

    return ChartData(
        data=[PricePoint(time=bar.time, price=to_decimal(bar.close)) for bar in bars],
        ohlc=bars,
        indicators=indicators,
        overlays=overlays,
    )
