"""Average True Range (ATR) indicator."""

from decimal import Decimal
from typing import Sequence

from domain.indicators.base import OHLCBar, ScalarPoint, require_period
from domain.indicators.moving_averages import wilder


def true_range(bars: Sequence[OHLCBar]) -> list[Decimal]:
    """Calculate True Range for bars[1:].

    True Range = max(high - low, abs(high - prev_close), abs(low - prev_close))

    Returns:
        len(bars) - 1 values; value j belongs to bar j + 1
    """
    return [
        max(
            bar.high - bar.low,
            abs(bar.high - prev.close),
            abs(bar.low - prev.close),
        )
        for prev, bar in zip(bars, bars[1:])
    ]


def atr(bars: Sequence[OHLCBar], period: int = 14) -> list[ScalarPoint]:
    """Calculate Average True Range using Wilder's smoothing.

    Args:
        bars: OHLC series, ascending by time
        period: ATR period (default: 14)

    Returns:
        ATR points for bars[period:], or [] with fewer than period + 1 bars

    Notes:
        - First ATR value is the simple average of the first `period` true ranges
    """
    require_period(period)
    if len(bars) < period + 1:
        return []

    smoothed = wilder(true_range(bars), period)
    return [
        ScalarPoint(time=bar.time, value=value)
        for bar, value in zip(bars[period:], smoothed)
    ]
