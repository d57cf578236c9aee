"""Bollinger Bands indicator."""

from decimal import Decimal, InvalidOperation
from typing import Sequence

from domain.indicators.base import (
    BollingerPoint,
    InvalidParameterError,
    Number,
    OHLCBar,
    closes,
    require_period,
    to_decimal,
)
from domain.indicators.moving_averages import mean


def bollinger_bands(
    bars: Sequence[OHLCBar],
    period: int = 20,
    std_dev: Number = 2,
) -> list[BollingerPoint]:
    """Calculate Bollinger Bands.

    Upper Band = SMA + (std_dev * standard_deviation)
    Middle Band = SMA
    Lower Band = SMA - (std_dev * standard_deviation)

    Args:
        bars: OHLC series, ascending by time
        period: Period for SMA and standard deviation (default: 20)
        std_dev: Number of standard deviations for bands (default: 2)

    Returns:
        Band points for bars[period - 1:], or [] with fewer than period bars

    Notes:
        - Population standard deviation (divides by period, not period - 1)
    """
    require_period(period)
    try:
        multiplier = to_decimal(std_dev)
    except InvalidOperation:
        raise InvalidParameterError(f"std_dev must be a number, got {std_dev!r}") from None
    if not multiplier.is_finite() or multiplier < 0:
        raise InvalidParameterError(f"std_dev must be a finite number >= 0, got {std_dev!r}")

    if len(bars) < period:
        return []

    close_values = closes(bars)
    result = []

    for i in range(period - 1, len(bars)):
        window = close_values[i - period + 1:i + 1]
        middle = mean(window)
        variance = sum(((x - middle) ** 2 for x in window), Decimal(0)) / period
        width = multiplier * variance.sqrt()

        result.append(BollingerPoint(
            time=bars[i].time,
            upper=middle + width,
            middle=middle,
            lower=middle - width,
        ))

    return result
