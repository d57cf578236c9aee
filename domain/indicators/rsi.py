"""Relative Strength Index (RSI) indicator."""

from typing import Sequence

from domain.indicators.base import HUNDRED, ZERO, OHLCBar, ScalarPoint, require_period
from domain.indicators.moving_averages import wilder


def rsi(bars: Sequence[OHLCBar], period: int = 14) -> list[ScalarPoint]:
    """Calculate RSI using Wilder's smoothing method.

    Args:
        bars: OHLC series, ascending by time
        period: RSI period (default: 14)

    Returns:
        RSI points (0-100) for bars[period:], or [] with fewer than
        period + 1 bars

    Notes:
        - Gains and losses are Wilder-smoothed separately
        - avg_loss == 0 yields 100 (including a perfectly flat series)
    """
    require_period(period)
    if len(bars) < period + 1:
        return []

    gains = []
    losses = []
    for prev, bar in zip(bars, bars[1:]):
        change = bar.close - prev.close
        gains.append(max(change, ZERO))
        losses.append(max(-change, ZERO))

    avg_gains = wilder(gains, period)
    avg_losses = wilder(losses, period)

    result = []
    for bar, avg_gain, avg_loss in zip(bars[period:], avg_gains, avg_losses):
        if avg_loss == 0:
            value = HUNDRED
        else:
            rs = avg_gain / avg_loss
            value = HUNDRED - HUNDRED / (1 + rs)
        result.append(ScalarPoint(time=bar.time, value=value))

    return result
