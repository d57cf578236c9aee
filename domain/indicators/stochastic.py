"""Stochastic Oscillator indicators."""

from decimal import Decimal
from typing import Sequence

from domain.indicators.base import HUNDRED, OHLCBar, StochasticPoint, require_period
from domain.indicators.moving_averages import mean

FLAT_RANGE_K = Decimal(50)


def raw_k(bars: Sequence[OHLCBar], k_period: int = 14) -> list[Decimal]:
    """Calculate fast %K for every full k_period window.

    Returns:
        len(bars) - k_period + 1 values; value j belongs to bar j + k_period - 1
    """
    require_period(k_period, "k_period")
    values = []

    for i in range(k_period - 1, len(bars)):
        window = bars[i - k_period + 1:i + 1]
        highest_high = max(bar.high for bar in window)
        lowest_low = min(bar.low for bar in window)

        # WHY: Prevent division by zero in flat markets
        if highest_high == lowest_low:
            values.append(FLAT_RANGE_K)
        else:
            values.append((bars[i].close - lowest_low) / (highest_high - lowest_low) * HUNDRED)

    return values


def stochastic(
    bars: Sequence[OHLCBar],
    k_period: int = 14,
    d_period: int = 3,
) -> list[StochasticPoint]:
    """Calculate Slow Stochastic (%K smoothed once, %D smoothed twice).

    Slow %K = SMA(raw %K, d_period)
    Slow %D = SMA(Slow %K, d_period)

    Args:
        bars: OHLC series, ascending by time
        k_period: Lookback period for raw %K (default: 14)
        d_period: Smoothing period for both %K and %D (default: 3)

    Returns:
        Points for bars[k_period + d_period - 2:], or [] with fewer than
        k_period + d_period bars

    Notes:
        - The smoothed %K series used for %D starts with partial-window
          means, so the first emitted point already has a %D
        - Values are on a 0-100 scale; a flat window gives %K = 50
    """
    require_period(k_period, "k_period")
    require_period(d_period, "d_period")
    if len(bars) < k_period + d_period:
        return []

    fast_k = raw_k(bars, k_period)

    smoothed_k = [
        mean(fast_k[max(0, j - d_period + 1):j + 1])
        for j in range(len(fast_k))
    ]

    result = []
    for i in range(d_period - 1, len(fast_k)):
        slow_k = smoothed_k[i]
        slow_d = mean(smoothed_k[i - d_period + 1:i + 1])
        result.append(StochasticPoint(
            time=bars[i + k_period - 1].time,
            slow_k=slow_k,
            slow_d=slow_d,
        ))

    return result
