"""Momentum indicators."""

from decimal import Decimal
from typing import Sequence

from domain.indicators.base import ZERO, OHLCBar, ScalarPoint, require_period
from domain.indicators.moving_averages import mean

CCI_CONSTANT = Decimal("0.015")


def cci(bars: Sequence[OHLCBar], period: int = 20) -> list[ScalarPoint]:
    """Calculate Commodity Channel Index.

    CCI = (Typical Price - SMA of Typical Price) / (0.015 * Mean Deviation)
    Typical Price = (High + Low + Close) / 3

    Args:
        bars: OHLC series, ascending by time
        period: CCI period (default: 20)

    Returns:
        CCI points for bars[period - 1:], or [] with fewer than period bars

    Notes:
        - Oscillator with no bounded range (typically -200 to +200)
        - 0.015 constant ensures ~70-80% of values fall between -100 and +100
        - A window with constant typical price yields 0
    """
    require_period(period)
    if len(bars) < period:
        return []

    typical_prices = [bar.typical_price for bar in bars]
    result = []

    for i in range(period - 1, len(bars)):
        tp_window = typical_prices[i - period + 1:i + 1]
        sma_tp = mean(tp_window)
        mean_deviation = mean([abs(tp - sma_tp) for tp in tp_window])

        # WHY: Prevent division by zero
        if mean_deviation == 0:
            value = ZERO
        else:
            value = (typical_prices[i] - sma_tp) / (CCI_CONSTANT * mean_deviation)
        result.append(ScalarPoint(time=bars[i].time, value=value))

    return result
