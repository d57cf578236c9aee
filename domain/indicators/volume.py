"""Volume-weighted oscillators."""

from decimal import Decimal
from typing import Sequence

from domain.indicators.base import HUNDRED, OHLCBar, ScalarPoint, require_period


def mfi(bars: Sequence[OHLCBar], period: int = 14) -> list[ScalarPoint]:
    """Calculate Money Flow Index.

    Money Flow = Typical Price * Volume
    MFI = 100 - 100 / (1 + positive flow / negative flow)

    Args:
        bars: OHLC series, ascending by time
        period: Number of flow comparisons per window (default: 14)

    Returns:
        MFI points (0-100) for bars[period:], or [] with fewer than
        period + 1 bars

    Notes:
        - A bar's flow is positive only when its typical price rose; an
          unchanged typical price counts as negative flow
        - No negative flow in the window yields 100
    """
    require_period(period)
    if len(bars) < period + 1:
        return []

    typical_prices = [bar.typical_price for bar in bars]
    money_flows = [tp * bar.volume for tp, bar in zip(typical_prices, bars)]
    result = []

    for i in range(period, len(bars)):
        positive_flow = Decimal(0)
        negative_flow = Decimal(0)

        for j in range(i - period + 1, i + 1):
            if typical_prices[j] > typical_prices[j - 1]:
                positive_flow += money_flows[j]
            else:
                negative_flow += money_flows[j]

        if negative_flow == 0:
            value = HUNDRED
        else:
            value = HUNDRED - HUNDRED / (1 + positive_flow / negative_flow)
        result.append(ScalarPoint(time=bars[i].time, value=value))

    return result
