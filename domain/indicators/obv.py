"""On-Balance Volume (OBV) indicator."""

from decimal import Decimal
from typing import Sequence

from domain.indicators.base import OHLCBar, ScalarPoint


def obv(bars: Sequence[OHLCBar]) -> list[ScalarPoint]:
    """Calculate On-Balance Volume.

    OBV is a cumulative indicator that adds volume on up bars
    and subtracts volume on down bars.

    Args:
        bars: OHLC series, ascending by time

    Returns:
        One point per bar, starting with 0 at the first bar; [] for fewer
        than two bars

    Example:
        >>> [p.value for p in obv(bars)]  # closes 10, 11, 9; volumes 100, 50, 30
        [Decimal('0'), Decimal('50'), Decimal('20')]
    """
    if len(bars) < 2:
        return []

    cumulative = Decimal(0)
    result = [ScalarPoint(time=bars[0].time, value=cumulative)]

    for prev, bar in zip(bars, bars[1:]):
        if bar.close > prev.close:
            cumulative += bar.volume
        elif bar.close < prev.close:
            cumulative -= bar.volume
        # If equal, cumulative stays the same

        result.append(ScalarPoint(time=bar.time, value=cumulative))

    return result
