"""Average Directional Index (ADX) indicator."""

from decimal import Decimal
from typing import Sequence

from domain.indicators.atr import true_range
from domain.indicators.base import HUNDRED, ZERO, OHLCBar, ScalarPoint, require_period
from domain.indicators.moving_averages import wilder


def _running_sum_smooth(values: Sequence[Decimal], period: int) -> list[Decimal]:
    """Wilder's running-sum smoothing used for TR and +DM/-DM.

    Internal helper for ADX calculation. Seeded with the sum (not the mean)
    of the first `period` values, then: smooth = smooth - smooth / period + x

    Returns:
        len(values) - period + 1 smoothed sums
    """
    smoothed = sum(values[:period], Decimal(0))
    result = [smoothed]

    for value in values[period:]:
        smoothed = smoothed - smoothed / period + value
        result.append(smoothed)

    return result


def directional_movement(bars: Sequence[OHLCBar]) -> tuple[list[Decimal], list[Decimal]]:
    """Calculate +DM and -DM for bars[1:].

    Returns:
        Tuple of (plus_dm, minus_dm), each len(bars) - 1 long
    """
    plus_dm = []
    minus_dm = []

    for prev, bar in zip(bars, bars[1:]):
        up_move = bar.high - prev.high
        down_move = prev.low - bar.low

        # WHY: Only the dominant direction counts, and only if positive
        plus_dm.append(up_move if up_move > down_move and up_move > 0 else ZERO)
        minus_dm.append(down_move if down_move > up_move and down_move > 0 else ZERO)

    return plus_dm, minus_dm


def adx(bars: Sequence[OHLCBar], period: int = 14) -> list[ScalarPoint]:
    """Calculate Average Directional Index.

    ADX measures trend strength (0-100 scale).

    Args:
        bars: OHLC series, ascending by time
        period: ADX period (default: 14)

    Returns:
        ADX points for bars[2 * period - 1:], or [] with fewer than
        2 * period bars

    Notes:
        - +DI = 100 * smoothed +DM / smoothed TR (0 when smoothed TR is 0)
        - DX = 100 * |+DI - -DI| / (+DI + -DI) (0 when both DI are 0)
        - ADX is the mean-seeded Wilder average of DX
    """
    require_period(period)
    if len(bars) < 2 * period:
        return []

    plus_dm, minus_dm = directional_movement(bars)
    smooth_tr = _running_sum_smooth(true_range(bars), period)
    smooth_plus = _running_sum_smooth(plus_dm, period)
    smooth_minus = _running_sum_smooth(minus_dm, period)

    dx = []
    for tr, plus, minus in zip(smooth_tr, smooth_plus, smooth_minus):
        if tr == 0:
            dx.append(ZERO)
            continue

        plus_di = HUNDRED * plus / tr
        minus_di = HUNDRED * minus / tr
        di_sum = plus_di + minus_di

        if di_sum == 0:
            dx.append(ZERO)
        else:
            dx.append(HUNDRED * abs(plus_di - minus_di) / di_sum)

    # dx[m] belongs to bar period + m
    adx_values = wilder(dx, period)
    return [
        ScalarPoint(time=bar.time, value=value)
        for bar, value in zip(bars[2 * period - 1:], adx_values)
    ]
