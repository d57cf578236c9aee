"""Moving averages and smoothing primitives."""

from decimal import Decimal
from typing import Iterable, Sequence

from domain.indicators.base import OHLCBar, ScalarPoint, closes, require_period

DEFAULT_OVERLAY_PERIODS = (5, 20, 60)


def mean(values: Sequence[Decimal]) -> Decimal:
    return sum(values, Decimal(0)) / len(values)


def sma(values: Sequence[Decimal], period: int) -> list[Decimal | None]:
    """Calculate Simple Moving Average.

    Args:
        values: List of values to calculate SMA over
        period: Number of periods for the moving average

    Returns:
        List the same length as values, with None inside the warm-up window

    Example:
        >>> sma([Decimal(10), Decimal(11), Decimal(12), Decimal(13)], 3)
        [None, None, Decimal('11'), Decimal('12')]
    """
    require_period(period)
    result: list[Decimal | None] = [None] * min(period - 1, len(values))

    for i in range(period - 1, len(values)):
        result.append(mean(values[i - period + 1:i + 1]))

    return result


def ema(values: Sequence[Decimal], period: int) -> list[Decimal]:
    """Calculate a flat-seed Exponential Moving Average.

    The seed is the plain mean of the first `period` values and is repeated
    for indices 0..period-2 instead of leaving them undefined. MACD slices
    its signal input relative to this layout, so the warm-up is part of the
    contract.

    Args:
        values: List of values to calculate EMA over
        period: Number of periods for the moving average

    Returns:
        List of EMA values, same length as values

    Example:
        >>> ema([Decimal(2), Decimal(4), Decimal(6), Decimal(8)], 3)
        [Decimal('4'), Decimal('4'), Decimal('5.0'), Decimal('6.50')]

    Notes:
        - alpha = 2 / (period + 1)
        - With fewer than `period` values the seed is the mean of what is there
    """
    require_period(period)
    if not values:
        return []

    alpha = Decimal(2) / Decimal(period + 1)
    prev = mean(values[:period])
    result = []

    for i, value in enumerate(values):
        if i >= period - 1:
            prev = (value - prev) * alpha + prev
        result.append(prev)

    return result


# Named alias for the non-standard warm-up behaviour above.
flat_seed_ema = ema


def wilder(samples: Sequence[Decimal], period: int) -> list[Decimal]:
    """Apply Wilder's smoothing (RMA).

    Returns:
        len(samples) - period + 1 values; empty if there are fewer than
        `period` samples

    Notes:
        - First value is the simple average of the first `period` samples
        - Then: avg = (prev_avg * (period - 1) + sample) / period
    """
    require_period(period)
    if len(samples) < period:
        return []

    smoothed = mean(samples[:period])
    result = [smoothed]

    for sample in samples[period:]:
        smoothed = (smoothed * (period - 1) + sample) / period
        result.append(smoothed)

    return result


def moving_average_overlay(
    bars: Sequence[OHLCBar],
    periods: Iterable[int] = DEFAULT_OVERLAY_PERIODS,
) -> dict[str, list[ScalarPoint]]:
    """Build close-price SMA overlays keyed "ma<period>".

    Warm-up entries are dropped rather than emitted as nulls.

    Example:
        >>> overlay = moving_average_overlay(bars, periods=(5, 20))
        >>> sorted(overlay)
        ['ma20', 'ma5']
    """
    close_values = closes(bars)
    overlay = {}

    for period in periods:
        averages = sma(close_values, period)
        overlay[f"ma{period}"] = [
            ScalarPoint(time=bar.time, value=avg)
            for bar, avg in zip(bars, averages)
            if avg is not None
        ]

    return overlay
