"""MACD (Moving Average Convergence Divergence) indicator."""

from typing import Sequence

from domain.indicators.base import InvalidParameterError, MACDPoint, OHLCBar, closes, require_period
from domain.indicators.moving_averages import ema


def macd(
    bars: Sequence[OHLCBar],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
    legacy_offset: bool = True,
) -> list[MACDPoint]:
    """Calculate MACD indicator.

    MACD Line = EMA(fast) - EMA(slow)
    Signal Line = EMA(MACD Line[slow-1:], signal periods)
    Histogram = MACD Line - Signal Line

    Args:
        bars: OHLC series, ascending by time
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)
        signal: Signal line EMA period (default: 9)
        legacy_offset: Pair bar (slow + signal - 2 + k) with signal value k,
            as the existing charts do. When False the signal value is taken
            at the same bar as the MACD value.

    Returns:
        MACD points from bar index slow + signal - 2 (33 with defaults);
        [] with fewer than `slow` bars

    Notes:
        - The signal EMA only sees the MACD tail starting at slow - 1, which
          drops the flat warm-up of the slow EMA
        - Both offsets emit the same number of points
    """
    require_period(fast, "fast")
    require_period(slow, "slow")
    require_period(signal, "signal")
    if fast >= slow:
        raise InvalidParameterError(f"fast ({fast}) must be less than slow ({slow})")

    if len(bars) < slow:
        return []

    close_values = closes(bars)
    fast_ema = ema(close_values, fast)
    slow_ema = ema(close_values, slow)
    macd_line = [f - s for f, s in zip(fast_ema, slow_ema)]

    tail_start = slow - 1
    signal_line = ema(macd_line[tail_start:], signal)

    start = slow + signal - 2
    result = []
    for i in range(start, len(bars)):
        signal_value = signal_line[i - start] if legacy_offset else signal_line[i - tail_start]
        result.append(MACDPoint(
            time=bars[i].time,
            macd=macd_line[i],
            signal=signal_value,
            histogram=macd_line[i] - signal_value,
        ))

    return result
