"""Base types for the indicator engine: price bars, result points and errors."""

from dataclasses import dataclass, fields, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence, Union

Number = Union[Decimal, float, int, str]
BarTime = Union[str, int]

ZERO = Decimal(0)
HUNDRED = Decimal(100)


class IndicatorError(ValueError):
    """Base class for engine contract errors."""


class UnsupportedIndicatorError(IndicatorError):
    """Raised when an unknown indicator kind is requested."""

    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unsupported indicator: {kind!r}")


class InvalidParameterError(IndicatorError):
    """Raised for parameters no series could satisfy (e.g. period <= 0)."""


class InvalidSeriesError(IndicatorError):
    """Raised when a series breaks the OHLC invariants."""

    def __init__(self, message: str, index: int | None = None):
        self.index = index
        if index is not None:
            message = f"bar {index}: {message}"
        super().__init__(message)


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal.

    Floats go through their string form so 44.25 becomes Decimal("44.25")
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


@dataclass(frozen=True)
class OHLCBar:
    """One period of price data.

    Attributes:
        time: ISO date string or epoch seconds; strictly increasing in a series
        open, high, low, close: Prices (coerced to Decimal)
        volume: Traded volume (non-negative integer)

    Example:
        >>> bar = OHLCBar("2024-01-02", 100, 102.5, 99, 101, 1_000_000)
        >>> bar.high
        Decimal('102.5')
    """
    time: BarTime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int = 0

    def __post_init__(self) -> None:
        for name in ("open", "high", "low", "close"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        object.__setattr__(self, "volume", int(self.volume))

    @property
    def typical_price(self) -> Decimal:
        return (self.high + self.low + self.close) / 3


@dataclass(frozen=True)
class ScalarPoint:
    """Single-valued indicator point (RSI, ATR, OBV, CCI, MFI, ADX, SMA)."""
    time: BarTime
    value: Decimal


@dataclass(frozen=True)
class MACDPoint:
    time: BarTime
    macd: Decimal
    signal: Decimal
    histogram: Decimal


@dataclass(frozen=True)
class StochasticPoint:
    time: BarTime
    slow_k: Decimal
    slow_d: Decimal


@dataclass(frozen=True)
class BollingerPoint:
    time: BarTime
    upper: Decimal
    middle: Decimal
    lower: Decimal


IndicatorPoint = Union[ScalarPoint, MACDPoint, StochasticPoint, BollingerPoint]


def closes(bars: Sequence[OHLCBar]) -> list[Decimal]:
    return [bar.close for bar in bars]


def highs(bars: Sequence[OHLCBar]) -> list[Decimal]:
    return [bar.high for bar in bars]


def lows(bars: Sequence[OHLCBar]) -> list[Decimal]:
    return [bar.low for bar in bars]


def require_period(value: int, name: str = "period") -> int:
    """Reject periods that can never be satisfied."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    return value


def validate_series(bars: Sequence[OHLCBar]) -> None:
    """Check OHLC invariants across a series.

    Calculators trust their input; this is meant for ingestion boundaries
    and debug runs.

    Raises:
        InvalidSeriesError: On the first offending bar
    """
    previous_time = None
    for i, bar in enumerate(bars):
        if bar.high < max(bar.open, bar.close):
            raise InvalidSeriesError(f"high {bar.high} below open/close", index=i)
        if bar.low > min(bar.open, bar.close):
            raise InvalidSeriesError(f"low {bar.low} above open/close", index=i)
        if bar.volume < 0:
            raise InvalidSeriesError(f"negative volume {bar.volume}", index=i)
        if previous_time is not None:
            if type(bar.time) is not type(previous_time):
                raise InvalidSeriesError("mixed time types", index=i)
            if bar.time <= previous_time:
                raise InvalidSeriesError(
                    f"time {bar.time!r} not after {previous_time!r}", index=i
                )
        previous_time = bar.time


def quantize(value: Decimal, places: int) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def round_point(point: IndicatorPoint, places: int) -> IndicatorPoint:
    """Return a copy of point with every Decimal field rounded."""
    changes = {
        f.name: quantize(getattr(point, f.name), places)
        for f in fields(point)
        if isinstance(getattr(point, f.name), Decimal)
    }
    return replace(point, **changes)
