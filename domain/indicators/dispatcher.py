"""Indicator dispatch table.

Maps an IndicatorKind to its calculator, default parameters and warm-up
rules. There is no state here: every call reads its input and builds a
fresh result.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from domain.enums import IndicatorKind
from domain.indicators.adx import adx
from domain.indicators.atr import atr
from domain.indicators.base import (
    IndicatorPoint,
    InvalidParameterError,
    OHLCBar,
    UnsupportedIndicatorError,
    round_point,
    validate_series,
)
from domain.indicators.bollinger import bollinger_bands
from domain.indicators.macd import macd
from domain.indicators.momentum import cci
from domain.indicators.obv import obv
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import stochastic
from domain.indicators.volume import mfi

IndicatorResult = dict[str, list[IndicatorPoint]]


@dataclass(frozen=True)
class IndicatorSpec:
    """Calculator plus the rules describing its output alignment.

    Attributes:
        kind: Indicator this entry serves
        calculator: Pure function (bars, **params) -> list of points
        defaults: Parameter names and their default values
        warmup: Leading bars without an output point
        min_bars: Shortest series the calculator accepts; anything shorter
            yields []
    """
    kind: IndicatorKind
    calculator: Callable[..., list[IndicatorPoint]]
    defaults: Mapping[str, Any] = field(default_factory=dict)
    warmup: Callable[[Mapping[str, Any]], int] = lambda p: 0
    min_bars: Callable[[Mapping[str, Any]], int] = lambda p: 0


INDICATORS: dict[IndicatorKind, IndicatorSpec] = {
    IndicatorKind.RSI: IndicatorSpec(
        kind=IndicatorKind.RSI,
        calculator=rsi,
        defaults={"period": 14},
        warmup=lambda p: p["period"],
        min_bars=lambda p: p["period"] + 1,
    ),
    IndicatorKind.MACD: IndicatorSpec(
        kind=IndicatorKind.MACD,
        calculator=macd,
        defaults={"fast": 12, "slow": 26, "signal": 9, "legacy_offset": True},
        warmup=lambda p: p["slow"] + p["signal"] - 2,
        min_bars=lambda p: p["slow"],
    ),
    IndicatorKind.STOCHASTIC: IndicatorSpec(
        kind=IndicatorKind.STOCHASTIC,
        calculator=stochastic,
        defaults={"k_period": 14, "d_period": 3},
        warmup=lambda p: p["k_period"] + p["d_period"] - 2,
        min_bars=lambda p: p["k_period"] + p["d_period"],
    ),
    IndicatorKind.BOLLINGER: IndicatorSpec(
        kind=IndicatorKind.BOLLINGER,
        calculator=bollinger_bands,
        defaults={"period": 20, "std_dev": 2},
        warmup=lambda p: p["period"] - 1,
        min_bars=lambda p: p["period"],
    ),
    IndicatorKind.ADX: IndicatorSpec(
        kind=IndicatorKind.ADX,
        calculator=adx,
        defaults={"period": 14},
        warmup=lambda p: 2 * p["period"] - 1,
        min_bars=lambda p: 2 * p["period"],
    ),
    IndicatorKind.CCI: IndicatorSpec(
        kind=IndicatorKind.CCI,
        calculator=cci,
        defaults={"period": 20},
        warmup=lambda p: p["period"] - 1,
        min_bars=lambda p: p["period"],
    ),
    IndicatorKind.MFI: IndicatorSpec(
        kind=IndicatorKind.MFI,
        calculator=mfi,
        defaults={"period": 14},
        warmup=lambda p: p["period"],
        min_bars=lambda p: p["period"] + 1,
    ),
    IndicatorKind.OBV: IndicatorSpec(
        kind=IndicatorKind.OBV,
        calculator=obv,
        min_bars=lambda p: 2,
    ),
    IndicatorKind.ATR: IndicatorSpec(
        kind=IndicatorKind.ATR,
        calculator=atr,
        defaults={"period": 14},
        warmup=lambda p: p["period"],
        min_bars=lambda p: p["period"] + 1,
    ),
}


def parse_kind(kind: IndicatorKind | str) -> IndicatorKind:
    """Resolve an indicator name.

    Raises:
        UnsupportedIndicatorError: If the name is not a known kind
    """
    if isinstance(kind, IndicatorKind):
        return kind
    try:
        return IndicatorKind(kind)
    except ValueError:
        raise UnsupportedIndicatorError(kind) from None


def get_spec(kind: IndicatorKind | str) -> IndicatorSpec | None:
    """Return the table entry for kind (None for IndicatorKind.NONE)."""
    kind = parse_kind(kind)
    if kind is IndicatorKind.NONE:
        return None
    return INDICATORS[kind]


def resolve_params(
    kind: IndicatorKind | str,
    params: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge caller parameters over the indicator defaults.

    Raises:
        InvalidParameterError: If a parameter name is not accepted by the
            indicator
    """
    spec = get_spec(kind)
    params = dict(params or {})
    if spec is None:
        if params:
            raise InvalidParameterError(f"indicator 'none' takes no parameters, got {sorted(params)}")
        return {}

    unknown = set(params) - set(spec.defaults)
    if unknown:
        raise InvalidParameterError(
            f"unknown parameter(s) for {spec.kind.value}: {', '.join(sorted(unknown))}"
        )
    return {**spec.defaults, **params}


def warmup(kind: IndicatorKind | str, params: Mapping[str, Any] | None = None) -> int:
    """Number of leading bars that never receive an output point."""
    spec = get_spec(kind)
    if spec is None:
        return 0
    return spec.warmup(resolve_params(kind, params))


def min_bars(kind: IndicatorKind | str, params: Mapping[str, Any] | None = None) -> int:
    """Shortest input the calculator accepts (MACD still needs its full warm-up)."""
    spec = get_spec(kind)
    if spec is None:
        return 0
    return spec.min_bars(resolve_params(kind, params))


def compute(
    bars: Sequence[OHLCBar],
    kind: IndicatorKind | str,
    params: Mapping[str, Any] | None = None,
    *,
    places: int | None = None,
    validate: bool = False,
) -> IndicatorResult:
    """Compute one indicator and package it under its name.

    Args:
        bars: OHLC series, ascending by time
        kind: Indicator to compute ("none" yields {})
        params: Overrides for the indicator's default parameters
        places: Round every value half-up to this many decimals
        validate: Check OHLC invariants before computing

    Returns:
        {kind.value: points}, where points may be empty for short input

    Raises:
        UnsupportedIndicatorError: Unknown kind
        InvalidParameterError: Unknown or unsatisfiable parameters
        InvalidSeriesError: validate=True and the series is malformed

    Example:
        >>> compute(bars, "rsi", {"period": 3}, places=2)
        {'rsi': [ScalarPoint(time='2024-01-05', value=Decimal('100.00')), ...]}
    """
    spec = get_spec(kind)
    if spec is None:
        return {}

    resolved = resolve_params(spec.kind, params)
    if validate:
        validate_series(bars)

    points = spec.calculator(bars, **resolved)
    if places is not None:
        points = [round_point(point, places) for point in points]

    return {spec.kind.value: points}
