"""Technical indicators engine for chart data.

This package computes classic technical-analysis indicators over an OHLC
series using Decimal arithmetic. Every calculator is a pure function that
takes a list of OHLCBar and returns time-stamped points aligned with the
tail of the input; a series too short for the indicator yields [].

Indicators:
    - RSI: Relative Strength Index using Wilder's smoothing
    - MACD: Moving Average Convergence Divergence (flat-seed EMA)
    - Stochastic: Slow Stochastic Oscillator (%K and %D)
    - Bollinger Bands: Volatility bands using population standard deviation
    - ATR: Average True Range using Wilder's smoothing
    - ADX: Average Directional Index
    - OBV: On-Balance Volume
    - CCI: Commodity Channel Index
    - MFI: Money Flow Index
    - Moving Averages: SMA overlays, EMA and Wilder primitives

Example:
    >>> from domain.indicators import OHLCBar, compute
    >>>
    >>> bars = [OHLCBar(f"2024-01-{d:02d}", c, c + 1, c - 1, c, 1000)
    ...         for d, c in enumerate(range(100, 120), start=1)]
    >>> compute(bars, "rsi", {"period": 14})["rsi"][-1].value
    Decimal('100')
"""

from domain.indicators.adx import adx, directional_movement
from domain.indicators.atr import atr, true_range
from domain.indicators.base import (
    BollingerPoint,
    IndicatorError,
    IndicatorPoint,
    InvalidParameterError,
    InvalidSeriesError,
    MACDPoint,
    OHLCBar,
    ScalarPoint,
    StochasticPoint,
    UnsupportedIndicatorError,
    quantize,
    to_decimal,
    validate_series,
)
from domain.indicators.bollinger import bollinger_bands
from domain.indicators.dispatcher import (
    INDICATORS,
    IndicatorResult,
    IndicatorSpec,
    compute,
    min_bars,
    parse_kind,
    resolve_params,
    warmup,
)
from domain.indicators.macd import macd
from domain.indicators.momentum import cci
from domain.indicators.moving_averages import (
    DEFAULT_OVERLAY_PERIODS,
    ema,
    flat_seed_ema,
    moving_average_overlay,
    sma,
    wilder,
)
from domain.indicators.obv import obv
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import raw_k, stochastic
from domain.indicators.volume import mfi

__all__ = [
    # Base types
    "OHLCBar",
    "ScalarPoint",
    "MACDPoint",
    "StochasticPoint",
    "BollingerPoint",
    "IndicatorPoint",
    "IndicatorResult",
    # Errors
    "IndicatorError",
    "UnsupportedIndicatorError",
    "InvalidParameterError",
    "InvalidSeriesError",
    # Indicators
    "rsi",
    "macd",
    "stochastic",
    "bollinger_bands",
    "atr",
    "adx",
    "obv",
    "cci",
    "mfi",
    # Primitives
    "sma",
    "ema",
    "flat_seed_ema",
    "wilder",
    "true_range",
    "directional_movement",
    "raw_k",
    "moving_average_overlay",
    "DEFAULT_OVERLAY_PERIODS",
    # Dispatch
    "INDICATORS",
    "IndicatorSpec",
    "compute",
    "parse_kind",
    "resolve_params",
    "warmup",
    "min_bars",
    # Utilities
    "quantize",
    "to_decimal",
    "validate_series",
]
