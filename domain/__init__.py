from .enums import IndicatorKind, Market, ChartRange, CHART_RANGE_ALIASES
from .indicators import (
    OHLCBar,
    ScalarPoint,
    MACDPoint,
    StochasticPoint,
    BollingerPoint,
    IndicatorPoint,
    IndicatorResult,
    IndicatorError,
    UnsupportedIndicatorError,
    InvalidParameterError,
    InvalidSeriesError,
    compute,
    warmup,
    min_bars,
    validate_series,
)
from .chart import (
    ChartRequest,
    ChartData,
    PricePoint,
    build_chart,
    normalize_request,
    normalize_rows,
    parse_range,
    parse_market,
    parse_indicator,
    start_date_for_range,
)

__all__ = [
    # Enums
    "IndicatorKind",
    "Market",
    "ChartRange",
    "CHART_RANGE_ALIASES",
    # Series and results
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
    # Engine
    "compute",
    "warmup",
    "min_bars",
    "validate_series",
    # Chart assembly
    "ChartRequest",
    "ChartData",
    "PricePoint",
    "build_chart",
    "normalize_request",
    "normalize_rows",
    "parse_range",
    "parse_market",
    "parse_indicator",
    "start_date_for_range",
]
