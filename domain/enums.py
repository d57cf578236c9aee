from enum import Enum


class IndicatorKind(str, Enum):
    """Indicator selectable on a chart."""
    NONE = "none"
    RSI = "rsi"
    MACD = "macd"
    STOCHASTIC = "stochastic"
    BOLLINGER = "bollinger"
    ADX = "adx"
    CCI = "cci"
    MFI = "mfi"
    OBV = "obv"
    ATR = "atr"


class Market(str, Enum):
    """Market a symbol is listed on."""
    KR = "KR"
    US = "US"


class ChartRange(str, Enum):
    """Lookback window for chart data."""
    WEEK = "1w"
    MONTH = "1m"
    QUARTER = "3m"
    HALF_YEAR = "6m"
    YEAR = "1y"


# Labels used by the Korean web client
CHART_RANGE_ALIASES = {
    "1주": ChartRange.WEEK,
    "1개월": ChartRange.MONTH,
    "3개월": ChartRange.QUARTER,
    "6개월": ChartRange.HALF_YEAR,
    "1년": ChartRange.YEAR,
}
