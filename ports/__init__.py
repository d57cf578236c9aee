from .sources import (
    PriceHistorySource,
    IndicatorStore,
    AdapterError,
    RateLimitError,
    FetchError,
    ParseError,
    DataError,
    ValidationError,
    ErrorCode,
)

__all__ = [
    "PriceHistorySource",
    "IndicatorStore",
    "AdapterError",
    "RateLimitError",
    "FetchError",
    "ParseError",
    "DataError",
    "ValidationError",
    "ErrorCode",
]
