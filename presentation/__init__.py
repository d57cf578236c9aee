from .json_api import (
    ChartResponse,
    PricePointResponse,
    OHLCBarResponse,
    ScalarPointResponse,
    MACDPointResponse,
    StochasticPointResponse,
    BollingerPointResponse,
    to_api_response,
    to_json,
    indicators_to_json,
)

__all__ = [
    "ChartResponse",
    "PricePointResponse",
    "OHLCBarResponse",
    "ScalarPointResponse",
    "MACDPointResponse",
    "StochasticPointResponse",
    "BollingerPointResponse",
    "to_api_response",
    "to_json",
    "indicators_to_json",
]
