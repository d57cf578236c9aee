"""
JSON API response types.

Structured chart responses for web API consumption.
Can be used with FastAPI, Flask, or any web framework.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from domain import (
    BollingerPoint,
    ChartData,
    IndicatorPoint,
    MACDPoint,
    OHLCBar,
    PricePoint,
    ScalarPoint,
    StochasticPoint,
)


# ============================================================================
# Response Models
# ============================================================================

class PricePointResponse(BaseModel):
    """Line-chart point."""
    time: str | int
    price: float


class OHLCBarResponse(BaseModel):
    """Candlestick bar."""
    time: str | int
    open: float
    high: float
    low: float
    close: float
    volume: int


class ScalarPointResponse(BaseModel):
    """Single-value indicator point (RSI, ATR, OBV, CCI, MFI, ADX, MA)."""
    time: str | int
    value: float


class MACDPointResponse(BaseModel):
    """MACD point."""
    time: str | int
    macd: float
    signal: float
    histogram: float


class StochasticPointResponse(BaseModel):
    """Slow stochastic point, keyed the way chart clients read it."""
    time: str | int
    slowk: float
    slowd: float


class BollingerPointResponse(BaseModel):
    """Bollinger band point."""
    time: str | int
    upper: float
    middle: float
    lower: float


IndicatorPointResponse = (
    MACDPointResponse
    | StochasticPointResponse
    | BollingerPointResponse
    | ScalarPointResponse
)


class ChartResponse(BaseModel):
    """Full chart API response."""
    data: list[PricePointResponse]
    ohlc: list[OHLCBarResponse]
    indicators: dict[str, list[IndicatorPointResponse]] = Field(default_factory=dict)
    overlays: dict[str, list[ScalarPointResponse]] | None = None


# ============================================================================
# Conversion Functions
# ============================================================================

def _num(value: Decimal | float | int) -> float:
    return float(value)


def _price_to_response(point: PricePoint) -> PricePointResponse:
    return PricePointResponse(time=point.time, price=_num(point.price))


def _bar_to_response(bar: OHLCBar) -> OHLCBarResponse:
    """Convert OHLCBar to API response."""
    return OHLCBarResponse(
        time=bar.time,
        open=_num(bar.open),
        high=_num(bar.high),
        low=_num(bar.low),
        close=_num(bar.close),
        volume=int(bar.volume),
    )


def _point_to_response(point: IndicatorPoint) -> IndicatorPointResponse:
    """Convert an indicator point to its API shape."""
    if isinstance(point, MACDPoint):
        return MACDPointResponse(
            time=point.time,
            macd=_num(point.macd),
            signal=_num(point.signal),
            histogram=_num(point.histogram),
        )
    if isinstance(point, StochasticPoint):
        return StochasticPointResponse(
            time=point.time,
            slowk=_num(point.slow_k),
            slowd=_num(point.slow_d),
        )
    if isinstance(point, BollingerPoint):
        return BollingerPointResponse(
            time=point.time,
            upper=_num(point.upper),
            middle=_num(point.middle),
            lower=_num(point.lower),
        )
    if isinstance(point, ScalarPoint):
        return ScalarPointResponse(time=point.time, value=_num(point.value))
    raise TypeError(f"Unsupported indicator point: {type(point).__name__}")


def to_api_response(chart: ChartData) -> ChartResponse:
    """
    Convert ChartData to API response.

    Args:
        chart: Chart payload from build_chart()

    Returns:
        Structured API response
    """
    overlays = None
    if chart.overlays:
        overlays = {
            name: [ScalarPointResponse(time=p.time, value=_num(p.value)) for p in points]
            for name, points in chart.overlays.items()
        }

    return ChartResponse(
        data=[_price_to_response(p) for p in chart.data],
        ohlc=[_bar_to_response(b) for b in chart.ohlc],
        indicators={
            name: [_point_to_response(p) for p in points]
            for name, points in chart.indicators.items()
        },
        overlays=overlays,
    )


def to_json(chart: ChartData) -> dict[str, Any]:
    """
    Convert ChartData to JSON-serializable dict.

    The `overlays` key is omitted when no overlays were requested.
    """
    response = to_api_response(chart)
    return response.model_dump(mode="json", exclude_none=True)


def indicators_to_json(indicators: dict[str, list[IndicatorPoint]]) -> dict[str, Any]:
    """Convert a bare dispatcher result to JSON-serializable dict."""
    return {
        name: [_point_to_response(p).model_dump(mode="json") for p in points]
        for name, points in indicators.items()
    }
