"""
Tests for chart assembly and request normalization.
"""

from datetime import date
from decimal import Decimal

import pytest

from domain import (
    ChartRange,
    IndicatorKind,
    Market,
    OHLCBar,
    ScalarPoint,
    build_chart,
    normalize_request,
    normalize_rows,
    parse_indicator,
    parse_market,
    parse_range,
    start_date_for_range,
)
from ports import ErrorCode, ValidationError


def rising_bars(n: int) -> list[OHLCBar]:
    return [
        OHLCBar(f"2024-03-{i + 1:02d}", 100 + i, 101 + i, 99 + i, 100 + i, 1_000 + i)
        for i in range(n)
    ]


class TestRequestNormalization:
    """Loosely-typed request values."""

    def test_defaults(self):
        request = normalize_request("aapl ")

        assert request.symbol == "AAPL"
        assert request.range is ChartRange.WEEK
        assert request.market is Market.KR
        assert request.indicator is IndicatorKind.NONE

    def test_valid_values(self):
        request = normalize_request("005930", "3m", "US", "macd")

        assert request.range is ChartRange.QUARTER
        assert request.market is Market.US
        assert request.indicator is IndicatorKind.MACD

    @pytest.mark.parametrize("label,expected", [
        ("1주", ChartRange.WEEK),
        ("1개월", ChartRange.MONTH),
        ("3개월", ChartRange.QUARTER),
        ("6개월", ChartRange.HALF_YEAR),
        ("1년", ChartRange.YEAR),
    ])
    def test_korean_range_labels(self, label, expected):
        assert parse_range(label) is expected

    def test_unknown_values_fall_back(self):
        assert parse_range("5y") is ChartRange.WEEK
        assert parse_range(None, ChartRange.YEAR) is ChartRange.YEAR
        assert parse_market("JP") is Market.KR
        assert parse_market("nope", Market.US) is Market.US
        assert parse_indicator("ichimoku") is IndicatorKind.NONE
        assert parse_indicator(None) is IndicatorKind.NONE

    def test_configured_defaults(self):
        request = normalize_request(
            "msft", "bogus", None,
            default_range=ChartRange.HALF_YEAR,
            default_market=Market.US,
        )
        assert request.range is ChartRange.HALF_YEAR
        assert request.market is Market.US

    @pytest.mark.parametrize("symbol", ["", "   ", None])
    def test_missing_symbol(self, symbol):
        with pytest.raises(ValidationError) as exc:
            normalize_request(symbol)
        assert exc.value.code == ErrorCode.VALIDATION_SYMBOL


class TestStartDate:
    """Range start dates."""

    def test_week(self):
        assert start_date_for_range(ChartRange.WEEK, date(2024, 3, 10)) == date(2024, 3, 3)

    def test_month(self):
        assert start_date_for_range(ChartRange.MONTH, date(2024, 5, 15)) == date(2024, 4, 15)

    def test_month_end_clamped(self):
        assert start_date_for_range(ChartRange.MONTH, date(2024, 3, 31)) == date(2024, 2, 29)
        assert start_date_for_range(ChartRange.QUARTER, date(2023, 5, 31)) == date(2023, 2, 28)

    def test_crosses_year(self):
        assert start_date_for_range(ChartRange.HALF_YEAR, date(2024, 2, 10)) == date(2023, 8, 10)
        assert start_date_for_range(ChartRange.YEAR, date(2024, 2, 29)) == date(2023, 2, 28)


class TestRowNormalization:
    """Raw rows into bars."""

    def test_missing_close_dropped(self):
        bars = normalize_rows([
            {"time": "2024-01-02", "open": 1, "high": 2, "low": 1, "close": 2, "volume": 10},
            {"time": "2024-01-03", "open": 1, "high": 2, "low": 1, "close": None, "volume": 10},
        ])
        assert [b.time for b in bars] == ["2024-01-02"]

    def test_missing_fields_back_filled(self):
        [bar] = normalize_rows([{"time": "2024-01-02", "close": "12.5", "volume": ""}])

        assert bar.open == bar.high == bar.low == Decimal("12.5")
        assert bar.volume == 0

    def test_fractional_volume_truncated(self):
        [bar] = normalize_rows([{"time": 1704153600, "close": 3, "volume": 10.9}])
        assert bar.volume == 10
        assert bar.time == 1704153600


class TestBuildChart:
    """Chart payload assembly."""

    def test_line_and_candles(self):
        bars = rising_bars(5)
        chart = build_chart(bars)

        assert [p.price for p in chart.data] == [b.close for b in bars]
        assert chart.ohlc == bars
        assert chart.indicators == {}
        assert chart.overlays == {}

    def test_computes_indicator(self):
        chart = build_chart(rising_bars(20), IndicatorKind.RSI, params={"period": 14})
        assert [p.value for p in chart.indicators["rsi"]] == [100] * 6

    def test_prefers_precomputed(self):
        stored = {"rsi": [ScalarPoint("2024-03-20", Decimal("55.5"))]}
        chart = build_chart(rising_bars(20), "rsi", precomputed=stored)
        assert chart.indicators == stored

    def test_empty_precomputed_falls_back(self):
        chart = build_chart(rising_bars(20), "rsi", precomputed={"rsi": []})
        assert len(chart.indicators["rsi"]) == 6

    def test_overlays_rounded(self):
        chart = build_chart(rising_bars(8), overlay_periods=(3,), places=2)

        assert list(chart.overlays) == ["ma3"]
        assert chart.overlays["ma3"][0].value == Decimal("101.00")
        assert len(chart.overlays["ma3"]) == 6

    def test_short_series_gives_empty_indicator(self):
        chart = build_chart(rising_bars(3), "adx")
        assert chart.indicators == {"adx": []}
