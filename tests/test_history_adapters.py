"""
Tests for price-history adapters.

Yahoo calls are mocked; CSV files live in tmp_path.
"""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from adapters import CsvHistoryAdapter, RateLimiter, YahooHistoryAdapter, read_bars
from config import ChartlensConfig
from domain import Market
from ports import (
    DataError,
    ErrorCode,
    FetchError,
    ParseError,
    PriceHistorySource,
    RateLimitError,
    ValidationError,
)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def config():
    return ChartlensConfig()


@pytest.fixture
def history_frame():
    """Frame shaped like yfinance Ticker.history()."""
    index = pd.DatetimeIndex(
        ["2024-01-02", "2024-01-03", "2024-01-04"], tz="Asia/Seoul", name="Date"
    )
    return pd.DataFrame(
        {
            "Open": [100.0, 101.0, float("nan")],
            "High": [102.0, 103.5, 104.0],
            "Low": [99.0, 100.0, 101.0],
            "Close": [101.0, 103.0, 102.5],
            "Volume": [1000, 1500, 900],
        },
        index=index,
    )


@pytest.fixture
def price_csv(tmp_path):
    path = tmp_path / "AAPL.csv"
    path.write_text(
        "Date,Open,High,Low,Close,Volume\n"
        "2024-01-03,11,12,10,11.5,200\n"
        "2024-01-02,10,11,9,10.5,100\n"
        "2024-01-04,,,,12,\n"
        "2024-01-05,12,13,11,,300\n",
        encoding="utf-8",
    )
    return path


def mock_ticker(frame):
    ticker = MagicMock()
    ticker.history.return_value = frame
    return ticker


# ============================================================================
# Yahoo
# ============================================================================

class TestYahooHistoryAdapter:
    """Yahoo adapter with yfinance mocked."""

    def test_implements_port(self, config):
        assert isinstance(YahooHistoryAdapter(config), PriceHistorySource)

    def test_kr_symbols_get_suffix(self, config):
        adapter = YahooHistoryAdapter(config)

        assert adapter.yahoo_symbol("005930", Market.KR) == "005930.KS"
        assert adapter.yahoo_symbol("035720.KQ", Market.KR) == "035720.KQ"
        assert adapter.yahoo_symbol("AAPL", Market.US) == "AAPL"

    def test_rows_become_bars(self, config, history_frame):
        adapter = YahooHistoryAdapter(config)

        with patch("adapters.yahoo.yf.Ticker", return_value=mock_ticker(history_frame)) as ticker:
            bars = adapter.get_history("005930", date(2024, 1, 1), Market.KR)

        ticker.assert_called_once_with("005930.KS")
        assert [b.time for b in bars] == ["2024-01-02", "2024-01-03", "2024-01-04"]
        assert bars[1].high == Decimal("103.5")
        assert bars[1].volume == 1500
        # NaN open falls back to close
        assert bars[2].open == Decimal("102.5")

    def test_bars_before_start_dropped(self, config, history_frame):
        adapter = YahooHistoryAdapter(config)

        with patch("adapters.yahoo.yf.Ticker", return_value=mock_ticker(history_frame)):
            bars = adapter.get_history("AAPL", date(2024, 1, 3), Market.US)

        assert [b.time for b in bars] == ["2024-01-03", "2024-01-04"]

    def test_cache_hit(self, config, history_frame):
        adapter = YahooHistoryAdapter(config)
        ticker = mock_ticker(history_frame)

        with patch("adapters.yahoo.yf.Ticker", return_value=ticker):
            first = adapter.get_history("AAPL", date(2024, 1, 1), Market.US)
            second = adapter.get_history("aapl", date(2024, 1, 1), Market.US)

        assert first == second
        assert ticker.history.call_count == 1

    def test_cache_disabled(self, history_frame):
        adapter = YahooHistoryAdapter(ChartlensConfig(history={"cache_minutes": 0}))
        ticker = mock_ticker(history_frame)

        with patch("adapters.yahoo.yf.Ticker", return_value=ticker):
            adapter.get_history("AAPL", date(2024, 1, 1), Market.US)
            adapter.get_history("AAPL", date(2024, 1, 1), Market.US)

        assert ticker.history.call_count == 2

    def test_expired_entry_evicted_and_refetched(self, config, history_frame):
        adapter = YahooHistoryAdapter(config)
        ticker = mock_ticker(history_frame)

        with patch("adapters.yahoo.yf.Ticker", return_value=ticker):
            adapter.get_history("AAPL", date(2024, 1, 1), Market.US)
            (key, entry), = adapter._cache.items()
            entry.created_at -= config.history.cache_ttl + timedelta(seconds=1)

            assert adapter._get_cached(key) is None
            assert key not in adapter._cache

            adapter.get_history("AAPL", date(2024, 1, 1), Market.US)

        assert ticker.history.call_count == 2
        assert adapter._cache[key].is_valid()

    def test_empty_history(self, config):
        adapter = YahooHistoryAdapter(config)

        with patch("adapters.yahoo.yf.Ticker", return_value=mock_ticker(pd.DataFrame())):
            with pytest.raises(DataError) as exc:
                adapter.get_history("ZZZZ", date(2024, 1, 1), Market.US)

        assert exc.value.code == ErrorCode.DATA_EMPTY

    def test_missing_close_column(self, config, history_frame):
        adapter = YahooHistoryAdapter(config)
        frame = history_frame.drop(columns=["Close"])

        with patch("adapters.yahoo.yf.Ticker", return_value=mock_ticker(frame)):
            with pytest.raises(DataError) as exc:
                adapter.get_history("AAPL", date(2024, 1, 1), Market.US)

        assert exc.value.code == ErrorCode.DATA_MISSING

    def test_upstream_exception_wrapped(self, config):
        adapter = YahooHistoryAdapter(config)
        ticker = MagicMock()
        ticker.history.side_effect = ConnectionError("connection reset by peer")

        with patch("adapters.yahoo.yf.Ticker", return_value=ticker):
            with pytest.raises(FetchError) as exc:
                adapter.get_history("AAPL", date(2024, 1, 1), Market.US)

        assert exc.value.code == ErrorCode.NETWORK_CONNECTION
        assert exc.value.symbol == "AAPL"
        assert isinstance(exc.value.__cause__, ConnectionError)

    @pytest.mark.parametrize("symbol", ["", "NOT A SYMBOL", "X" * 20])
    def test_invalid_symbol(self, config, symbol):
        with pytest.raises(ValidationError):
            YahooHistoryAdapter(config).get_history(symbol, date(2024, 1, 1), Market.US)


class TestRateLimiter:
    """Sliding-window limiter."""

    def test_limit_exceeded(self):
        limiter = RateLimiter(max_requests=2)
        limiter.acquire("yahoo")
        limiter.acquire("yahoo")

        with pytest.raises(RateLimitError) as exc:
            limiter.acquire("yahoo")

        assert exc.value.limit == 2
        assert exc.value.retry_after <= timedelta(seconds=60)
        assert exc.value.code == ErrorCode.UPSTREAM_RATE_LIMITED


# ============================================================================
# CSV
# ============================================================================

class TestCsvHistory:
    """CSV parsing and the CSV adapter."""

    def test_read_bars_sorted_and_normalized(self, price_csv):
        bars = read_bars(price_csv)

        # row without close dropped, rows sorted by time
        assert [b.time for b in bars] == ["2024-01-02", "2024-01-03", "2024-01-04"]
        assert bars[0].close == Decimal("10.5")
        assert bars[2].open == bars[2].high == bars[2].low == Decimal(12)
        assert bars[2].volume == 0

    def test_epoch_times(self, tmp_path):
        path = tmp_path / "epoch.csv"
        path.write_text("time,close\n1704240000,2\n1704153600,1\n", encoding="utf-8")

        assert [b.time for b in read_bars(path)] == [1704153600, 1704240000]

    def test_missing_close_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("time,open\n2024-01-02,1\n", encoding="utf-8")

        with pytest.raises(DataError) as exc:
            read_bars(path)
        assert exc.value.code == ErrorCode.DATA_MISSING

    def test_bad_number(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("time,close\n2024-01-02,1\n2024-01-03,abc\n", encoding="utf-8")

        with pytest.raises(ParseError) as exc:
            read_bars(path)
        assert exc.value.context["line"] == 3

    @pytest.mark.parametrize("cell", ["NaN", "Infinity", "-inf"])
    def test_non_finite_number(self, tmp_path, cell):
        path = tmp_path / "bad.csv"
        path.write_text(f"time,close\n2024-01-02,1\n2024-01-03,{cell}\n", encoding="utf-8")

        with pytest.raises(ParseError) as exc:
            read_bars(path)
        assert exc.value.code == ErrorCode.PARSE_NUMBER
        assert exc.value.context["line"] == 3

    def test_adapter_directory_lookup(self, price_csv, config):
        adapter = CsvHistoryAdapter(directory=price_csv.parent, config=config)
        bars = adapter.get_history("aapl", date(2024, 1, 3), Market.US)

        assert adapter.source_name == "csv"
        assert [b.time for b in bars] == ["2024-01-03", "2024-01-04"]

    def test_adapter_missing_file(self, tmp_path, config):
        adapter = CsvHistoryAdapter(directory=tmp_path, config=config)

        with pytest.raises(FetchError) as exc:
            adapter.get_history("MSFT", date(2024, 1, 1), Market.US)
        assert exc.value.code == ErrorCode.UPSTREAM_NOT_FOUND

    def test_adapter_needs_location(self, config):
        with pytest.raises(ValueError):
            CsvHistoryAdapter(config=config)
