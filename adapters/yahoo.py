"""
Yahoo Finance price-history adapter.

Daily OHLCV history through yfinance. No API key required.
KR listings are addressed with an exchange suffix (005930 -> 005930.KS).
"""

import logging
from datetime import date
from typing import Any, Iterator

import pandas as pd
import yfinance as yf

from domain import Market
from ports import DataError

from .base import BaseHistoryAdapter

logger = logging.getLogger(__name__)

COLUMNS = {
    "open": "Open",
    "high": "High",
    "low": "Low",
    "close": "Close",
    "volume": "Volume",
}


class YahooHistoryAdapter(BaseHistoryAdapter):
    """
    Yahoo Finance history adapter.

    Provides daily bars for US and KR symbols.
    """

    @property
    def source_name(self) -> str:
        return "yahoo"

    def yahoo_symbol(self, symbol: str, market: Market) -> str:
        """Symbol as Yahoo expects it for the given market."""
        if market is Market.KR and "." not in symbol:
            return f"{symbol}{self._config.history.kr_suffix}"
        return symbol

    def _fetch_rows(self, symbol: str, start: date, market: Market) -> Iterator[dict[str, Any]]:
        yahoo_symbol = self.yahoo_symbol(symbol, market)
        logger.debug(f"yfinance history {yahoo_symbol} from {start.isoformat()}")

        hist = yf.Ticker(yahoo_symbol).history(
            start=start.isoformat(),
            interval="1d",
            auto_adjust=False,
        )

        if hist is None or hist.empty:
            raise DataError.empty(self.source_name, f"No history for {yahoo_symbol}")

        missing = [name for name in COLUMNS.values() if name not in hist.columns]
        if "Close" in missing:
            raise DataError.missing(self.source_name, "Close")
        if missing:
            logger.warning(f"{yahoo_symbol}: missing column(s) {', '.join(missing)}")

        for timestamp, row in hist.iterrows():
            record: dict[str, Any] = {"time": pd.Timestamp(timestamp).date().isoformat()}
            for key, column in COLUMNS.items():
                record[key] = _clean(row.get(column))
            yield record


def _clean(value: Any) -> float | None:
    """Map pandas NaN/None to None and numpy scalars to float."""
    if value is None or pd.isna(value):
        return None
    return float(value)
