from .base import BaseHistoryAdapter, CacheEntry, RateLimiter
from .yahoo import YahooHistoryAdapter
from .csv_history import CsvHistoryAdapter, read_bars, read_rows

__all__ = [
    "BaseHistoryAdapter",
    "CacheEntry",
    "RateLimiter",
    "YahooHistoryAdapter",
    "CsvHistoryAdapter",
    "read_bars",
    "read_rows",
]
