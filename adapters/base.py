"""
Base price-history adapter with caching, rate limiting, and structured logging.

All adapters should inherit from BaseHistoryAdapter to get:
- Response caching with configurable TTL
- Rate limiting per source
- Row normalization into OHLCBar
- Structured logging at boundaries
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping
import logging
import re
import time

from config import ChartlensConfig, get_config
from domain import Market, OHLCBar, normalize_rows
from ports import AdapterError, FetchError, RateLimitError, ValidationError

logger = logging.getLogger(__name__)

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.\-^=]{1,15}$")


class CacheEntry:
    """Single cache entry with TTL tracking."""

    __slots__ = ("bars", "created_at", "ttl")

    def __init__(self, bars: list[OHLCBar], ttl: timedelta):
        self.bars = bars
        self.created_at = datetime.now()
        self.ttl = ttl

    def is_valid(self) -> bool:
        return datetime.now() - self.created_at < self.ttl


class RateLimiter:
    """Sliding-window rate limiter."""

    __slots__ = ("max_requests", "window_seconds", "requests")

    def __init__(self, max_requests: int, window_seconds: float = 60.0):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests: list[float] = []

    def acquire(self, source: str | None = None) -> None:
        """
        Acquire a request slot.

        Raises:
            RateLimitError: If rate limit exceeded
        """
        now = time.monotonic()

        cutoff = now - self.window_seconds
        self.requests = [t for t in self.requests if t > cutoff]

        if len(self.requests) >= self.max_requests:
            retry_after = timedelta(seconds=min(self.requests) + self.window_seconds - now)
            raise RateLimitError(retry_after=retry_after, source=source, limit=self.max_requests)

        self.requests.append(now)


class BaseHistoryAdapter(ABC):
    """
    Base class for price-history adapters.

    Subclasses implement _fetch_rows(); get_history() adds validation,
    caching, rate limiting and normalization around it.
    """

    def __init__(self, config: ChartlensConfig | None = None):
        self._config = config or get_config()
        self._cache: dict[str, CacheEntry] = {}
        self._rate_limiter = RateLimiter(
            max_requests=self._config.history.rate_limit_per_minute
        )

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Unique identifier for this data source."""
        ...

    def _cache_key(self, symbol: str, start: date, market: Market) -> str:
        return f"{self.source_name}:{market.value}:{symbol}:{start.isoformat()}"

    def _get_cached(self, key: str) -> list[OHLCBar] | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if not entry.is_valid():
            del self._cache[key]
            return None
        logger.debug(f"Cache hit: {key}")
        return entry.bars

    def _set_cached(self, key: str, bars: list[OHLCBar]) -> None:
        ttl = self._config.history.cache_ttl
        if ttl <= timedelta(0):
            return
        self._cache[key] = CacheEntry(bars, ttl)
        logger.debug(f"Cached: {key} (TTL={ttl})")

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_history(self, symbol: str, start: date, market: Market) -> list[OHLCBar]:
        """
        Fetch daily bars with caching and rate limiting.

        Raises:
            ValidationError: If symbol is malformed
            RateLimitError: If rate limit exceeded
            FetchError: If fetch fails
        """
        symbol = self._validate_symbol(symbol)
        key = self._cache_key(symbol, start, market)

        cached = self._get_cached(key)
        if cached is not None:
            return cached

        self._rate_limiter.acquire(self.source_name)

        started = time.monotonic()
        try:
            rows = list(self._fetch_rows(symbol, start, market))
        except AdapterError:
            raise
        except Exception as e:
            raise FetchError.from_exception(self.source_name, e, symbol=symbol) from e

        bars = [bar for bar in normalize_rows(rows) if _on_or_after(bar, start)]
        elapsed = time.monotonic() - started
        logger.info(
            f"Fetched {len(bars)} bar(s) for {symbol} from {self.source_name} ({elapsed:.2f}s)",
            extra={
                "source": self.source_name,
                "symbol": symbol,
                "market": market.value,
                "bars": len(bars),
                "elapsed_ms": int(elapsed * 1000),
            },
        )

        self._set_cached(key, bars)
        return bars

    @abstractmethod
    def _fetch_rows(self, symbol: str, start: date, market: Market) -> Iterable[Mapping[str, Any]]:
        """
        Implementation-specific fetch logic.

        Yields mappings with time/open/high/low/close/volume keys, ascending
        by time. Values may be None; normalization happens in get_history().
        """
        ...

    def _validate_symbol(self, symbol: str) -> str:
        """
        Validate and normalize a symbol.

        Raises:
            ValidationError: If symbol is invalid
        """
        symbol = (symbol or "").upper().strip()
        if not symbol:
            raise ValidationError(reason="Symbol is required", field="symbol", source=self.source_name)
        if not SYMBOL_PATTERN.match(symbol):
            raise ValidationError(
                reason=f"Invalid symbol '{symbol}'",
                field="symbol",
                value=symbol,
                source=self.source_name,
            )
        return symbol


def _on_or_after(bar: OHLCBar, start: date) -> bool:
    """Whether an ISO-dated bar falls on or after start; other times pass."""
    if not isinstance(bar.time, str):
        return True
    try:
        return date.fromisoformat(bar.time[:10]) >= start
    except ValueError:
        return True
