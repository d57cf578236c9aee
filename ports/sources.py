"""
Price-history ports and error types.

This module defines the protocol that price-history adapters implement
and the structured errors they raise.
"""

from abc import abstractmethod
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from domain import IndicatorKind, IndicatorResult, Market, OHLCBar


# ============================================================================
# Error Codes
# ============================================================================

class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # Network errors (1xx)
    NETWORK_TIMEOUT = "E101"
    NETWORK_CONNECTION = "E102"

    # Upstream errors (2xx)
    UPSTREAM_RATE_LIMITED = "E203"
    UPSTREAM_NOT_FOUND = "E206"

    # Parse errors (3xx)
    PARSE_CSV = "E303"
    PARSE_DATE = "E304"
    PARSE_NUMBER = "E305"

    # Data errors (4xx)
    DATA_MISSING = "E401"
    DATA_INVALID = "E402"
    DATA_EMPTY = "E404"

    # Validation errors (5xx)
    VALIDATION_SYMBOL = "E501"
    VALIDATION_PARAM = "E502"

    UNKNOWN = "E999"


# ============================================================================
# Error Classes
# ============================================================================

class AdapterError(Exception):
    """
    Base exception for price-history failures.

    Carries a code, the source name and a context dict so callers can log
    or serialize the failure without parsing the message.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        source: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.source = source
        self.context = context or {}
        self.cause = cause
        self.message = message
        self.timestamp = datetime.now()

        prefix = f"[{code.value}]"
        if source:
            prefix += f" [{source}]"
        super().__init__(f"{prefix} {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "source": self.source,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


class RateLimitError(AdapterError):
    """Raised when the local request budget for a source is spent."""

    def __init__(
        self,
        retry_after: timedelta | None = None,
        source: str | None = None,
        limit: int | None = None,
    ):
        self.retry_after = retry_after
        self.limit = limit

        msg = "Rate limit exceeded"
        context: dict[str, Any] = {}
        if retry_after:
            msg += f", retry after {retry_after.total_seconds():.0f}s"
            context["retry_after_seconds"] = retry_after.total_seconds()
        if limit:
            context["limit"] = limit

        super().__init__(
            message=msg,
            code=ErrorCode.UPSTREAM_RATE_LIMITED,
            source=source,
            context=context,
        )


class FetchError(AdapterError):
    """Raised when price history cannot be retrieved."""

    def __init__(
        self,
        source: str,
        reason: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        symbol: str | None = None,
        cause: Exception | None = None,
    ):
        self.reason = reason
        self.symbol = symbol

        context = {"reason": reason}
        if symbol:
            context["symbol"] = symbol

        super().__init__(
            message=reason,
            code=code,
            source=source,
            context=context,
            cause=cause,
        )

    @classmethod
    def from_exception(
        cls,
        source: str,
        error: Exception,
        symbol: str | None = None,
    ) -> "FetchError":
        """Classify an arbitrary upstream exception."""
        error_str = str(error).lower()

        if "timed out" in error_str or "timeout" in error_str:
            code = ErrorCode.NETWORK_TIMEOUT
            reason = "Request timed out"
        elif "connection" in error_str or "resolve" in error_str:
            code = ErrorCode.NETWORK_CONNECTION
            reason = f"Connection error: {error}"
        else:
            code = ErrorCode.UNKNOWN
            reason = str(error) or type(error).__name__

        return cls(source=source, reason=reason, code=code, symbol=symbol, cause=error)


class ParseError(AdapterError):
    """Raised when a price file or payload cannot be parsed."""

    def __init__(
        self,
        source: str,
        format_type: str,
        reason: str,
        line: int | None = None,
        cause: Exception | None = None,
    ):
        code_map = {
            "csv": ErrorCode.PARSE_CSV,
            "date": ErrorCode.PARSE_DATE,
            "number": ErrorCode.PARSE_NUMBER,
        }
        context: dict[str, Any] = {"format": format_type}
        if line is not None:
            context["line"] = line

        super().__init__(
            message=f"Failed to parse {format_type}: {reason}",
            code=code_map.get(format_type, ErrorCode.UNKNOWN),
            source=source,
            context=context,
            cause=cause,
        )


class DataError(AdapterError):
    """Raised when returned data is missing or unusable."""

    def __init__(
        self,
        source: str,
        reason: str,
        code: ErrorCode = ErrorCode.DATA_INVALID,
        field: str | None = None,
    ):
        context = {"reason": reason}
        if field:
            context["field"] = field

        super().__init__(message=reason, code=code, source=source, context=context)

    @classmethod
    def missing(cls, source: str, field: str) -> "DataError":
        """Create error for missing required column."""
        return cls(
            source=source,
            reason=f"Missing required field: {field}",
            code=ErrorCode.DATA_MISSING,
            field=field,
        )

    @classmethod
    def empty(cls, source: str, description: str = "No data") -> "DataError":
        """Create error for an empty history."""
        return cls(source=source, reason=description, code=ErrorCode.DATA_EMPTY)


class ValidationError(AdapterError):
    """Raised when request validation fails."""

    def __init__(
        self,
        reason: str,
        field: str,
        value: Any = None,
        source: str | None = None,
    ):
        self.field = field
        context = {"field": field}
        if value is not None:
            context["value"] = str(value)[:50]

        code = ErrorCode.VALIDATION_SYMBOL if field == "symbol" else ErrorCode.VALIDATION_PARAM
        super().__init__(message=reason, code=code, source=source, context=context)


# ============================================================================
# Protocol
# ============================================================================

@runtime_checkable
class PriceHistorySource(Protocol):
    """
    Protocol for price-history adapters.

    Implementations must:
    - Return bars ascending by time, one per period, no duplicates
    - Apply row normalization (missing close dropped, OHLC back-filled)
    - Fail explicitly with FetchError/DataError, no silent fallbacks
    """

    @property
    def source_name(self) -> str:
        """Unique identifier for this data source."""
        ...

    @abstractmethod
    def get_history(self, symbol: str, start: date, market: Market) -> list[OHLCBar]:
        """
        Fetch daily bars for symbol from start (inclusive) to today.

        Raises:
            RateLimitError: If rate limit exceeded
            FetchError: If fetch fails for any other reason
        """
        ...


@runtime_checkable
class IndicatorStore(Protocol):
    """
    Protocol for stores of precomputed indicator series.

    When a store has points for the requested range they are served
    instead of computing the indicator in-process.
    """

    @abstractmethod
    def get_indicators(
        self,
        symbol: str,
        start: date,
        market: Market,
        kind: IndicatorKind,
    ) -> IndicatorResult:
        """
        Return {kind.value: points} or {} when nothing is stored.

        Raises:
            FetchError: If the store cannot be read
        """
        ...
