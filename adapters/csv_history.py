"""
CSV price-history adapter.

Reads OHLCV files with a header row:

    time,open,high,low,close,volume
    2024-01-02,100.5,102,99.75,101.25,1200000

A `date` column is accepted in place of `time`; all-digit times are read
as epoch seconds. Either a single file or a directory of <SYMBOL>.csv
files can back the adapter.
"""

import csv
import logging
from datetime import date
from decimal import InvalidOperation
from pathlib import Path
from typing import Any

from config import ChartlensConfig
from domain import Market, OHLCBar, normalize_rows
from domain.indicators import to_decimal
from ports import DataError, ErrorCode, FetchError, ParseError

from .base import BaseHistoryAdapter

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("time", "close")
PRICE_COLUMNS = ("open", "high", "low", "close", "volume")


def read_rows(path: Path | str, source: str = "csv") -> list[dict[str, Any]]:
    """
    Parse a CSV file into raw price rows sorted by time.

    Raises:
        DataError: If a required column is missing
        ParseError: If a number cannot be parsed
    """
    path = Path(path)
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        header = [name.strip().lower() for name in (reader.fieldnames or [])]
        if "time" not in header and "date" in header:
            header[header.index("date")] = "time"
        for column in REQUIRED_COLUMNS:
            if column not in header:
                raise DataError.missing(source, column)
        reader.fieldnames = header

        rows = []
        for line, raw in enumerate(reader, start=2):
            row: dict[str, Any] = {"time": _parse_time(raw.get("time"))}
            for column in PRICE_COLUMNS:
                row[column] = _parse_number(raw.get(column), source, line)
            rows.append(row)

    rows.sort(key=lambda r: (r["time"] is None, r["time"] or 0))
    return rows


def read_bars(path: Path | str) -> list[OHLCBar]:
    """Read and normalize a CSV file into bars."""
    return normalize_rows(read_rows(path))


def _parse_time(value: str | None) -> str | int | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isdigit():
        return int(value)
    return value


def _parse_number(value: str | None, source: str, line: int) -> Any:
    if value is None or not value.strip():
        return None
    try:
        number = to_decimal(value.strip())
    except InvalidOperation as e:
        raise ParseError(source, "number", f"invalid value {value!r}", line=line, cause=e) from e
    if not number.is_finite():
        raise ParseError(source, "number", f"non-finite value {value!r}", line=line)
    return number


class CsvHistoryAdapter(BaseHistoryAdapter):
    """
    CSV file history adapter.

    Args:
        path: Single file used for every symbol
        directory: Directory holding <SYMBOL>.csv files (defaults to
            history.csv_directory from config)
    """

    def __init__(
        self,
        path: Path | str | None = None,
        directory: Path | str | None = None,
        config: ChartlensConfig | None = None,
    ):
        super().__init__(config)
        directory = directory or self._config.history.csv_directory
        self._path = Path(path) if path else None
        self._directory = Path(directory) if directory else None
        if self._path is None and self._directory is None:
            raise ValueError("CsvHistoryAdapter needs a path or a directory")

    @property
    def source_name(self) -> str:
        return "csv"

    def path_for(self, symbol: str) -> Path:
        if self._path is not None:
            return self._path
        return self._directory / f"{symbol}.csv"

    def _fetch_rows(self, symbol: str, start: date, market: Market) -> list[dict[str, Any]]:
        path = self.path_for(symbol)
        if not path.exists():
            raise FetchError(
                source=self.source_name,
                reason=f"No price file at {path}",
                code=ErrorCode.UPSTREAM_NOT_FOUND,
                symbol=symbol,
            )
        logger.debug(f"Reading {path}")
        return read_rows(path, self.source_name)
