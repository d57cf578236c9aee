"""
Chart service.

Coordinates one chart request end to end:
1. Normalize the raw request against configured defaults
2. Fetch price history from the source for the requested range
3. Optionally validate the series
4. Attach the indicator (stored or computed) and MA overlays
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date

from config import ChartlensConfig, get_config
from domain import (
    ChartData,
    ChartRange,
    ChartRequest,
    IndicatorKind,
    IndicatorResult,
    Market,
    build_chart,
    normalize_request,
    start_date_for_range,
    validate_series,
)
from ports import AdapterError, IndicatorStore, PriceHistorySource

logger = logging.getLogger(__name__)


# ============================================================================
# Result
# ============================================================================

@dataclass
class ChartResult:
    """Chart payload plus the request it answers."""
    request: ChartRequest
    start: date
    chart: ChartData
    precomputed: bool = False
    elapsed_ms: int = 0
    warnings: list[str] = field(default_factory=list)


# ============================================================================
# Service
# ============================================================================

class ChartService:
    """
    Serve chart data for a symbol.

    Args:
        source: Price-history adapter
        config: Configuration (defaults to get_config())
        indicator_store: Optional store of precomputed indicator series
    """

    def __init__(
        self,
        source: PriceHistorySource,
        config: ChartlensConfig | None = None,
        indicator_store: IndicatorStore | None = None,
    ):
        self.source = source
        self.config = config or get_config()
        self.indicator_store = indicator_store

    def get_chart(
        self,
        symbol: str,
        range: str | ChartRange | None = None,
        market: str | Market | None = None,
        indicator: str | IndicatorKind | None = None,
        *,
        overlays: bool | None = None,
        today: date | None = None,
    ) -> ChartResult:
        """
        Build the chart for one request.

        Unknown range, market or indicator values fall back to the
        configured defaults (no indicator for unknown names).

        Raises:
            ValidationError: If symbol is missing or malformed
            FetchError: If history cannot be retrieved
            InvalidSeriesError: If validation is enabled and a bar is inconsistent
        """
        started = time.monotonic()
        request = normalize_request(
            symbol,
            range,
            market,
            indicator,
            default_range=self.config.defaults.range,
            default_market=self.config.defaults.market,
        )
        start = start_date_for_range(request.range, today)

        logger.info(
            f"Chart request: {request.symbol} {request.range.value} "
            f"{request.market.value} indicator={request.indicator.value}"
        )

        bars = self.source.get_history(request.symbol, start, request.market)
        if self.config.engine.validate_input:
            validate_series(bars)

        warnings: list[str] = []
        if not bars:
            warnings.append(f"No price history for {request.symbol} since {start.isoformat()}")

        precomputed = self._load_precomputed(request, start, warnings)

        show_overlays = self.config.overlay.enabled if overlays is None else overlays
        chart = build_chart(
            bars,
            request.indicator,
            params=self.config.indicator_params(request.indicator),
            precomputed=precomputed,
            places=self.config.engine.decimal_places,
            overlay_periods=self.config.overlay.ma_periods if show_overlays else None,
        )

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"Chart ready: {request.symbol} ({len(bars)} bars, {elapsed_ms}ms)",
            extra={
                "symbol": request.symbol,
                "indicator": request.indicator.value,
                "bars": len(bars),
                "elapsed_ms": elapsed_ms,
            },
        )

        return ChartResult(
            request=request,
            start=start,
            chart=chart,
            precomputed=bool(precomputed) and any(precomputed.values()),
            elapsed_ms=elapsed_ms,
            warnings=warnings,
        )

    def _load_precomputed(
        self,
        request: ChartRequest,
        start: date,
        warnings: list[str],
    ) -> IndicatorResult | None:
        if self.indicator_store is None or request.indicator is IndicatorKind.NONE:
            return None
        try:
            return self.indicator_store.get_indicators(
                request.symbol, start, request.market, request.indicator
            )
        except AdapterError as e:
            # WHY: a broken store must not take the chart down; compute instead
            logger.warning(f"Indicator store failed, computing in-process: {e}")
            warnings.append(f"Indicator store unavailable: {e.message}")
            return None
