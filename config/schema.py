"""
Configuration schema with validation.

All configuration is validated at load time using Pydantic.
"""

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field, field_validator

from domain import ChartRange, IndicatorKind, Market


class EngineConfig(BaseModel):
    """Indicator engine behaviour."""

    decimal_places: int | None = Field(
        default=4, ge=0, le=12,
        description="Round indicator output half-up; None keeps full precision",
    )
    validate_input: bool = Field(
        default=False, description="Check OHLC invariants before computing",
    )
    legacy_macd_offset: bool = Field(
        default=True, description="Keep the historical MACD signal alignment",
    )


class IndicatorDefaultsConfig(BaseModel):
    """Default parameters per indicator."""

    rsi_period: int = Field(default=14, ge=1, le=200)
    macd_fast: int = Field(default=12, ge=1, le=200)
    macd_slow: int = Field(default=26, ge=2, le=400)
    macd_signal: int = Field(default=9, ge=1, le=200)
    stochastic_k: int = Field(default=14, ge=1, le=200)
    stochastic_d: int = Field(default=3, ge=1, le=50)
    bollinger_period: int = Field(default=20, ge=1, le=200)
    bollinger_std_dev: float = Field(default=2.0, ge=0.0, le=10.0)
    atr_period: int = Field(default=14, ge=1, le=200)
    cci_period: int = Field(default=20, ge=1, le=200)
    mfi_period: int = Field(default=14, ge=1, le=200)
    adx_period: int = Field(default=14, ge=1, le=200)

    @field_validator("macd_slow")
    @classmethod
    def slow_gt_fast(cls, v: int, info) -> int:
        fast = info.data.get("macd_fast", 12)
        if v <= fast:
            raise ValueError("macd_slow must be greater than macd_fast")
        return v

    def params_for(self, kind: IndicatorKind, legacy_macd_offset: bool = True) -> dict[str, Any]:
        """Dispatcher parameters for an indicator kind."""
        mapping: dict[IndicatorKind, dict[str, Any]] = {
            IndicatorKind.RSI: {"period": self.rsi_period},
            IndicatorKind.MACD: {
                "fast": self.macd_fast,
                "slow": self.macd_slow,
                "signal": self.macd_signal,
                "legacy_offset": legacy_macd_offset,
            },
            IndicatorKind.STOCHASTIC: {"k_period": self.stochastic_k, "d_period": self.stochastic_d},
            IndicatorKind.BOLLINGER: {
                "period": self.bollinger_period,
                "std_dev": self.bollinger_std_dev,
            },
            IndicatorKind.ATR: {"period": self.atr_period},
            IndicatorKind.CCI: {"period": self.cci_period},
            IndicatorKind.MFI: {"period": self.mfi_period},
            IndicatorKind.ADX: {"period": self.adx_period},
        }
        return mapping.get(kind, {})


class OverlayConfig(BaseModel):
    """Moving-average overlays on the price chart."""

    enabled: bool = Field(default=False)
    ma_periods: list[int] = Field(default_factory=lambda: [5, 20, 60])

    @field_validator("ma_periods")
    @classmethod
    def periods_positive(cls, v: list[int]) -> list[int]:
        if any(p < 1 for p in v):
            raise ValueError("ma_periods must be positive")
        return sorted(set(v))


class HistoryConfig(BaseModel):
    """Price-history adapter settings."""

    cache_minutes: int = Field(default=10, ge=0, le=1440)
    rate_limit_per_minute: int = Field(default=60, ge=1, le=600)
    kr_suffix: str = Field(default=".KS", description="Yahoo suffix for KR listings")
    csv_directory: str | None = Field(default=None, description="Directory of <SYMBOL>.csv files")

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.cache_minutes)


class DefaultsConfig(BaseModel):
    """Fallbacks for chart requests."""

    range: ChartRange = Field(default=ChartRange.WEEK)
    market: Market = Field(default=Market.KR)


class ChartlensConfig(BaseModel):
    """
    Root configuration model.

    All settings are validated on load.
    """

    engine: EngineConfig = Field(default_factory=EngineConfig)
    indicators: IndicatorDefaultsConfig = Field(default_factory=IndicatorDefaultsConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    def indicator_params(self, kind: IndicatorKind) -> dict[str, Any]:
        """Configured dispatcher parameters for kind."""
        return self.indicators.params_for(kind, self.engine.legacy_macd_offset)
