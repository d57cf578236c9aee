from .loader import ConfigError, load_config, get_config, reload_config
from .schema import (
    ChartlensConfig,
    EngineConfig,
    IndicatorDefaultsConfig,
    OverlayConfig,
    HistoryConfig,
    DefaultsConfig,
)

__all__ = [
    "ConfigError",
    "load_config",
    "get_config",
    "reload_config",
    "ChartlensConfig",
    "EngineConfig",
    "IndicatorDefaultsConfig",
    "OverlayConfig",
    "HistoryConfig",
    "DefaultsConfig",
]
