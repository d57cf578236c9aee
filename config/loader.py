"""
Configuration loader.

Settings are layered, later layers winning:
built-in model defaults, then the first chartlens TOML file found,
then CHARTLENS_* environment variables.
"""

import logging
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .schema import ChartlensConfig

logger = logging.getLogger(__name__)

CONFIG_PATHS = [
    Path("chartlens.toml"),
    Path(".chartlens.toml"),
    Path.home() / ".config" / "chartlens" / "config.toml",
    Path("/etc/chartlens/config.toml"),
]

ENV_PREFIX = "CHARTLENS_"

# CHARTLENS_<suffix> -> (section, key)
ENV_OVERRIDES = {
    "DECIMAL_PLACES": ("engine", "decimal_places"),
    "VALIDATE_INPUT": ("engine", "validate_input"),
    "LEGACY_MACD_OFFSET": ("engine", "legacy_macd_offset"),
    "DEFAULT_RANGE": ("defaults", "range"),
    "DEFAULT_MARKET": ("defaults", "market"),
    "CSV_DIRECTORY": ("history", "csv_directory"),
}


class ConfigError(Exception):
    """Invalid config file or setting.

    Attributes:
        source: File the bad value came from, if any
        field: Dotted setting name, e.g. "engine.decimal_places"
    """

    def __init__(self, message: str, source: str | None = None, field: str | None = None):
        self.source = source
        self.field = field
        where = ", ".join(part for part in (source, field) if part)
        super().__init__(f"{message} [{where}]" if where else message)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        raise ConfigError(f"Failed to parse TOML: {e}", source=str(path)) from e

    logger.info(f"Loaded config from: {path}")
    return data


def _env_sections() -> dict[str, dict[str, str | None]]:
    """CHARTLENS_* values grouped by config section; "none" clears a setting."""
    sections: dict[str, dict[str, str | None]] = {}
    for suffix, (section, key) in ENV_OVERRIDES.items():
        raw = os.environ.get(ENV_PREFIX + suffix)
        if raw is not None:
            sections.setdefault(section, {})[key] = None if raw.lower() == "none" else raw
    return sections


def _overlay_sections(base: dict[str, Any], sections: dict[str, dict[str, Any]]) -> dict[str, Any]:
    merged = dict(base)
    for section, values in sections.items():
        current = merged.get(section)
        merged[section] = {**current, **values} if isinstance(current, dict) else dict(values)
    return merged


def load_config(config_path: Path | str | None = None) -> ChartlensConfig:
    """
    Build a validated ChartlensConfig.

    Args:
        config_path: Use this TOML file instead of searching CONFIG_PATHS

    Raises:
        ConfigError: Missing explicit file, unreadable TOML or a value the
            schema rejects
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", source=str(path))
    else:
        path = next((p for p in CONFIG_PATHS if p.exists()), None)

    data = _read_toml(path) if path else {}

    env = _env_sections()
    if env:
        data = _overlay_sections(data, env)
        logger.debug(f"Environment overrides: {sorted(k for v in env.values() for k in v)}")

    try:
        return ChartlensConfig(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigError(
            f"Invalid configuration: {first.get('msg', 'validation error')}",
            source=str(path) if path else None,
            field=field,
        ) from e


@lru_cache
def get_config() -> ChartlensConfig:
    """Process-wide configuration, loaded on first use."""
    return load_config()


def reload_config() -> ChartlensConfig:
    """Drop the cached configuration and load it again."""
    get_config.cache_clear()
    return get_config()
