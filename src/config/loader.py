"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. Built-in defaults   - _DEFAULTS below
#   2. config/config.yaml  - Engine tunables checked into the repo
#   3. .env / env vars     - Upstream URLs, timeouts, app host/port
#
# load_config() returns a plain dict; build_engine_config() turns the
# tunable sections into a validated EngineConfig used by main.py.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

_DEFAULTS: dict[str, Any] = {
    "lookup": {
        "batch_size": 50,
        "batch_delay_seconds": 0.1,
        "max_ids": 200,
        "default_country": "US",
    },
    "overlay": {
        "window_start": 195,
        "window_end": 200,
        "max_concurrency": 8,
        "default_country": "US",
    },
    "pagination": {
        "charts_default_limit": 20,
        "charts_v2_default_limit": 25,
        "charts_v2_default_max_fetch": 100,
        "search_default_limit": 25,
    },
}


@dataclass(frozen=True)
class EngineConfig:
    """Validated engine tunables."""

    batch_size: int
    batch_delay_seconds: float
    max_ids: int
    lookup_country: str
    overlay_window_start: int
    overlay_window_end: int
    overlay_max_concurrency: int
    overlay_country: str
    charts_default_limit: int
    charts_v2_default_limit: int
    charts_v2_default_max_fetch: int
    search_default_limit: int


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is not an
              error; built-in defaults apply.
        settings: Settings instance to merge.  A fresh one is read from the
                  environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config = copy.deepcopy(_DEFAULTS)

    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        _deep_merge(config, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "upstream": {
            "legacy_charts_base_url": settings.legacy_charts_base_url,
            "charts_v2_base_url": settings.charts_v2_base_url,
            "lookup_base_url": settings.lookup_base_url,
            "overlay_base_url": settings.overlay_base_url,
            "http_timeout": settings.http_timeout,
            "overlay_timeout": settings.overlay_timeout,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(config, env_overrides)
    return config


def build_engine_config(config: dict) -> EngineConfig:
    """Extract and validate the engine tunables from a loaded config dict."""
    lookup = config.get("lookup", {})
    overlay = config.get("overlay", {})
    pagination = config.get("pagination", {})

    try:
        engine = EngineConfig(
            batch_size=int(lookup["batch_size"]),
            batch_delay_seconds=float(lookup["batch_delay_seconds"]),
            max_ids=int(lookup["max_ids"]),
            lookup_country=str(lookup["default_country"]),
            overlay_window_start=int(overlay["window_start"]),
            overlay_window_end=int(overlay["window_end"]),
            overlay_max_concurrency=int(overlay["max_concurrency"]),
            overlay_country=str(overlay["default_country"]),
            charts_default_limit=int(pagination["charts_default_limit"]),
            charts_v2_default_limit=int(pagination["charts_v2_default_limit"]),
            charts_v2_default_max_fetch=int(pagination["charts_v2_default_max_fetch"]),
            search_default_limit=int(pagination["search_default_limit"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid engine configuration: {exc}") from exc

    if engine.batch_size <= 0:
        raise ConfigurationError("lookup.batch_size must be positive")
    if engine.max_ids <= 0:
        raise ConfigurationError("lookup.max_ids must be positive")
    if engine.batch_delay_seconds < 0:
        raise ConfigurationError("lookup.batch_delay_seconds must not be negative")
    if engine.overlay_window_start > engine.overlay_window_end:
        raise ConfigurationError("overlay.window_start must not exceed overlay.window_end")
    if engine.overlay_max_concurrency <= 0:
        raise ConfigurationError("overlay.max_concurrency must be positive")
    return engine


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
