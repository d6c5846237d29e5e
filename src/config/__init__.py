"""Configuration module - exports Settings, the YAML loader, and the engine config."""

from src.config.loader import EngineConfig, build_engine_config, load_config
from src.config.settings import Settings

__all__ = ["EngineConfig", "Settings", "build_engine_config", "load_config"]
