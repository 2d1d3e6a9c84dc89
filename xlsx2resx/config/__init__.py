"""Configuration loading."""

from .loader import ConfigError, ConverterConfig, load_config

__all__ = [
    "ConfigError",
    "ConverterConfig",
    "load_config",
]
