"""Configuration loading for autossl."""

from autossl.config.loader import ConfigError, load_config
from autossl.config.models import AutosslConfig, DumpConfig, RuntimeConfig

__all__ = [
    "AutosslConfig",
    "ConfigError",
    "DumpConfig",
    "RuntimeConfig",
    "load_config",
]
