"""Configuration management for paddock.

This module provides configuration loading with precedence handling:
1. Explicit overrides (highest priority)
2. Environment variables (PADDOCK_*)
3. Config file (./paddock.toml)
4. Default values (lowest priority)
"""

from paddock.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from paddock.config.env import EnvReader
from paddock.config.loader import (
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from paddock.config.models import LoggingConfig, PaddockConfig

__all__ = [
    # Models
    "LoggingConfig",
    "PaddockConfig",
    # Loader
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    # Layering
    "EnvReader",
    "ConfigBuilder",
    "ConfigSource",
    "source_from_env",
    "source_from_file",
]
