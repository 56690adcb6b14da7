"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. Explicit overrides (CLI options, keyword arguments)
2. Environment variables (PADDOCK_*)
3. Config file (./paddock.toml)
4. Default values

Environment variables:
- PADDOCK_ENV: Environment the default registry starts in
- PADDOCK_FEATURES_FILE: Declaration file applied to the default registry
- PADDOCK_CONFIG_PATH: Path to config file (overrides default location)
- PADDOCK_LOG_LEVEL / PADDOCK_LOG_FILE / PADDOCK_LOG_FORMAT: Logging
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path

from paddock.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from paddock.config.env import EnvReader
from paddock.config.models import PaddockConfig
from paddock.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("paddock.toml")

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict, float]] = {}
_config_cache_lock = threading.Lock()


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by PADDOCK_CONFIG_PATH environment variable.
    """
    env_path = os.environ.get("PADDOCK_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def _parse_config_file(path: Path) -> dict:
    """Read and parse a TOML config file.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Successful parses are cached with mtime-based invalidation. Failed
    parses are never cached, so a strict load after a lenient one still
    reports the error. Use clear_config_cache() to force a reload
    regardless of mtime.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigError on parse failures.
                If False (default), return empty dict on errors.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        try:
            result = _parse_config_file(path)
        except ConfigError as e:
            if strict:
                raise
            logger.warning("Ignoring invalid config file %s: %s", path, e)
            return {}

        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # Explicit overrides (highest precedence)
    environment: str | None = None,
    features_file: Path | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> PaddockConfig:
    """Get paddock configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides PADDOCK_CONFIG_PATH).
        environment: Override for the starting environment.
        features_file: Override for the declaration file.
        log_level: Override for the log level.
        log_file: Override for the log file.
        log_format: Override for the log format (text or json).
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigError on config file parse failures.

    Returns:
        PaddockConfig with merged configuration.

    Raises:
        ConfigError: When strict=True and the config file cannot be parsed,
            or when a merged logging value is invalid.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(
        ConfigSource(
            environment=environment,
            features_file=features_file,
            logging_level=log_level,
            logging_file=log_file,
            logging_format=log_format,
        )
    )

    try:
        return builder.build()
    except ValueError as e:
        raise ConfigError(str(e)) from e
