"""Configuration builder with explicit layering.

This module provides ConfigBuilder for building PaddockConfig by composing
configuration sources with explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from paddock.config.env import EnvReader
from paddock.config.models import LoggingConfig, PaddockConfig
from paddock.registry import DEFAULT_ENVIRONMENT


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    environment: str | None = None
    features_file: Path | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds PaddockConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(override_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> PaddockConfig:
        """Build the final PaddockConfig with defaults for unset values.

        Raises:
            ValueError: If a logging value is invalid.
        """
        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return PaddockConfig(
            environment=self._get("environment", DEFAULT_ENVIRONMENT),
            features_file=self._get("features_file", None),
            logging=logging_config,
        )


def _optional_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary from TOML file.

    Returns:
        ConfigSource with values from the config file.
    """
    paddock = file_config.get("paddock", {})
    logging_conf = file_config.get("logging", {})

    environment = paddock.get("environment")
    return ConfigSource(
        environment=str(environment) if environment is not None else None,
        features_file=_optional_path(paddock.get("features_file")),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from PADDOCK_* environment variables.

    Args:
        reader: EnvReader instance for reading environment variables.

    Returns:
        ConfigSource with values from environment variables.
    """
    return ConfigSource(
        environment=reader.get_str("PADDOCK_ENV"),
        features_file=reader.get_path("PADDOCK_FEATURES_FILE"),
        logging_level=reader.get_str("PADDOCK_LOG_LEVEL"),
        logging_file=reader.get_path("PADDOCK_LOG_FILE"),
        logging_format=reader.get_str("PADDOCK_LOG_FORMAT"),
        logging_include_stderr=reader.get_bool("PADDOCK_LOG_INCLUDE_STDERR"),
        logging_max_bytes=reader.get_int("PADDOCK_LOG_MAX_BYTES"),
        logging_backup_count=reader.get_int("PADDOCK_LOG_BACKUP_COUNT"),
    )
