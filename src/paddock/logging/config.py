"""Root logger setup from a LoggingConfig."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from paddock.logging.context import ScopeContextFilter
from paddock.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from paddock.config.models import LoggingConfig

# CRITICAL is not a configurable level.
_LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# scope_tag renders as "[production] " inside a configuration pass
_TEXT_FORMAT = "%(asctime)s - %(scope_tag)s%(name)s - %(levelname)s - %(message)s"
_TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(_TEXT_FORMAT, datefmt=_TEXT_DATEFMT)


def _open_file_handler(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None if it is unwritable."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {config.file}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Output goes to the configured file, to stderr, or both. Every handler
    carries a ScopeContextFilter so records logged during a configuration
    pass are tagged with its scope. If the log file cannot be opened,
    stderr is used instead.

    Args:
        config: Logging configuration.
    """
    level = _LEVEL_MAP.get(config.level.casefold(), logging.INFO)
    formatter = _build_formatter(config.format)
    scope_filter = ScopeContextFilter()

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_file_handler(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(scope_filter)
        root_logger.addHandler(handler)
