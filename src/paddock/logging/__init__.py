"""Structured logging module for paddock.

Provides configurable logging with JSON format support and file rotation.
Includes configuration-scope context so log lines emitted during a
configuration pass carry the scope being configured.
"""

from paddock.logging.config import configure_logging
from paddock.logging.context import (
    ScopeContextFilter,
    configuration_scope,
    get_scope_context,
)
from paddock.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "ScopeContextFilter",
    "configuration_scope",
    "configure_logging",
    "get_scope_context",
]
