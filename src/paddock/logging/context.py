"""Configuration-scope context for structured logging.

Provides context propagation using contextvars, enabling automatic
injection of the scope being configured into log records.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_scope: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "paddock_scope", default=None
)


def get_scope_context() -> str | None:
    """Get the current configuration scope, or None outside a pass."""
    return _scope.get()


@contextmanager
def configuration_scope(scope: str) -> Generator[None, None, None]:
    """Context manager marking a configuration pass for ``scope``.

    The previous scope is restored on exit, so passes may nest.

    Example:
        with configuration_scope("production"):
            logger.info("Applying declarations")  # tagged [production]
    """
    token = _scope.set(scope)
    try:
        yield
    finally:
        _scope.reset(token)


class ScopeContextFilter(logging.Filter):
    """Logging filter that injects the configuration scope into records.

    Adds a ``scope`` attribute for JSON output and a ``scope_tag`` such as
    ``[production] `` for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject scope context into the log record.

        Args:
            record: The log record to process.

        Returns:
            Always True (does not filter, only enriches).
        """
        scope = get_scope_context()
        record.scope = scope
        record.scope_tag = f"[{scope}] " if scope else ""
        return True
