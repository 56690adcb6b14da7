"""Paddock exceptions.

All errors raised by paddock inherit from PaddockError, allowing callers
to catch every paddock failure with a single except clause if desired.
"""

from __future__ import annotations

from pathlib import Path


class PaddockError(Exception):
    """Base exception for paddock errors."""


class FeatureNotFoundError(PaddockError):
    """Raised when querying a feature that was never declared.

    Attributes:
        name: The normalized feature name that was queried.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Feature not found: {name}")


class DeclarationError(PaddockError):
    """Raised when a declaration file cannot be loaded or validated.

    Attributes:
        message: Human-readable description of the problem.
        path: The declaration file, if the error came from one.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        if path is not None:
            super().__init__(f"{path}: {message}")
        else:
            super().__init__(message)


class ConfigError(PaddockError):
    """Raised when the paddock config file cannot be parsed in strict mode."""
