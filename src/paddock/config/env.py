"""Typed access to PADDOCK_* environment variables.

EnvReader wraps a mapping (os.environ unless one is injected) and converts
values on the way out, so config sources can be tested without patching
the process environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUTHY = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Read and convert environment variables.

    Example:
        reader = EnvReader()
        environment = reader.get_str("PADDOCK_ENV", "development")

        # In tests
        reader = EnvReader(env={"PADDOCK_ENV": "production"})
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the reader.

        Args:
            env: Mapping to read from. Defaults to os.environ.
        """
        self._env: Mapping[str, str] = os.environ if env is None else env

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Return the raw value of ``var``, or ``default`` when unset.

        An empty string counts as set.
        """
        return self._env.get(var, default)

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Return ``var`` as an int.

        Unparseable values are logged and replaced by ``default``.
        """
        raw = self._env.get(var)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, raw)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Return ``var`` as a bool.

        true/1/yes/on (any case) are true; any other value is false.
        """
        raw = self._env.get(var)
        if raw is None:
            return default
        return raw.lower() in _TRUTHY

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Return ``var`` as a user-expanded Path.

        Blank values count as unset and return ``default``.
        """
        raw = self._env.get(var)
        if raw is None or not raw.strip():
            return default
        return Path(raw).expanduser()
