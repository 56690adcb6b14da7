"""Feature records and input normalization.

Names and environments arrive as plain strings, str-valued enums, or
sequences of either. Everything is normalized to canonical strings here so
the resolver and registry only ever compare strings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any


def normalize_name(value: Any) -> str:
    """Return the canonical string form of a feature or environment name.

    Enum members normalize to their value, bytes are decoded as UTF-8
    (undecodable bytes become surrogate escapes, so this never fails) and
    everything else goes through ``str()``.
    Comparison stays case-sensitive.
    """
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="surrogateescape")
    return value if isinstance(value, str) else str(value)


def normalize_environments(value: Any) -> frozenset[str] | None:
    """Normalize an environment restriction.

    Args:
        value: None, a single environment, or an iterable of environments.

    Returns:
        A non-empty frozenset of environment names, or None when the input
        is absent or empty (unrestricted).
    """
    if value is None:
        return None
    if isinstance(value, (str, bytes, Enum)) or not isinstance(value, Iterable):
        return frozenset({normalize_name(value)})
    environments = frozenset(normalize_name(item) for item in value)
    return environments or None


@dataclass(frozen=True)
class FeatureRecord:
    """One feature's declared state.

    ``environments`` is None for an unrestricted feature; otherwise it is a
    non-empty set of environment names.
    """

    name: str
    enabled: bool
    environments: frozenset[str] | None = None

    @classmethod
    def build(
        cls,
        name: Any,
        enabled: bool,
        environments: Any = None,
    ) -> FeatureRecord:
        """Build a record from loosely typed declaration input."""
        return cls(
            name=normalize_name(name),
            enabled=bool(enabled),
            environments=normalize_environments(environments),
        )

    @property
    def unrestricted(self) -> bool:
        """True if the declared state applies in every environment."""
        return self.environments is None

    def describe_environments(self) -> str:
        """Comma-separated environment list, or ``*`` when unrestricted."""
        if self.environments is None:
            return "*"
        return ",".join(sorted(self.environments))
