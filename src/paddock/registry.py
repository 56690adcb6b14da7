"""Feature registry.

The registry owns the canonical feature records and the current
environment, and mediates every mutation, query and reset.

Thread-safety: all operations take a single re-entrant lock, so a query
always sees a consistent record/environment pair and batch declarations
are applied atomically. Records are immutable, so copying the mapping is
a copy by value.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Generator, Iterable, Mapping
from contextlib import contextmanager
from typing import Any

from paddock.exceptions import FeatureNotFoundError
from paddock.records import FeatureRecord, normalize_name
from paddock.resolver import resolve

DEFAULT_ENVIRONMENT = "development"


class FeatureRegistry:
    """Mapping of feature names to records plus the current environment.

    Example:
        registry = FeatureRegistry(environment="dev")
        registry.enable("perimeter_fence", ["dev", "test"])
        registry.query("perimeter_fence")  # True
        registry.set_environment("prod")
        registry.query("perimeter_fence")  # False
    """

    def __init__(self, environment: Any = DEFAULT_ENVIRONMENT) -> None:
        """Initialize an empty registry.

        Args:
            environment: Initial current environment.
        """
        self._lock = threading.RLock()
        self._environment = normalize_name(environment)
        self._records: dict[str, FeatureRecord] = {}
        self._baseline: Mapping[str, FeatureRecord] | None = None

    @property
    def environment(self) -> str:
        """The current environment."""
        with self._lock:
            return self._environment

    @property
    def has_baseline(self) -> bool:
        """True once snapshot_baseline() has been called."""
        with self._lock:
            return self._baseline is not None

    def set_environment(self, name: Any) -> None:
        """Replace the current environment. Any name is accepted."""
        with self._lock:
            self._environment = normalize_name(name)

    def declare(
        self,
        name: Any,
        enabled: bool,
        environments: Any = None,
    ) -> FeatureRecord:
        """Store a new record for ``name``, replacing any previous one.

        Args:
            name: Feature name.
            enabled: Declared state.
            environments: Optional environment restriction (scalar or
                iterable). Empty or None means unrestricted.

        Returns:
            The stored record.
        """
        record = FeatureRecord.build(name, enabled, environments)
        with self._lock:
            self._records[record.name] = record
        return record

    def declare_all(self, records: Iterable[FeatureRecord]) -> None:
        """Store a batch of records in one critical section."""
        batch = list(records)
        with self._lock:
            for record in batch:
                self._records[record.name] = record

    def apply_configuration(
        self,
        environment: Any,
        records: Iterable[FeatureRecord],
        *,
        capture_baseline: bool = False,
    ) -> None:
        """Switch environment, store a batch and optionally snapshot it.

        Everything happens in one critical section, so a concurrent
        mutation cannot land between the batch and the baseline.

        Args:
            environment: New current environment.
            records: Records to store, later ones replacing earlier ones.
            capture_baseline: Also capture the result as the reset target.
        """
        with self._lock:
            self.set_environment(environment)
            self.declare_all(records)
            if capture_baseline:
                self.snapshot_baseline()

    def enable(self, name: Any, environments: Any = None) -> FeatureRecord:
        """Declare ``name`` enabled, optionally restricted to environments."""
        return self.declare(name, True, environments)

    def disable(self, name: Any, environments: Any = None) -> FeatureRecord:
        """Declare ``name`` disabled, optionally only in some environments."""
        return self.declare(name, False, environments)

    def snapshot_baseline(self) -> None:
        """Capture the current records as the target for reset()."""
        with self._lock:
            self._baseline = dict(self._records)

    def reset(self) -> None:
        """Restore the records captured by snapshot_baseline().

        Mutations made since the snapshot are discarded. Without a
        snapshot this does nothing, so it is safe to call speculatively.
        """
        with self._lock:
            if self._baseline is None:
                return
            self._records = dict(self._baseline)

    def query(self, name: Any) -> bool:
        """Resolve whether ``name`` is active in the current environment.

        Raises:
            FeatureNotFoundError: If ``name`` was never declared.
        """
        key = normalize_name(name)
        with self._lock:
            record = self._records.get(key)
            environment = self._environment
        if record is None:
            raise FeatureNotFoundError(key)
        return resolve(record, environment)

    def query_and_run(
        self,
        name: Any,
        action: Callable[[], Any] | None = None,
    ) -> bool:
        """Resolve ``name`` and call ``action`` if it is active.

        The action runs outside the registry lock and its return value is
        ignored. Exceptions it raises propagate unchanged.

        Returns:
            The resolved decision.

        Raises:
            FeatureNotFoundError: If ``name`` was never declared.
        """
        active = self.query(name)
        if active and action is not None:
            action()
        return active

    def get(self, name: Any) -> FeatureRecord | None:
        """Return the record for ``name``, or None if undeclared."""
        with self._lock:
            return self._records.get(normalize_name(name))

    def names(self) -> list[str]:
        """Return declared feature names in sorted order."""
        with self._lock:
            return sorted(self._records)

    def records(self) -> dict[str, FeatureRecord]:
        """Return a copy of the name to record mapping."""
        with self._lock:
            return dict(self._records)

    def evaluate_all(self) -> dict[str, bool]:
        """Resolve every declared feature against the current environment."""
        with self._lock:
            environment = self._environment
            records = dict(self._records)
        return {
            name: resolve(records[name], environment) for name in sorted(records)
        }

    @contextmanager
    def override(
        self,
        name: Any,
        enabled: bool,
        environments: Any = None,
    ) -> Generator[FeatureRecord, None, None]:
        """Temporarily declare a feature for the duration of a with block.

        The previous record is restored on exit, or the name is removed if
        it was undeclared before.

        Example:
            with registry.override("new_parser", True):
                run_ingest()
        """
        key = normalize_name(name)
        with self._lock:
            previous = self._records.get(key)
        record = self.declare(key, enabled, environments)
        try:
            yield record
        finally:
            with self._lock:
                if previous is None:
                    self._records.pop(key, None)
                else:
                    self._records[key] = previous

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return normalize_name(name) in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:
        return (
            f"FeatureRegistry(environment={self.environment!r}, "
            f"features={len(self)})"
        )
