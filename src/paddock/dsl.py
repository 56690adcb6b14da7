"""Declarative facade over the feature registry.

A configuration pass groups declarations for one scope (the environment
being configured) and applies them atomically:

    paddock = Paddock()
    with paddock.configuring("production") as features:
        features.enable("perimeter_fence")
        features.disable("raptor_cams", "production")

    paddock.feature("perimeter_fence", lambda: print("fence is up"))

The first pass for a scope also captures the registry baseline that
reset() rolls back to. Later passes for the same scope leave the baseline
alone.

The module-level helpers (feature(), configure(), reset(), ...) delegate to
a lazily created process-wide Paddock built from get_config().
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Generator, Iterable
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Any, TypeVar

from paddock.config import get_config
from paddock.declarations import load_declarations
from paddock.logging import configuration_scope
from paddock.records import FeatureRecord, normalize_name
from paddock.registry import DEFAULT_ENVIRONMENT, FeatureRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FeatureBuilder:
    """Collects declarations during a configuration pass.

    Declarations are only applied to the registry when the pass completes.
    A later declaration of the same name within one pass replaces the
    earlier one.
    """

    def __init__(self, scope: str) -> None:
        self.scope = scope
        self._records: dict[str, FeatureRecord] = {}

    def enable(self, name: Any, environments: Any = None) -> FeatureRecord:
        """Declare ``name`` enabled, optionally only in ``environments``."""
        return self._add(FeatureRecord.build(name, True, environments))

    def disable(self, name: Any, environments: Any = None) -> FeatureRecord:
        """Declare ``name`` disabled, optionally only in ``environments``."""
        return self._add(FeatureRecord.build(name, False, environments))

    def extend(self, records: Iterable[FeatureRecord]) -> None:
        """Add already-built records, e.g. from a declaration file."""
        for record in records:
            self._add(record)

    @property
    def records(self) -> list[FeatureRecord]:
        """Collected records in declaration order."""
        return list(self._records.values())

    def _add(self, record: FeatureRecord) -> FeatureRecord:
        self._records.pop(record.name, None)
        self._records[record.name] = record
        return record

    def __len__(self) -> int:
        return len(self._records)


class Paddock:
    """Declarative entry point owning a FeatureRegistry handle."""

    def __init__(
        self,
        registry: FeatureRegistry | None = None,
        environment: Any = None,
    ) -> None:
        """Initialize the facade.

        Args:
            registry: Registry to operate on. A new one is created if None.
            environment: Starting environment. Defaults to the registry's
                own environment, or "development" for a new registry.
        """
        if registry is None:
            registry = FeatureRegistry(
                environment if environment is not None else DEFAULT_ENVIRONMENT
            )
        elif environment is not None:
            registry.set_environment(environment)
        self._registry = registry
        self._configured_scopes: set[str] = set()
        self._scopes_lock = threading.Lock()

    @property
    def registry(self) -> FeatureRegistry:
        """The underlying registry."""
        return self._registry

    @property
    def environment(self) -> str:
        """The current environment."""
        return self._registry.environment

    @environment.setter
    def environment(self, name: Any) -> None:
        self._registry.set_environment(name)

    def set_environment(self, name: Any) -> None:
        """Replace the current environment."""
        self._registry.set_environment(name)

    @contextmanager
    def configuring(self, environment: Any) -> Generator[FeatureBuilder, None, None]:
        """Run a configuration pass for ``environment``.

        On normal exit the current environment becomes ``environment`` and
        the collected declarations are applied. If the block raises,
        nothing is applied.

        Yields:
            FeatureBuilder collecting the pass's declarations.
        """
        scope = normalize_name(environment)
        builder = FeatureBuilder(scope)
        with configuration_scope(scope):
            yield builder
            self._apply(builder)

    def configure(
        self,
        environment: Any,
        block: Callable[[FeatureBuilder], Any],
    ) -> FeatureBuilder:
        """Run ``block(builder)`` as a configuration pass for ``environment``.

        Returns:
            The builder, after its declarations were applied.
        """
        with self.configuring(environment) as builder:
            block(builder)
        return builder

    def load(self, path: Path, environment: Any = None) -> FeatureBuilder:
        """Run a configuration pass from a declaration file.

        Args:
            path: YAML or TOML declaration file.
            environment: Scope to configure. Defaults to the current
                environment.

        Raises:
            FileNotFoundError: If the file does not exist.
            DeclarationError: If the file is invalid.
        """
        records = load_declarations(path)
        scope = environment if environment is not None else self.environment
        with self.configuring(scope) as builder:
            builder.extend(records)
        return builder

    def _apply(self, builder: FeatureBuilder) -> None:
        with self._scopes_lock:
            first_pass = builder.scope not in self._configured_scopes
            self._configured_scopes.add(builder.scope)

        self._registry.apply_configuration(
            builder.scope, builder.records, capture_baseline=first_pass
        )
        if first_pass:
            logger.debug("Captured baseline of %d feature(s)", len(self._registry))
        logger.debug("Configured %d feature(s)", len(builder))

    def enable(self, name: Any, environments: Any = None) -> FeatureRecord:
        """Enable a feature outside a configuration pass.

        reset() discards such changes.
        """
        return self._registry.enable(name, environments)

    def disable(self, name: Any, environments: Any = None) -> FeatureRecord:
        """Disable a feature outside a configuration pass.

        reset() discards such changes.
        """
        return self._registry.disable(name, environments)

    def reset(self) -> None:
        """Roll back to the baseline captured by the first configuration pass."""
        if not self._registry.has_baseline:
            logger.debug("Reset requested before any configuration pass; ignoring")
        self._registry.reset()

    def feature(self, name: Any, action: Callable[[], Any] | None = None) -> bool:
        """Check a feature and run ``action`` when it is active.

        Returns:
            True if the feature is active in the current environment.

        Raises:
            FeatureNotFoundError: If ``name`` was never declared.
        """
        return self._registry.query_and_run(name, action)

    def is_enabled(self, name: Any) -> bool:
        """Check a feature without running anything."""
        return self._registry.query(name)

    def override(
        self, name: Any, enabled: bool, environments: Any = None
    ) -> AbstractContextManager[FeatureRecord]:
        """Temporarily declare a feature for a with block."""
        return self._registry.override(name, enabled, environments)

    def gate(
        self, name: Any, fallback: Any = None
    ) -> Callable[[Callable[..., T]], Callable[..., T | Any]]:
        """Decorator running the wrapped function only when ``name`` is active.

        The feature is checked on every call. When it is inactive the
        function is skipped and ``fallback`` is returned.

        Example:
            @paddock.gate("new_parser", fallback=[])
            def parse(doc): ...
        """

        def decorator(func: Callable[..., T]) -> Callable[..., T | Any]:
            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> T | Any:
                if self._registry.query(name):
                    return func(*args, **kwargs)
                return fallback

            return wrapper

        return decorator

    def __repr__(self) -> str:
        return f"Paddock({self._registry!r})"


# Module-level default instance
_default_paddock: Paddock | None = None
_default_lock = threading.Lock()


def get_paddock() -> Paddock:
    """Get the process-wide Paddock, creating it on first use.

    The starting environment comes from get_config() (PADDOCK_ENV or the
    config file). If a declaration file is configured it is applied as the
    first configuration pass.
    """
    global _default_paddock
    if _default_paddock is None:
        with _default_lock:
            if _default_paddock is None:
                config = get_config()
                paddock = Paddock(environment=config.environment)
                if config.features_file is not None:
                    paddock.load(config.features_file)
                _default_paddock = paddock
    return _default_paddock


def reset_default_paddock() -> None:
    """Discard the process-wide Paddock (for testing)."""
    global _default_paddock
    with _default_lock:
        _default_paddock = None


# Convenience functions that use the default instance


def feature(name: Any, action: Callable[[], Any] | None = None) -> bool:
    """Check a feature on the default Paddock and run ``action`` if active."""
    return get_paddock().feature(name, action)


def is_enabled(name: Any) -> bool:
    """Check a feature on the default Paddock."""
    return get_paddock().is_enabled(name)


def configure(
    environment: Any, block: Callable[[FeatureBuilder], Any]
) -> FeatureBuilder:
    """Run a configuration pass on the default Paddock."""
    return get_paddock().configure(environment, block)


def configuring(environment: Any) -> AbstractContextManager[FeatureBuilder]:
    """Context manager form of configure() on the default Paddock."""
    return get_paddock().configuring(environment)


def enable(name: Any, environments: Any = None) -> FeatureRecord:
    """Enable a feature on the default Paddock outside a configuration pass."""
    return get_paddock().enable(name, environments)


def disable(name: Any, environments: Any = None) -> FeatureRecord:
    """Disable a feature on the default Paddock outside a configuration pass."""
    return get_paddock().disable(name, environments)


def reset() -> None:
    """Roll the default Paddock back to its baseline."""
    get_paddock().reset()


def set_environment(name: Any) -> None:
    """Set the current environment of the default Paddock."""
    get_paddock().set_environment(name)
