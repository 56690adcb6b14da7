"""Shared test fixtures for paddock."""

from pathlib import Path

import pytest

from paddock.config import clear_config_cache
from paddock.dsl import Paddock, reset_default_paddock
from paddock.registry import FeatureRegistry

_PADDOCK_ENV_VARS = (
    "PADDOCK_ENV",
    "PADDOCK_FEATURES_FILE",
    "PADDOCK_LOG_LEVEL",
    "PADDOCK_LOG_FILE",
    "PADDOCK_LOG_FORMAT",
    "PADDOCK_LOG_INCLUDE_STDERR",
    "PADDOCK_LOG_MAX_BYTES",
    "PADDOCK_LOG_BACKUP_COUNT",
)


@pytest.fixture(autouse=True)
def isolated_paddock(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from the host environment and global state.

    Points PADDOCK_CONFIG_PATH at a file that does not exist, clears the
    other PADDOCK_* variables, and discards the default Paddock and the
    config cache before and after the test.
    """
    for var in _PADDOCK_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("PADDOCK_CONFIG_PATH", str(tmp_path / "missing.toml"))
    clear_config_cache()
    reset_default_paddock()
    yield
    reset_default_paddock()
    clear_config_cache()


@pytest.fixture
def registry() -> FeatureRegistry:
    """Create an empty registry in the development environment."""
    return FeatureRegistry("development")


@pytest.fixture
def paddock(registry: FeatureRegistry) -> Paddock:
    """Create a Paddock facade over the registry fixture."""
    return Paddock(registry)


@pytest.fixture
def features_yaml(tmp_path: Path) -> Path:
    """Write a representative YAML declaration file."""
    path = tmp_path / "features.yaml"
    path.write_text(
        """\
features:
  perimeter_fence:
    enabled: true
    in: [development, test]
  raptor_cams:
    enabled: false
    in: production
  visitor_center: true
  gift_shop: false
""",
        encoding="utf-8",
    )
    return path
