"""Paddock - environment-aware feature toggles.

Declare features, restrict them to environments, and check or gate code
on them at runtime:

    from paddock import Paddock

    paddock = Paddock()
    with paddock.configuring("development") as features:
        features.enable("perimeter_fence", ["development", "test"])
        features.disable("raptor_cams", "production")

    if paddock.feature("perimeter_fence"):
        ...
"""

__version__ = "0.1.0"

from paddock.declarations import load_declarations, parse_declarations
from paddock.dsl import (
    FeatureBuilder,
    Paddock,
    configure,
    configuring,
    disable,
    enable,
    feature,
    get_paddock,
    is_enabled,
    reset,
    reset_default_paddock,
    set_environment,
)
from paddock.exceptions import (
    ConfigError,
    DeclarationError,
    FeatureNotFoundError,
    PaddockError,
)
from paddock.records import FeatureRecord, normalize_environments, normalize_name
from paddock.registry import DEFAULT_ENVIRONMENT, FeatureRegistry
from paddock.resolver import resolve

__all__ = [
    "__version__",
    # Core
    "DEFAULT_ENVIRONMENT",
    "FeatureRecord",
    "FeatureRegistry",
    "normalize_environments",
    "normalize_name",
    "resolve",
    # Facade
    "FeatureBuilder",
    "Paddock",
    "configure",
    "configuring",
    "disable",
    "enable",
    "feature",
    "get_paddock",
    "is_enabled",
    "reset",
    "reset_default_paddock",
    "set_environment",
    # Declaration files
    "load_declarations",
    "parse_declarations",
    # Errors
    "ConfigError",
    "DeclarationError",
    "FeatureNotFoundError",
    "PaddockError",
]
