"""Declaration file loading and validation.

Declaration files list features and their states in YAML or TOML:

    features:
      perimeter_fence:
        enabled: true
        in: [development, test]
      raptor_cams: false

They are parsed with PyYAML (only true/false read as booleans) or tomllib
and validated with Pydantic models.
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from paddock.exceptions import DeclarationError
from paddock.records import FeatureRecord, normalize_name

logger = logging.getLogger(__name__)

TOML_SUFFIXES = frozenset({".toml"})

_YAML_BOOL_TAG = "tag:yaml.org,2002:bool"


class _DeclarationLoader(yaml.SafeLoader):
    """SafeLoader that only reads true/false as booleans.

    YAML 1.1 also treats on/off/yes/no as booleans, which would turn
    feature names such as ``off`` into ``False``.
    """


_DeclarationLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _YAML_BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_DeclarationLoader.add_implicit_resolver(
    _YAML_BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class FeatureDeclarationModel(BaseModel):
    """Pydantic model for a single feature declaration."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    enabled: bool = True
    environments: str | list[str] | None = Field(default=None, alias="in")

    @field_validator("environments")
    @classmethod
    def validate_environments(
        cls, v: str | list[str] | None
    ) -> str | list[str] | None:
        """Reject blank environment names."""
        names = [v] if isinstance(v, str) else (v or [])
        for idx, name in enumerate(names):
            if not name.strip():
                raise ValueError(f"environment name at index {idx} is blank")
        return v


class DeclarationFileModel(BaseModel):
    """Pydantic model for a whole declaration file."""

    model_config = ConfigDict(extra="forbid")

    features: dict[str, FeatureDeclarationModel | bool] = Field(
        default_factory=dict
    )

    @field_validator("features", mode="before")
    @classmethod
    def normalize_feature_names(cls, v: Any) -> Any:
        """Coerce non-string keys (numbers, enums) to feature names."""
        if isinstance(v, dict):
            return {normalize_name(name): decl for name, decl in v.items()}
        return v


def _format_validation_error(error: ValidationError) -> str:
    """Format a Pydantic validation error into a user-friendly message."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Declaration validation failed: {loc}: {msg}"
        return f"Declaration validation failed: {msg}"
    return f"Declaration validation failed: {error}"


def parse_declarations(data: Any, path: Path | None = None) -> list[FeatureRecord]:
    """Validate parsed declaration data and build feature records.

    Args:
        data: Parsed YAML/TOML document.
        path: Source file, used in error messages.

    Returns:
        Feature records in declaration order.

    Raises:
        DeclarationError: If the data does not match the declaration schema.
    """
    if data is None:
        return []
    if not isinstance(data, dict):
        raise DeclarationError("Declaration file must be a mapping", path)

    try:
        model = DeclarationFileModel.model_validate(data)
    except ValidationError as e:
        raise DeclarationError(_format_validation_error(e), path) from e

    records = []
    for name, declaration in model.features.items():
        if isinstance(declaration, bool):
            records.append(FeatureRecord.build(name, declaration))
        else:
            records.append(
                FeatureRecord.build(
                    name, declaration.enabled, declaration.environments
                )
            )
    return records


def load_declarations(path: Path) -> list[FeatureRecord]:
    """Load feature records from a YAML or TOML declaration file.

    Args:
        path: Declaration file. ``.toml`` files are parsed as TOML, every
            other suffix as YAML.

    Returns:
        Feature records in declaration order.

    Raises:
        FileNotFoundError: If the file does not exist.
        DeclarationError: If the file cannot be parsed or validated.
    """
    if not path.exists():
        raise FileNotFoundError(f"Declaration file not found: {path}")

    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() in TOML_SUFFIXES:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise DeclarationError(f"Invalid TOML syntax: {e}", path) from e
    else:
        try:
            data = yaml.load(content, Loader=_DeclarationLoader)
        except yaml.YAMLError as e:
            raise DeclarationError(f"Invalid YAML syntax: {e}", path) from e

    records = parse_declarations(data, path)
    logger.debug("Loaded %d feature declaration(s) from %s", len(records), path)
    return records
