"""Activation decisions for feature records."""

from __future__ import annotations

from typing import Any

from paddock.records import FeatureRecord, normalize_name


def resolve(record: FeatureRecord, current_environment: Any) -> bool:
    """Decide whether a feature is active in the current environment.

    An unrestricted record resolves to its declared state everywhere. A
    restricted record applies its declared state inside its environments
    and the opposite state outside them: ``enable(x, in=S)`` gates the
    feature to S, while ``disable(x, in=S)`` switches it off only in S.

    Args:
        record: The feature record to evaluate.
        current_environment: The environment to evaluate against.

    Returns:
        True if the feature is active.
    """
    if record.environments is None:
        return record.enabled

    in_scope = normalize_name(current_environment) in record.environments
    return record.enabled if in_scope else not record.enabled
