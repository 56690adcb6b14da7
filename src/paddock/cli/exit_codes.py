"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    10-19: Validation errors (declarations, config)
    20-29: Lookup errors (features, files)
    60-69: Resolution states
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for paddock CLI commands."""

    # Success (0)
    SUCCESS = 0

    # Validation errors (10-19)
    DECLARATION_ERROR = 10
    CONFIG_ERROR = 11

    # Lookup errors (20-29)
    FEATURE_NOT_FOUND = 20
    FILE_NOT_FOUND = 21

    # Resolution states (60-69)
    FEATURE_INACTIVE = 60
