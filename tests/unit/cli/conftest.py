"""Fixtures for CLI tests."""

from __future__ import annotations

import logging

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo the logging setup performed by the CLI group."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in original_handlers:
            handler.close()
    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)
