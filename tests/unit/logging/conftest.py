"""Fixtures for logging tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture
def reset_root_logger():
    """Restore root logger handlers and level after a test."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in original_handlers:
            handler.close()
    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)
