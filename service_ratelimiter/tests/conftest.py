"""
Shared fixtures for rate limiter tests.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration applied by services under test."""
    yield
    structlog.reset_defaults()
