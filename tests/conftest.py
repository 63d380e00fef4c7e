"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from ccopy import Config, CopySettings


@pytest.fixture
def settings():
    """Settings with defaults, independent of any .env file."""
    return CopySettings(_env_file=None)


@pytest.fixture
def empty_config(settings):
    """Registry with no transformers."""
    return Config(settings=settings)
