"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from entitymarshal import LocalRuntimeCache, Marshal, MarshalSettings, TypeRegistry


@pytest.fixture
def cache():
    """Isolated runtime cache, so tests never share discovered metadata."""
    return LocalRuntimeCache()


@pytest.fixture
def registry():
    """Fresh TypeRegistry for testing."""
    return TypeRegistry()


@pytest.fixture
def marshal():
    """Marshal backed by the global type registry."""
    return Marshal()


@pytest.fixture
def settings():
    """Settings independent of the environment."""
    return MarshalSettings(_env_file=None)
