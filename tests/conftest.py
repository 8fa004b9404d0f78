"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field

from clonegraph import CloneSettings, get_settings


@pytest.fixture
def settings():
    """Default policy, ignoring any .env file."""
    return CloneSettings(_env_file=None)


@pytest.fixture
def fresh_settings():
    """Clear the cached process-wide settings before and after a test."""
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


@dataclass
class FixtureNode:
    name: str
    children: list["FixtureNode"] = field(default_factory=list)
    parent: "FixtureNode | None" = None


@dataclass(eq=False)
class FixtureKey:
    """Identity-hashed key, like any plain user object."""

    label: str


@pytest.fixture
def node_cls():
    return FixtureNode


@pytest.fixture
def key_cls():
    return FixtureKey
