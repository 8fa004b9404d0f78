"""Core type definitions for clonegraph."""

from collections.abc import Callable
from enum import Enum, auto
from typing import Any

type CloneFn = Callable[[Any], Any]
"""Recursive clone callback handed to populate steps.

Routes a nested value back through the walker that is cloning its parent, so
the nested value shares that walker's identity map and overrides.
"""


class Kind(Enum):
    """Classification of a value for cloning purposes."""

    ATOMIC = auto()
    """No internal structure to copy; the value itself is returned."""

    COMPOUND = auto()
    """Has internal structure; a strategy decides how to copy it."""
