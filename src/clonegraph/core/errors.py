"""Exceptions raised by the cloning engine itself.

Exceptions raised inside a caller's strategy are never wrapped in these; they
reach the caller of ``clone()`` unchanged.
"""

from __future__ import annotations


class CloneError(Exception):
    """Base class for errors raised by clonegraph."""


class RecordConstructionError(CloneError, TypeError):
    """A record's class could not be instantiated to hold its clone.

    Attributes:
        cls: The class that failed to instantiate.
    """

    def __init__(self, cls: type, reason: str) -> None:
        self.cls = cls
        super().__init__(f"Cannot clone {cls.__module__}.{cls.__qualname__}: {reason}")
