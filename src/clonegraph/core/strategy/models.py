"""Strategy models: strategy shapes, directives, and the object-level protocol.

A strategy tells the walker how to clone one kind of compound value. Three
shapes exist because Python values differ in how they can be rebuilt:

- ``CloneStrategy``: explicit construct/populate pair for mutable containers.
- ``Staged``: a generator that yields the skeleton, then fills it in.
- ``Rebuild``: single-step rebuild for immutable containers such as tuples.

Usage:
    node_strategy = CloneStrategy(
        construct=lambda node: Node(node.name),
        populate=lambda src, dst, clone: dst.children.extend(map(clone, src.children)),
    )
    clone(tree, {Node: node_strategy})
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass
from enum import Enum, StrEnum, auto
from typing import Any, Protocol, Self, runtime_checkable

from clonegraph.core.types import CloneFn


class Directive(Enum):
    """Resolution outcomes that are not strategies."""

    NO_CLONE = auto()
    """Return the original reference unchanged."""

    UNSUPPORTED = auto()
    """No strategy matched; the walker degrades to sharing the reference."""


NO_CLONE = Directive.NO_CLONE


class RecordAllocation(StrEnum):
    """How the generic record strategy instantiates the clone's class."""

    NEW = "new"
    """Allocate with ``cls.__new__(cls)`` without running ``__init__``."""

    INIT = "init"
    """Call ``cls()``. The constructor must accept no arguments."""


@dataclass(frozen=True, slots=True)
class CloneStrategy[T]:
    """Two-phase strategy: build an empty skeleton, then fill it.

    The walker records the skeleton in its identity map between the two
    phases, so nested references back to the original resolve to it.
    """

    construct: Callable[[T], T]
    """Return an empty clone of the right type. Must not recurse."""

    populate: Callable[[T, T, CloneFn], None] | None = None
    """Fill ``skeleton`` from ``original`` using ``clone`` for nested values."""


@dataclass(frozen=True, slots=True)
class Staged[T]:
    """Generator strategy: yield the skeleton once, fill it after resuming.

    Example:
        def stage_node(node, clone):
            copy = Node.__new__(Node)
            yield copy
            copy.children = [clone(child) for child in node.children]
    """

    stages: Callable[[T, CloneFn], Generator[T, None, None]]


@dataclass(frozen=True, slots=True)
class Rebuild[T]:
    """Single-step strategy for values that cannot exist half-built.

    Nested values are cloned first and the result assembled afterwards, so a
    cycle that passes through a rebuilt value must also pass through a
    two-phase one.
    """

    build: Callable[[T, CloneFn], T]


type Strategy = CloneStrategy[Any] | Staged[Any] | Rebuild[Any]
type Resolution = Strategy | Directive
"""What the registry answers for a value."""


@runtime_checkable
class Cloneable(Protocol):
    """Object that drives its own clone, staged like ``Staged``."""

    def __clone__(self, clone: CloneFn) -> Generator[Self, None, None]: ...
