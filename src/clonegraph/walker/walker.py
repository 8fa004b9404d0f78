"""Graph walker: the identity-preserving deep-copy traversal.

The walker registers each compound value's skeleton in its identity map before
cloning anything nested inside it. A nested reference back to an ancestor
therefore resolves to that ancestor's skeleton, which makes cycles terminate
and keeps shared references shared.

Usage:
    from clonegraph import clone

    node = {"name": "root"}
    node["self"] = node
    copy = clone(node)
    assert copy["self"] is copy
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Mapping
from typing import Any

from clonegraph.config import CloneSettings, get_settings
from clonegraph.core.classifier import classify
from clonegraph.core.errors import CloneError
from clonegraph.core.strategy import (
    CloneStrategy,
    Directive,
    Rebuild,
    Resolution,
    Staged,
    StrategyRegistry,
)
from clonegraph.core.types import CloneFn, Kind

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class GraphWalker:
    """Single-use traversal state for one top-level clone.

    Maps ``id(original)`` to its clone. Originals are kept alive until the
    walker is discarded so their ids cannot be reused mid-traversal.

    Args:
        registry: Strategy registry to resolve compound values with.
    """

    def __init__(self, registry: StrategyRegistry) -> None:
        """Initialize an empty identity map around a registry."""
        self._registry = registry
        self._memo: dict[int, Any] = {}
        self._keep_alive: list[Any] = []

    @property
    def registry(self) -> StrategyRegistry:
        """The registry strategies are resolved from."""
        return self._registry

    def __len__(self) -> int:
        """Number of compound values cloned so far."""
        return len(self._memo)

    def clone(self, value: Any) -> Any:
        """Clone a value, reusing clones already made by this walker.

        Args:
            value: Any value.

        Returns:
            The value itself if atomic or not to be copied, otherwise its clone.
        """
        if classify(value, self._registry.overrides) is Kind.ATOMIC:
            return value
        key = id(value)
        if key in self._memo:
            return self._memo[key]
        return self._dispatch(value, self._registry.resolve(value))

    def _dispatch(self, value: Any, resolution: Resolution) -> Any:
        match resolution:
            case CloneStrategy(construct=construct, populate=populate):
                skeleton = construct(value)
                self._record(value, skeleton)
                if populate is not None:
                    populate(value, skeleton, self.clone)
                return skeleton
            case Staged(stages=stages):
                return self._run_stages(value, stages)
            case Rebuild(build=build):
                built = build(value, self.clone)
                # a cycle through a mutable child may have registered value already
                key = id(value)
                if key in self._memo:
                    return self._memo[key]
                self._record(value, built)
                return built
            case Directive.UNSUPPORTED:
                logger.debug(
                    "No clone strategy for %s.%s; sharing the original reference",
                    type(value).__module__,
                    type(value).__qualname__,
                )
                return value
            case _:
                return value

    def _run_stages(
        self, value: Any, stages: Callable[[Any, CloneFn], Generator[Any, None, None]]
    ) -> Any:
        recorded = False

        def clone_nested(item: Any) -> Any:
            if not recorded:
                raise CloneError(
                    f"Staged strategy for {type(value).__name__} called clone() "
                    "before yielding its skeleton"
                )
            return self.clone(item)

        generator: Generator[Any, None, None] = stages(value, clone_nested)
        try:
            skeleton = next(generator)
        except StopIteration:
            raise CloneError(
                f"Staged strategy for {type(value).__name__} finished without yielding a skeleton"
            ) from None
        self._record(value, skeleton)
        recorded = True
        if next(generator, _EXHAUSTED) is not _EXHAUSTED:
            generator.close()
            raise CloneError(
                f"Staged strategy for {type(value).__name__} yielded more than one skeleton"
            )
        return skeleton

    def _record(self, original: Any, copy: Any) -> None:
        self._memo[id(original)] = copy
        self._keep_alive.append(original)


def clone(
    value: Any,
    strategies: Mapping[type, Resolution] | None = None,
    *,
    settings: CloneSettings | None = None,
) -> Any:
    """Deep-copy a value, preserving shared references and cycles.

    Every call starts a fresh identity map, so a strategy that calls
    ``clone()`` itself gets an independent copy rather than the outer
    traversal's in-progress skeletons.

    Args:
        value: Root of the graph to copy.
        strategies: Optional overrides mapping a class to a strategy, or to
            NO_CLONE to share its instances. Checked before the built-ins.
        settings: Cloning policy. Defaults to get_settings(), loaded from the
            environment once per process.

    Returns:
        Atomic values and NO_CLONE values unchanged; otherwise an independent
        copy with the same shape.

    Raises:
        RecordConstructionError: If a record's class cannot be instantiated
            under the configured allocation policy.
        CloneError: If a staged strategy misbehaves.
        Exception: Whatever a strategy raises, unchanged.
    """
    settings = settings if settings is not None else get_settings()
    walker = GraphWalker(StrategyRegistry.from_settings(strategies, settings))
    return walker.clone(value)
