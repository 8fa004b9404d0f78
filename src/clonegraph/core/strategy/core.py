"""Strategy registry: resolves which strategy clones a given value.

Two layers are consulted, caller overrides first and built-in defaults second.
Each layer is tried by exact type before ancestor/capability match:

    1. overrides, exact type
    2. defaults, exact type
    3. overrides, isinstance match in insertion order
    4. the value's own ``__clone__`` (Cloneable protocol)
    5. defaults, isinstance match in table order
    6. generic record strategy
    7. Directive.UNSUPPORTED

Usage:
    registry = StrategyRegistry({Matrix: NO_CLONE})
    registry.resolve(Matrix())   # -> Directive.NO_CLONE
    registry.resolve({})         # -> the built-in mapping strategy
"""

from __future__ import annotations

import warnings
from collections.abc import Generator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from clonegraph.core.classifier import is_atomic_type, is_record
from clonegraph.core.strategy.defaults import default_strategies, record_strategy
from clonegraph.core.strategy.models import (
    Cloneable,
    CloneStrategy,
    Directive,
    RecordAllocation,
    Rebuild,
    Resolution,
    Staged,
)
from clonegraph.core.types import CloneFn

if TYPE_CHECKING:
    from clonegraph.config import CloneSettings

_RESOLUTION_TYPES = (CloneStrategy, Staged, Rebuild, Directive)


def _stage_protocol(original: Cloneable, clone: CloneFn) -> Generator[Any, None, None]:
    return original.__clone__(clone)


PROTOCOL_STRATEGY: Staged[Any] = Staged(_stage_protocol)
"""Staged strategy that delegates to the value's own ``__clone__``."""


class StrategyRegistry:
    """Per-call lookup of cloning strategies.

    Holds the caller's overrides and the built-in table for one policy. A
    registry carries no traversal state and can be reused, but ``clone()``
    builds a fresh one for every top-level call.

    Args:
        overrides: Mapping from class to strategy or directive. Classes may be
            ABCs or runtime-checkable protocols for capability matching.
        clone_mapping_keys: Whether the mapping defaults clone keys.
        record_allocation: How records and container subclasses are created.
        warn_on_atomic_overrides: Warn about overrides that can never apply.

    Raises:
        TypeError: If an override key is not a class or a value is not a
            strategy or directive.
    """

    def __init__(
        self,
        overrides: Mapping[type, Resolution] | None = None,
        *,
        clone_mapping_keys: bool = True,
        record_allocation: RecordAllocation = RecordAllocation.NEW,
        warn_on_atomic_overrides: bool = True,
    ) -> None:
        """Validate overrides and bind the default table for this policy."""
        self._overrides: dict[type, Resolution] = {}
        for cls, resolution in (overrides or {}).items():
            if not isinstance(cls, type):
                raise TypeError(f"Strategy override keys must be classes, got {cls!r}")
            if not isinstance(resolution, _RESOLUTION_TYPES):
                raise TypeError(
                    f"Override for {cls.__name__} must be a CloneStrategy, Staged, Rebuild "
                    f"or Directive, got {type(resolution).__name__}"
                )
            if warn_on_atomic_overrides and is_atomic_type(cls):
                warnings.warn(
                    f"Strategy override for {cls.__name__} has no effect: "
                    f"{cls.__name__} values are atomic and never resolved.",
                    stacklevel=2,
                )
            self._overrides[cls] = resolution
        self._defaults = default_strategies(clone_mapping_keys, record_allocation)
        self._record = record_strategy(record_allocation)

    @classmethod
    def from_settings(
        cls, overrides: Mapping[type, Resolution] | None, settings: CloneSettings
    ) -> StrategyRegistry:
        """Create a registry whose policy comes from loaded settings.

        Args:
            overrides: Caller-supplied strategies, or None.
            settings: Loaded CloneSettings.

        Returns:
            New StrategyRegistry.
        """
        return cls(
            overrides,
            clone_mapping_keys=settings.clone_mapping_keys,
            record_allocation=settings.record_allocation,
            warn_on_atomic_overrides=settings.warn_on_atomic_overrides,
        )

    @property
    def overrides(self) -> Mapping[type, Resolution]:
        """Caller overrides in registration order (read-only)."""
        return MappingProxyType(self._overrides)

    @property
    def defaults(self) -> Mapping[type, Resolution]:
        """Built-in strategy table in ancestor-lookup order (read-only)."""
        return self._defaults

    def resolve(self, value: Any) -> Resolution:
        """Find the strategy for a compound value.

        Args:
            value: Value already classified as compound.

        Returns:
            The first matching strategy or directive, falling back to the
            record strategy, then to Directive.UNSUPPORTED.
        """
        cls = type(value)
        if cls in self._overrides:
            return self._overrides[cls]
        if cls in self._defaults:
            return self._defaults[cls]
        for target, resolution in self._overrides.items():
            if isinstance(value, target):
                return resolution
        if isinstance(value, Cloneable) and not isinstance(value, type):
            return PROTOCOL_STRATEGY
        for target, resolution in self._defaults.items():
            if isinstance(value, target):
                return resolution
        if is_record(value):
            return self._record
        return Directive.UNSUPPORTED
