"""Core functionalities: stateless classification and strategy resolution.

Architecture Note:
    core/ holds pure, stateless building blocks: value classification, the
    strategy shapes, the built-in strategies and the registry that picks
    between them. The stateful traversal lives in walker/.
"""

from clonegraph.core.classifier import ATOMIC_TYPES, FUNCTION_TYPES, classify, is_record
from clonegraph.core.errors import CloneError, RecordConstructionError
from clonegraph.core.strategy import (
    NO_CLONE,
    PROTOCOL_STRATEGY,
    SHARED_TYPES,
    Cloneable,
    CloneStrategy,
    Directive,
    RecordAllocation,
    Rebuild,
    Resolution,
    Staged,
    Strategy,
    StrategyRegistry,
    allocate,
    copy_attributes,
    default_strategies,
    record_strategy,
)
from clonegraph.core.types import CloneFn, Kind

__all__ = [
    # Types
    "CloneFn",
    "Kind",
    # Errors
    "CloneError",
    "RecordConstructionError",
    # Classifier
    "classify",
    "is_record",
    "ATOMIC_TYPES",
    "FUNCTION_TYPES",
    # Strategy
    "CloneStrategy",
    "Staged",
    "Rebuild",
    "Strategy",
    "Resolution",
    "Directive",
    "NO_CLONE",
    "RecordAllocation",
    "Cloneable",
    "SHARED_TYPES",
    "allocate",
    "copy_attributes",
    "default_strategies",
    "record_strategy",
    # Registry
    "StrategyRegistry",
    "PROTOCOL_STRATEGY",
]
