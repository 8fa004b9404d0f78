"""clonegraph: identity-preserving deep copy for arbitrary object graphs.

Usage:
    from clonegraph import NO_CLONE, CloneStrategy, clone

    graph = {"nodes": [], "meta": {"created": datetime.now()}}
    graph["nodes"].append(graph)

    copy = clone(graph)
    assert copy["nodes"][0] is copy

    # Share every Connection instead of copying it
    copy = clone(session, {Connection: NO_CLONE})
"""

__version__ = "0.1.0"

# Core primitives
from clonegraph.core import (
    NO_CLONE,
    Cloneable,
    CloneError,
    CloneFn,
    CloneStrategy,
    Directive,
    Kind,
    RecordAllocation,
    RecordConstructionError,
    Rebuild,
    Staged,
    StrategyRegistry,
    classify,
    default_strategies,
)

# Configuration
from clonegraph.config import CloneSettings, get_settings

# Traversal
from clonegraph.walker import GraphWalker, clone

__all__ = [
    # Version
    "__version__",
    # Entry point
    "clone",
    "GraphWalker",
    # Classification
    "classify",
    "Kind",
    # Strategies
    "CloneFn",
    "CloneStrategy",
    "Staged",
    "Rebuild",
    "Directive",
    "NO_CLONE",
    "Cloneable",
    "StrategyRegistry",
    "default_strategies",
    # Configuration
    "CloneSettings",
    "get_settings",
    "RecordAllocation",
    # Errors
    "CloneError",
    "RecordConstructionError",
]
