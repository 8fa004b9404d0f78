"""Strategy functionality: models, built-in defaults, and the registry."""

from clonegraph.core.strategy.core import PROTOCOL_STRATEGY, StrategyRegistry
from clonegraph.core.strategy.defaults import (
    SHARED_TYPES,
    allocate,
    copy_attributes,
    default_strategies,
    record_strategy,
)
from clonegraph.core.strategy.models import (
    NO_CLONE,
    Cloneable,
    CloneStrategy,
    Directive,
    RecordAllocation,
    Rebuild,
    Resolution,
    Staged,
    Strategy,
)

__all__ = [
    # Models
    "Directive",
    "NO_CLONE",
    "RecordAllocation",
    "CloneStrategy",
    "Staged",
    "Rebuild",
    "Strategy",
    "Resolution",
    "Cloneable",
    # Defaults
    "SHARED_TYPES",
    "allocate",
    "copy_attributes",
    "default_strategies",
    "record_strategy",
    # Registry
    "StrategyRegistry",
    "PROTOCOL_STRATEGY",
]
