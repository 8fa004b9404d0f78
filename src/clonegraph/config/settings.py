"""Configuration settings using Pydantic Settings.

Provides the typed cloning policy with environment variable support.

Usage:
    from clonegraph.config import CloneSettings, get_settings

    # Load from environment variables (CLONEGRAPH_*)
    settings = CloneSettings()

    # Or override with explicit values
    settings = CloneSettings(record_allocation="init")

    # Process-wide default used by clone(), cached after the first load
    settings = get_settings()
"""

from __future__ import annotations

import functools

from pydantic_settings import BaseSettings, SettingsConfigDict

from clonegraph.core.strategy.models import RecordAllocation


class CloneSettings(BaseSettings):  # type: ignore[misc]
    """Policy for one clone() call.

    Attributes:
        clone_mapping_keys: Clone mapping keys along with values. When False,
            cloned mappings are keyed by the original key objects. A key
            whose ``__hash__`` reads its own state and that refers back to
            the mapping is hashed while its clone is still unpopulated, and
            that raises, as it does with ``copy.deepcopy``. Share keys, or
            register a strategy for the key class, in that case.
        record_allocation: How records are instantiated. ``new`` bypasses
            ``__init__``; ``init`` calls the class with no arguments and
            rejects classes whose constructor requires any.
        warn_on_atomic_overrides: Warn when an override targets an atomic type
            and therefore can never apply.

    Environment Variables:
        CLONEGRAPH_CLONE_MAPPING_KEYS
        CLONEGRAPH_RECORD_ALLOCATION
        CLONEGRAPH_WARN_ON_ATOMIC_OVERRIDES
    """

    model_config = SettingsConfigDict(
        env_prefix="CLONEGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    clone_mapping_keys: bool = True
    record_allocation: RecordAllocation = RecordAllocation.NEW
    warn_on_atomic_overrides: bool = True


@functools.cache
def get_settings() -> CloneSettings:
    """Process-wide policy loaded from the environment on first use.

    clone() uses this when no settings are passed. Call
    ``get_settings.cache_clear()`` to pick up changed environment variables.
    """
    return CloneSettings()
