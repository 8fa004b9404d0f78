"""Configuration module using Pydantic Settings.

Provides the cloning policy with environment variable support.

Usage:
    from clonegraph.config import CloneSettings

    settings = CloneSettings(clone_mapping_keys=False)
"""

from clonegraph.config.settings import CloneSettings, get_settings

__all__ = [
    "CloneSettings",
    "get_settings",
]
