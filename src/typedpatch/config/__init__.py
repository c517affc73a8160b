"""Configuration module using Pydantic Settings.

Usage:
    from typedpatch.config import PatchSettings, get_settings

    settings = PatchSettings(max_cached_paths=256)
"""

from typedpatch.config.settings import PatchSettings, get_settings, reset_settings_cache

__all__ = [
    "PatchSettings",
    "get_settings",
    "reset_settings_cache",
]
