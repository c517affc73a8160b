"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
patch engine.

Usage:
    from typedpatch.config import PatchSettings, get_settings

    # Load from environment variables (TYPEDPATCH_*)
    settings = get_settings()

    # Or override with explicit values
    settings = PatchSettings(warn_on_nested_paths=False)
    doc = PatchDoc(Profile, settings=settings)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PatchSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for validation caching and execution diagnostics.

    Attributes:
        cache_path_validation: Memoize path validation results per type.
        max_cached_paths: Upper bound on memoized (path, read, write) entries
            per type; once reached, new results are computed but not stored.
        warn_on_nested_paths: Warn when an executed operation names a nested
            path, since only its top-level property is affected.

    Environment Variables:
        TYPEDPATCH_CACHE_PATH_VALIDATION
        TYPEDPATCH_MAX_CACHED_PATHS
        TYPEDPATCH_WARN_ON_NESTED_PATHS
    """

    model_config = SettingsConfigDict(
        env_prefix="TYPEDPATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cache_path_validation: bool = True
    max_cached_paths: int = Field(default=4096, ge=0)
    warn_on_nested_paths: bool = True


@lru_cache(maxsize=1)
def get_settings() -> PatchSettings:
    return PatchSettings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
