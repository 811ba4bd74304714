"""Configuration settings using Pydantic Settings.

Provides typed defaults for pools and binders with environment variable support.

Usage:
    from poolkit.config import PoolSettings

    # Load from environment variables (POOL_*)
    settings = PoolSettings()

    # Or override with explicit values
    settings = PoolSettings(random_seed=42, metadata_copy="deep")
    pool = Pool(settings=settings)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for config module. "
        "Install with: pip install pydantic-settings"
    ) from e


class PoolSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for pools, queries and binders.

    Attributes:
        random_seed: Seed for the pool's random source (shuffle, sample,
            random selector). None draws from system entropy.
        default_selector: Selector a Binder uses for pools without select_with().
        metadata_copy: Copy depth for metadata in clone(), to_pool() and merges.
        warn_on_clamp: Emit a UserWarning when negative offset/take are clamped to 0.

    Environment Variables:
        POOL_RANDOM_SEED
        POOL_DEFAULT_SELECTOR
        POOL_METADATA_COPY
        POOL_WARN_ON_CLAMP
    """

    model_config = SettingsConfigDict(
        env_prefix="POOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    random_seed: int | None = Field(default=None, ge=0)
    default_selector: Literal["first", "last", "random"] = "first"
    metadata_copy: Literal["shallow", "deep"] = "shallow"
    warn_on_clamp: bool = True


@lru_cache(maxsize=1)
def get_settings() -> PoolSettings:
    """Process-wide default settings, read once from the environment."""
    return PoolSettings()
