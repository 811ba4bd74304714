"""Configuration module using Pydantic Settings.

Provides typed configuration for pools with environment variable support.

Usage:
    from poolkit.config import PoolSettings

    settings = PoolSettings(random_seed=7)
"""

from poolkit.config.settings import PoolSettings, get_settings

__all__ = [
    "PoolSettings",
    "get_settings",
]
