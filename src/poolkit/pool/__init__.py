"""Pool container and multi-pool operations."""

from poolkit.pool.operations import (
    ResolveDuplicate,
    group_pools,
    intersect_pools,
    merge_pools,
    merge_unique_pools,
    merge_unique_with,
    pool_from_query,
)
from poolkit.pool.pool import BatchItem, Pool, Source, SourceArg, flatten_sources

__all__ = [
    # Container
    "Pool",
    "Source",
    "SourceArg",
    "BatchItem",
    "flatten_sources",
    # Operations
    "ResolveDuplicate",
    "merge_pools",
    "merge_unique_pools",
    "merge_unique_with",
    "intersect_pools",
    "group_pools",
    "pool_from_query",
]
