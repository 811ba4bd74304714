"""Pure functions combining several pools into new ones.

None of these functions mutates its inputs: results are new pools whose
entries carry copied metadata (data is shared by reference).

Usage:
    everything = merge_pools(pool_a, pool_b)
    unique = merge_unique_pools([pool_a, pool_b.query().where(active)], "id")
    freshest = merge_unique_with(
        [pool_a, pool_b], "id",
        lambda existing, dup: dup if dup.metadata["ts"] > existing.metadata["ts"] else existing,
    )
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from poolkit.config import PoolSettings
from poolkit.core.entry import Entry, KeyStore, copy_entry, make_key_fn
from poolkit.core.query import Query
from poolkit.core.types import CompareFn, KeySpec
from poolkit.pool.pool import Pool, Source, flatten_sources

type ResolveDuplicate[T] = Callable[[Entry[T], Entry[T]], Entry[T]]
"""Signature: (existing_entry, duplicate_entry) -> entry_to_keep"""


def _detached_entries[T](source: Source[T], settings: PoolSettings | None) -> list[Entry[T]]:
    if isinstance(source, Pool):
        mode = (settings or source.settings).metadata_copy
        return [copy_entry(entry, mode) for entry in source.all_entries]
    return [Entry(data=data) for data in source.to_list()]


def merge_pools[T](*pools: Source[T], settings: PoolSettings | None = None) -> Pool[T]:
    """New pool holding every entry of every pool, in argument order.

    Args:
        *pools: Pools or queries to merge.
        settings: Settings for the result. Defaults to get_settings().

    Returns:
        New merged pool.
    """
    merged: Pool[T] = Pool(settings=settings)
    return merged.merge(*pools)


def merge_unique_pools[T](
    sources: Sequence[Source[T]],
    unique_by: KeySpec[T],
    settings: PoolSettings | None = None,
) -> Pool[T]:
    """New pool keeping the first entry seen for each key across sources."""
    merged: Pool[T] = Pool(settings=settings)
    return merged.merge_unique(unique_by, list(sources))


def merge_unique_with[T](
    sources: Sequence[Source[T]],
    unique_by: KeySpec[T],
    resolve_duplicate: ResolveDuplicate[T],
    settings: PoolSettings | None = None,
) -> Pool[T]:
    """New pool with one entry per key, duplicates settled by a resolver.

    Keys keep the position of their first occurrence; the entry stored there
    is whatever the resolver returns when later duplicates arrive.

    Args:
        sources: Pools or queries, processed in order.
        unique_by: Data field name or key function over data.
        resolve_duplicate: Receives (existing, duplicate), returns the entry to keep.
        settings: Settings for the result. Defaults to get_settings().

    Returns:
        New merged pool.
    """
    get_key = make_key_fn(unique_by)
    by_key: KeyStore[Any, Entry[T]] = KeyStore()

    for source in flatten_sources(sources):
        for entry in _detached_entries(source, settings):
            key = get_key(entry.data)
            if key in by_key:
                by_key[key] = resolve_duplicate(by_key[key], entry)
            else:
                by_key[key] = entry

    return Pool.from_entries(by_key.values(), settings=settings)


def intersect_pools[T](
    first: Pool[T], second: Pool[T], compare_fn: CompareFn[T] | None = None
) -> Pool[T]:
    """New pool with the entries of first that have an equal counterpart in second."""
    return first.clone().intersect(second, compare_fn)


def group_pools[T](
    sources: Sequence[Source[T]],
    key: KeySpec[T],
    settings: PoolSettings | None = None,
) -> KeyStore[Any, Pool[T]]:
    """Merge sources, then group the result by key."""
    return merge_pools(*sources, settings=settings).group_by(key)


def pool_from_query[T](query: Query[T]) -> Pool[T]:
    """New pool from a query's results (same as query.to_pool())."""
    return query.to_pool()
