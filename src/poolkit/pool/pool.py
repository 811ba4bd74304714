"""Pool: ordered, mutable container of entries with queries and combinators.

Usage:
    proxies = Pool()
    proxies.add({"ip": "1.1.1.1", "country": "US", "speed": 100}, {"usedCount": 0})
    proxies.add_batch([
        {"data": {"ip": "2.2.2.2", "country": "UK", "speed": 200}},
        {"data": {"ip": "3.3.3.3", "country": "US", "speed": 150}},
    ])

    # Count every checkout
    proxies.on(PoolEvent.GET, lambda entry: entry.metadata.update(
        usedCount=entry.metadata.get("usedCount", 0) + 1,
    ))

    fastest_us = (
        proxies.query()
        .where(lambda e: e.data["country"] == "US")
        .sort_by("speed", "desc")
        .select(Selectors.first)
    )

    by_country = proxies.group_by("country")
    active, idle = proxies.partition(lambda e: e.metadata.get("active", False))
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any, Self

from poolkit.config import PoolSettings, get_settings
from poolkit.core.entry import (
    Entry,
    KeyStore,
    copy_entry,
    make_key_fn,
    resolve_field,
    structurally_equal,
)
from poolkit.core.events import EventEmitter, Handler, PoolEvent
from poolkit.core.intercept import Interceptable, interceptable
from poolkit.core.query import Query
from poolkit.core.selector import Selector, random_with
from poolkit.core.types import CompareFn, DataPredicate, KeySpec, Predicate

type Source[T] = Pool[T] | Query[T]
type SourceArg[T] = Source[T] | Sequence[Source[T]]
type BatchItem[T] = Mapping[str, Any] | tuple[Any, ...] | Entry[T]


def flatten_sources[T](sources: Iterable[SourceArg[T]]) -> list[Source[T]]:
    """Flatten sources given as pools/queries or lists of them (one level).

    Raises:
        TypeError: If a source is neither a Pool, a Query nor a list/tuple of them.
    """
    flat: list[Source[T]] = []
    for source in sources:
        items = source if isinstance(source, (list, tuple)) else (source,)
        for item in items:
            if not isinstance(item, (Pool, Query)):
                raise TypeError(f"Cannot merge from {type(item).__name__}: expected Pool or Query")
            flat.append(item)
    return flat


def _batch_entry[T](item: BatchItem[T]) -> Entry[T]:
    """Normalize an add_batch() item into a new Entry."""
    if isinstance(item, Entry):
        return Entry(data=item.data, metadata=dict(item.metadata))
    if isinstance(item, Mapping):
        if "data" not in item:
            raise TypeError("Batch item mapping must have a 'data' key")
        return Entry(data=item["data"], metadata=dict(item.get("metadata") or {}))
    if isinstance(item, tuple) and 1 <= len(item) <= 2:
        metadata = item[1] if len(item) == 2 else None
        return Entry(data=item[0], metadata=dict(metadata or {}))
    raise TypeError(f"Invalid batch item: {item!r}")


class Pool[T](Interceptable):
    """Ordered collection of entries owned exclusively by the pool.

    Entries keep insertion order. Readers may iterate or receive lists of
    entries and data, but only the pool's own operations add, remove or
    reorder entries. A pool can itself be the data of another pool's entry.

    Mutating combinators return self for chaining. Derived pools (group_by,
    partition, sample) share Entry objects with this pool; clone() and
    to_pool() copy metadata.

    Not thread-safe: guard a pool shared between threads with an external lock.

    Args:
        settings: Pool configuration. Defaults to get_settings() (environment).
    """

    def __init__(self, settings: PoolSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._entries: list[Entry[T]] = []
        self._events = EventEmitter()
        self._rng = random.Random(self._settings.random_seed)

    @classmethod
    def from_entries(
        cls, entries: Iterable[Entry[T]], settings: PoolSettings | None = None
    ) -> Pool[T]:
        """Build a pool adopting the given Entry objects as-is (no copies, no events)."""
        pool: Pool[T] = cls(settings=settings)
        pool._entries = list(entries)
        return pool

    def _derive(self, entries: Iterable[Entry[T]]) -> Pool[T]:
        return Pool.from_entries(entries, settings=self._settings)

    def _replace_entries(self, kept: list[Entry[T]]) -> None:
        """Swap in a filtered entry list, emitting batch_remove for the dropped ones."""
        kept_ids = {id(entry) for entry in kept}
        removed = [entry for entry in self._entries if id(entry) not in kept_ids]
        self._entries = kept
        if removed:
            self.emit(PoolEvent.BATCH_REMOVE, removed)

    def _append(self, entries: list[Entry[T]]) -> None:
        """Append entries produced by a combinator, emitting one batch_add."""
        if entries:
            self._entries.extend(entries)
            self.emit(PoolEvent.BATCH_ADD, entries)

    def _matcher(
        self, key_or_predicate: str | Predicate[T], value: Any
    ) -> Predicate[T]:
        if callable(key_or_predicate):
            return key_or_predicate
        return lambda entry: resolve_field(entry.data, key_or_predicate) == value

    # Properties

    @property
    def settings(self) -> PoolSettings:
        return self._settings

    @property
    def size(self) -> int:
        """Number of entries."""
        return len(self._entries)

    @property
    def all(self) -> list[T]:
        """Data of every entry, in order."""
        return [entry.data for entry in self._entries]

    @property
    def all_entries(self) -> list[Entry[T]]:
        """Every entry, in order. The list is a copy; the entries are live."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry[T]]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"Pool(size={len(self._entries)})"

    # CRUD

    @interceptable
    def add(self, data: T, metadata: Mapping[str, Any] | None = None) -> Entry[T]:
        """Append one entry and emit `add`.

        Args:
            data: Value to store.
            metadata: Initial metadata (copied into a new dict).

        Returns:
            The created entry.
        """
        entry = Entry(data=data, metadata=dict(metadata or {}))
        self._entries.append(entry)
        self.emit(PoolEvent.ADD, entry)
        return entry

    @interceptable
    def add_batch(self, items: Iterable[BatchItem[T]]) -> list[Entry[T]]:
        """Append several entries and emit one `batch_add`.

        Items may be `{"data": ..., "metadata": ...}` mappings, `(data, metadata)`
        tuples or Entry objects (whose metadata is copied).

        Raises:
            TypeError: If an item has none of the supported shapes.
        """
        entries = [_batch_entry(item) for item in items]
        self._append(entries)
        return entries

    @interceptable
    def get(self, key_or_predicate: str | Predicate[T], value: Any = None) -> T | None:
        """Return the data of the first matching entry, or None.

        Emits `get` with the entry before returning, so handlers can update
        metadata (usage counters, timestamps) as part of the lookup.

        Args:
            key_or_predicate: Data field name compared to value, or entry predicate.
            value: Value to match when a field name is given.

        Example:
            >>> pool.get("id", "user123")
            >>> pool.get(lambda e: e.data["username"] == "John")
        """
        match = self._matcher(key_or_predicate, value)
        for entry in self._entries:
            if match(entry):
                self.emit(PoolEvent.GET, entry)
                return entry.data
        return None

    @interceptable
    def has(self, key_or_predicate: str | Predicate[T], value: Any = None) -> bool:
        """Check whether any entry matches a field value or predicate."""
        match = self._matcher(key_or_predicate, value)
        return any(match(entry) for entry in self._entries)

    @interceptable
    def set(
        self, key: str, value: Any, data: T, metadata: Mapping[str, Any] | None = None
    ) -> Entry[T]:
        """Update the first entry whose `data[key] == value`, or add a new one.

        An existing entry gets the new data and its metadata is merged with
        the given metadata (new keys win); `set` is emitted. Otherwise this
        behaves like add().
        """
        for entry in self._entries:
            if resolve_field(entry.data, key) == value:
                entry.data = data
                entry.metadata.update(metadata or {})
                self.emit(PoolEvent.SET, entry)
                return entry
        return self.add(data, metadata)

    @interceptable
    def delete(self, key: str, value: Any) -> bool:
        """Remove the first entry whose `data[key] == value`. Emits `remove`.

        Returns:
            True if an entry was removed.
        """
        for index, entry in enumerate(self._entries):
            if resolve_field(entry.data, key) == value:
                del self._entries[index]
                self.emit(PoolEvent.REMOVE, entry)
                return True
        return False

    @interceptable
    def remove(self, predicate: DataPredicate[T]) -> list[Entry[T]]:
        """Remove every entry whose data matches; emits `remove` per entry."""
        removed: list[Entry[T]] = []
        kept: list[Entry[T]] = []
        for entry in self._entries:
            (removed if predicate(entry.data) else kept).append(entry)
        self._entries = kept
        for entry in removed:
            self.emit(PoolEvent.REMOVE, entry)
        return removed

    @interceptable
    def remove_batch(self, predicates: Sequence[DataPredicate[T]]) -> list[Entry[T]]:
        """Remove entries whose data matches any predicate; emits one `batch_remove`."""
        removed: list[Entry[T]] = []
        kept: list[Entry[T]] = []
        for entry in self._entries:
            matched = any(predicate(entry.data) for predicate in predicates)
            (removed if matched else kept).append(entry)
        self._entries = kept
        if removed:
            self.emit(PoolEvent.BATCH_REMOVE, removed)
        return removed

    @interceptable
    def clear(self) -> list[Entry[T]]:
        """Remove every entry; emits `batch_remove` when the pool was not empty."""
        removed, self._entries = self._entries, []
        if removed:
            self.emit(PoolEvent.BATCH_REMOVE, removed)
        return removed

    # Iteration

    def for_each(self, fn: Callable[[Entry[T], int], Any]) -> None:
        for index, entry in enumerate(list(self._entries)):
            fn(entry, index)

    def map[U](self, fn: Callable[[Entry[T], int], U]) -> list[U]:
        return [fn(entry, index) for index, entry in enumerate(list(self._entries))]

    def filter(self, fn: Callable[[Entry[T], int], bool]) -> list[Entry[T]]:
        """Matching entries (not data), in order."""
        return [entry for index, entry in enumerate(list(self._entries)) if fn(entry, index)]

    def reduce[U](self, fn: Callable[[U, Entry[T], int], U], initial: U) -> U:
        accumulator = initial
        for index, entry in enumerate(list(self._entries)):
            accumulator = fn(accumulator, entry, index)
        return accumulator

    def some(self, fn: Callable[[Entry[T], int], bool]) -> bool:
        return any(fn(entry, index) for index, entry in enumerate(list(self._entries)))

    def every(self, fn: Callable[[Entry[T], int], bool]) -> bool:
        return all(fn(entry, index) for index, entry in enumerate(list(self._entries)))

    def find(self, fn: Callable[[Entry[T], int], bool]) -> Entry[T] | None:
        for index, entry in enumerate(list(self._entries)):
            if fn(entry, index):
                return entry
        return None

    def find_index(self, fn: Callable[[Entry[T], int], bool]) -> int:
        """Index of the first matching entry, or -1."""
        for index, entry in enumerate(list(self._entries)):
            if fn(entry, index):
                return index
        return -1

    # Querying

    @interceptable
    def query(self) -> Query[T]:
        """Create a query over a snapshot of the current entries.

        Selections made through the query emit this pool's `before_select`,
        `after_select` and `get` events.
        """
        return Query(self._entries, emit=self.emit, settings=self._settings)

    def random_selector(self) -> Selector[T]:
        """Uniform selector drawing from this pool's random source (seeded by settings)."""
        return random_with(self._rng)

    # Combinators

    def _source_entries(self, source: Source[T]) -> list[Entry[T]]:
        """New entries for merging: copies for pool sources, fresh metadata for queries."""
        if isinstance(source, Pool):
            return [copy_entry(entry, self._settings.metadata_copy) for entry in source._entries]
        return [Entry(data=data) for data in source.to_list()]

    @interceptable
    def merge(self, *sources: SourceArg[T]) -> Self:
        """Append every entry of each source, in argument order. No deduplication.

        Sources are pools, queries, or lists of them (flattened one level).
        Pool entries are appended with copied metadata; query results are
        appended with empty metadata. Emits one `batch_add`.

        Example:
            >>> pool.merge(pool1, pool2)
            >>> pool.merge([pool1, pool2], pool3.query().where(is_active))
        """
        merged: list[Entry[T]] = []
        for source in flatten_sources(sources):
            merged.extend(self._source_entries(source))
        self._append(merged)
        return self

    @interceptable
    def merge_unique(self, unique_by: KeySpec[T], *sources: SourceArg[T]) -> Self:
        """Like merge(), skipping entries whose key was already seen.

        Keys already present in this pool count as seen, as do keys merged
        earlier in the same call. First occurrence wins.

        Args:
            unique_by: Data field name or key function over data.
            *sources: Pools, queries, or lists of them.
        """
        get_key = make_key_fn(unique_by)
        seen: KeyStore[Any, None] = KeyStore()
        for entry in self._entries:
            seen[get_key(entry.data)] = None
        merged: list[Entry[T]] = []
        for source in flatten_sources(sources):
            for entry in self._source_entries(source):
                key = get_key(entry.data)
                if key not in seen:
                    seen[key] = None
                    merged.append(entry)
        self._append(merged)
        return self

    @interceptable
    def union(self, other: Pool[T], compare_fn: CompareFn[T] | None = None) -> Self:
        """Append entries of other whose data has no equal counterpart here.

        Args:
            other: Pool to union with.
            compare_fn: Equality between data values. Defaults to structural equality.
        """
        compare = compare_fn or structurally_equal
        added: list[Entry[T]] = []
        for candidate in list(other._entries):
            present = any(compare(entry.data, candidate.data) for entry in self._entries)
            if not present and not any(compare(entry.data, candidate.data) for entry in added):
                added.append(copy_entry(candidate, self._settings.metadata_copy))
        self._append(added)
        return self

    @interceptable
    def intersect(self, other: Pool[T], compare_fn: CompareFn[T] | None = None) -> Self:
        """Keep only entries whose data has an equal counterpart in other."""
        compare = compare_fn or structurally_equal
        others = list(other._entries)
        kept = [
            entry
            for entry in self._entries
            if any(compare(entry.data, candidate.data) for candidate in others)
        ]
        self._replace_entries(kept)
        return self

    @interceptable
    def difference(self, other: Pool[T], compare_fn: CompareFn[T] | None = None) -> Self:
        """Keep only entries whose data has no equal counterpart in other."""
        compare = compare_fn or structurally_equal
        others = list(other._entries)
        kept = [
            entry
            for entry in self._entries
            if not any(compare(entry.data, candidate.data) for candidate in others)
        ]
        self._replace_entries(kept)
        return self

    @interceptable
    def deduplicate(self, unique_by: KeySpec[T]) -> Self:
        """Keep the first entry for each key, in original order."""
        get_key = make_key_fn(unique_by)
        seen: KeyStore[Any, None] = KeyStore()
        kept: list[Entry[T]] = []
        for entry in self._entries:
            key = get_key(entry.data)
            if key not in seen:
                seen[key] = None
                kept.append(entry)
        self._replace_entries(kept)
        return self

    @interceptable
    def group_by(self, key: KeySpec[T]) -> KeyStore[Any, Pool[T]]:
        """Split entries into pools by key, preserving order within each group.

        Groups appear in order of their first entry.

        Args:
            key: Data field name or key function over data.

        Returns:
            KeyStore from key value to a pool of the entries sharing it. Keys
            may be unhashable (a list-valued field groups by list equality).
        """
        get_key = make_key_fn(key)
        groups: KeyStore[Any, list[Entry[T]]] = KeyStore()
        for entry in self._entries:
            groups.setdefault(get_key(entry.data), []).append(entry)
        result: KeyStore[Any, Pool[T]] = KeyStore()
        for group_key, entries in groups.items():
            result[group_key] = self._derive(entries)
        return result

    @interceptable
    def partition(self, predicate: Predicate[T]) -> tuple[Pool[T], Pool[T]]:
        """Split into (matching, not matching) pools, preserving order in each."""
        matching: list[Entry[T]] = []
        rest: list[Entry[T]] = []
        for entry in self._entries:
            (matching if predicate(entry) else rest).append(entry)
        return self._derive(matching), self._derive(rest)

    @interceptable
    def sample(self, count: int) -> Pool[T]:
        """New pool of `count` entries drawn without replacement.

        Zero or negative count gives an empty pool; a count above size gives
        every entry (in random order).
        """
        if count <= 0:
            return self._derive([])
        shuffled = list(self._entries)
        self._rng.shuffle(shuffled)
        return self._derive(shuffled[:count])

    @interceptable
    def shuffle(self) -> Self:
        """Reorder entries in place with a uniform random permutation (Fisher-Yates)."""
        self._rng.shuffle(self._entries)
        return self

    @interceptable
    def clone(self) -> Pool[T]:
        """New pool with the same data and an independent metadata copy per entry."""
        mode = self._settings.metadata_copy
        return self._derive(copy_entry(entry, mode) for entry in self._entries)

    # Events

    def on(self, event: PoolEvent | str, handler: Handler) -> None:
        """Register a handler; handlers run synchronously in registration order."""
        self._events.on(event, handler)

    def off(self, event: PoolEvent | str, handler: Handler) -> None:
        """Unregister a handler. Unknown handlers are ignored."""
        self._events.off(event, handler)

    def emit(self, event: PoolEvent | str, *args: Any) -> None:
        """Emit an event to its handlers. Handler exceptions propagate."""
        self._events.emit(event, *args)

    def handlers(self, event: PoolEvent | str) -> list[Handler]:
        """Handlers registered for event, in call order (a copy)."""
        return self._events.handlers(event)
