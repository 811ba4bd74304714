"""Query builder: a deferred filter/sort/paginate plan over pool entries.

Usage:
    fastest_us = (
        pool.query()
        .where(lambda e: e.data["country"] == "US")
        .sort_by("speed", "desc")
        .select(Selectors.first)
    )

    page = pool.query().sort_by_meta("usedCount").offset(20).take(10).to_list()

Snapshot semantics:
    A Query copies the pool's entry list when it is created. Entries added to
    or removed from the pool afterwards are not seen by the query. The entries
    themselves are shared, so in-place changes to an entry's data or metadata
    are visible to both.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, overload

from poolkit.core.entry.models import Entry
from poolkit.core.entry.operations import copy_metadata
from poolkit.core.events import PoolEvent
from poolkit.core.intercept import Interceptable, interceptable
from poolkit.core.query.operations import (
    any_of,
    apply_filters,
    clamp_count,
    data_field_comparator,
    meta_field_comparator,
    paginate,
    sort_entries,
)
from poolkit.core.selector.models import Selector
from poolkit.core.selector.strategies import select_first
from poolkit.core.types import Comparator, Predicate, SortOrder

if TYPE_CHECKING:
    from poolkit.config import PoolSettings
    from poolkit.pool import Pool

type Emit = Callable[..., None]


class Query[T](Interceptable):
    """Chainable query over a snapshot of entries.

    Builder methods (where, where_or, sort_by, sort_by_meta, offset, take)
    only record steps and return self. Materializing methods (materialize,
    select, to_list, to_pool, count) re-run the whole plan from the snapshot
    on every call; nothing is cached between calls.

    Args:
        entries: Entries to query. The sequence is copied; entries are shared.
        emit: Event callback of the owning pool, used by select().
        settings: Settings inherited by pools built with to_pool().
    """

    def __init__(
        self,
        entries: Iterable[Entry[T]],
        emit: Emit | None = None,
        settings: PoolSettings | None = None,
    ) -> None:
        self._entries: list[Entry[T]] = list(entries)
        self._emit = emit
        self._settings = settings
        self._filters: list[Predicate[T]] = []
        self._sorters: list[Comparator[T]] = []
        self._offset = 0
        self._limit: int | None = None

    def _warn_on_clamp(self) -> bool:
        return self._settings.warn_on_clamp if self._settings is not None else True

    # Builder steps

    def where(self, predicate: Predicate[T]) -> Query[T]:
        """Keep only entries for which predicate(entry) is true.

        Filters are conjunctive: every registered filter must pass.
        """
        self._filters.append(predicate)
        return self

    def where_or(self, predicates: Iterable[Predicate[T]]) -> Query[T]:
        """Add one filter passing when any of the predicates passes.

        Composes with earlier filters as (previous filters) AND (any of these).
        """
        self._filters.append(any_of(list(predicates)))
        return self

    @overload
    def sort_by(self, field: str, order: SortOrder | str = ...) -> Query[T]: ...

    @overload
    def sort_by(self, field: Comparator[T]) -> Query[T]: ...

    def sort_by(
        self, field: str | Comparator[T], order: SortOrder | str = SortOrder.ASC
    ) -> Query[T]:
        """Sort by a data field or a custom comparator.

        Earlier sort_by/sort_by_meta calls take priority; later calls only
        break ties. Sorting is stable, so fully equal entries keep their
        insertion order.

        Args:
            field: Data field name, or comparator `(a, b) -> int` over entries.
            order: "asc" (default) or "desc". Ignored for comparators.

        Raises:
            ValueError: If order is not "asc" or "desc".
        """
        if callable(field):
            self._sorters.append(field)
        else:
            self._sorters.append(data_field_comparator(field, order))
        return self

    def sort_by_meta(self, field: str, order: SortOrder | str = SortOrder.ASC) -> Query[T]:
        """Sort by a metadata field. Same priority rules as sort_by()."""
        self._sorters.append(meta_field_comparator(field, order))
        return self

    def offset(self, count: int) -> Query[T]:
        """Skip the first `count` entries. Negative values clamp to 0."""
        self._offset = clamp_count(count, "offset", self._warn_on_clamp())
        return self

    def take(self, count: int) -> Query[T]:
        """Keep at most `count` entries. Zero or negative keeps none."""
        self._limit = clamp_count(count, "take", self._warn_on_clamp())
        return self

    limit = take

    # Materialization

    @interceptable
    def materialize(self) -> list[Entry[T]]:
        """Run filter, then sort, then pagination over the snapshot."""
        result = apply_filters(self._entries, self._filters)
        result = sort_entries(result, self._sorters)
        return paginate(result, self._offset, self._limit)

    @interceptable
    def select(self, selector: Selector[T] = select_first) -> T | None:
        """Materialize and pick one entry.

        When the query belongs to a pool, the pool emits `before_select` with
        the candidates, `after_select` with the result, and `get` with the
        chosen entry.

        Args:
            selector: Strategy choosing from the materialized entries.

        Returns:
            The chosen entry's data, or None if nothing was chosen.
        """
        candidates = self.materialize()
        if self._emit is not None:
            self._emit(PoolEvent.BEFORE_SELECT, candidates)

        chosen = selector(candidates)
        data = chosen.data if chosen is not None else None

        if self._emit is not None:
            self._emit(PoolEvent.AFTER_SELECT, data)
            if chosen is not None:
                self._emit(PoolEvent.GET, chosen)
        return data

    @interceptable
    def to_list(self) -> list[T]:
        """Materialize and return data only.

        The returned objects are the stored data, not copies.
        """
        return [entry.data for entry in self.materialize()]

    @interceptable
    def to_pool(self) -> Pool[T]:
        """Materialize into a new, independent pool.

        Each entry's data is shared; metadata is copied, so metadata changes on
        the new pool never reach the source.
        """
        # Late import to avoid circular dependency
        from poolkit.pool import Pool

        pool: Pool[T] = Pool(settings=self._settings)
        mode = self._settings.metadata_copy if self._settings is not None else "shallow"
        for entry in self.materialize():
            pool.add(entry.data, copy_metadata(entry.metadata, mode))
        return pool

    @property
    def count(self) -> int:
        """Number of entries passing the filters (sorting and pagination ignored)."""
        return len(apply_filters(self._entries, self._filters))

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __repr__(self) -> str:
        return (
            f"Query(entries={len(self._entries)}, filters={len(self._filters)}, "
            f"sorters={len(self._sorters)}, offset={self._offset}, limit={self._limit})"
        )

