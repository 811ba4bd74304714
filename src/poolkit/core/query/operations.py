"""Query operations: the pure filter, sort and paginate steps.

Each function takes an entry sequence and returns a new list, leaving its
input untouched. Query.materialize() chains them in order.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Sequence
from functools import cmp_to_key
from typing import Any

from poolkit.core.entry.models import Entry
from poolkit.core.entry.operations import compare_values, resolve_field
from poolkit.core.types import Comparator, Predicate, SortOrder


def normalize_order(order: SortOrder | str) -> SortOrder:
    """Convert "asc"/"desc" (any case) to SortOrder.

    Raises:
        ValueError: If order is not a recognized sort direction.
    """
    try:
        return SortOrder(order.lower() if isinstance(order, str) else order)
    except ValueError:
        raise ValueError(f"Invalid sort order: {order!r} (expected 'asc' or 'desc')") from None


def any_of[T](predicates: Sequence[Predicate[T]]) -> Predicate[T]:
    """Combine predicates with logical OR. An empty list matches nothing."""
    captured = tuple(predicates)
    return lambda entry: any(p(entry) for p in captured)


def field_comparator[T](
    read: Callable[[Entry[T]], Any], order: SortOrder | str = SortOrder.ASC
) -> Comparator[T]:
    """Build a comparator from a value reader and a direction."""
    direction = 1 if normalize_order(order) is SortOrder.ASC else -1

    def comparator(a: Entry[T], b: Entry[T]) -> int:
        return direction * compare_values(read(a), read(b))

    return comparator


def data_field_comparator[T](field: str, order: SortOrder | str = SortOrder.ASC) -> Comparator[T]:
    """Comparator over `data[field]`."""
    return field_comparator(lambda entry: resolve_field(entry.data, field), order)


def meta_field_comparator[T](field: str, order: SortOrder | str = SortOrder.ASC) -> Comparator[T]:
    """Comparator over `metadata[field]`."""
    return field_comparator(lambda entry: entry.metadata.get(field), order)


def apply_filters[T](entries: Sequence[Entry[T]], filters: Sequence[Predicate[T]]) -> list[Entry[T]]:
    """Keep entries passing every filter, in their original order."""
    result = list(entries)
    for predicate in filters:
        result = [entry for entry in result if predicate(entry)]
    return result


def sort_entries[T](entries: Sequence[Entry[T]], sorters: Sequence[Comparator[T]]) -> list[Entry[T]]:
    """Stable sort by comparators in priority order.

    The first comparator is the primary key; later ones only break ties.
    With no comparators the input order is returned unchanged.
    """
    if not sorters:
        return list(entries)

    def composite(a: Entry[T], b: Entry[T]) -> int:
        for comparator in sorters:
            result = comparator(a, b)
            if result:
                return result
        return 0

    return sorted(entries, key=cmp_to_key(composite))


def paginate[T](entries: Sequence[Entry[T]], offset: int, limit: int | None) -> list[Entry[T]]:
    """Slice `[offset, offset + limit)`; limit None means unbounded."""
    if limit is None:
        return list(entries[offset:])
    return list(entries[offset : offset + limit])


def clamp_count(value: int, name: str, warn: bool = True) -> int:
    """Clamp a pagination counter to zero, warning about negative input."""
    if value < 0:
        if warn:
            warnings.warn(
                f"{name}() received negative count {value}; using 0 instead.",
                stacklevel=3,
            )
        return 0
    return value
