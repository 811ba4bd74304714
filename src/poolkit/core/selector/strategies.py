"""Pure functions for selector strategies.

Each strategy picks at most one entry from an ordered candidate sequence.
None of them mutates its input, and all of them return None for an empty
sequence instead of raising.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence

from poolkit.core.entry.models import Entry
from poolkit.core.entry.operations import compare_values, has_field, resolve_field
from poolkit.core.selector.models import Selector


def select_first[T](candidates: Sequence[Entry[T]]) -> Entry[T] | None:
    """Candidate at index 0, or None if empty."""
    return candidates[0] if candidates else None


def select_last[T](candidates: Sequence[Entry[T]]) -> Entry[T] | None:
    """Candidate at the final index, or None if empty."""
    return candidates[-1] if candidates else None


def select_random[T](
    candidates: Sequence[Entry[T]], rng: random.Random | None = None
) -> Entry[T] | None:
    """Uniformly random candidate, or None if empty.

    Args:
        candidates: Entries to choose from.
        rng: Random source. Defaults to the module-level generator.
    """
    if not candidates:
        return None
    return (rng or random).choice(candidates)


def random_with[T](rng: random.Random) -> Selector[T]:
    """Create a uniform selector bound to a specific random source."""

    def selector(candidates: Sequence[Entry[T]]) -> Entry[T] | None:
        return select_random(candidates, rng)

    return selector


def _min_by_value(entry: Entry[object], field: str) -> object:
    # Data wins whenever it defines the field, even with a falsy value.
    if has_field(entry.data, field):
        return resolve_field(entry.data, field)
    return entry.metadata.get(field)


def min_by[T](field: str) -> Selector[T]:
    """Create a selector returning the entry with the smallest value for a field.

    The value is read from `data` when the data defines the field (present and
    not None), otherwise from `metadata`. Ties keep the first occurrence.

    Args:
        field: Field name looked up in data, then metadata.

    Returns:
        Selector function.

    Example:
        >>> pool.query().select(min_by("usedCount"))
    """

    def selector(candidates: Sequence[Entry[T]]) -> Entry[T] | None:
        if not candidates:
            return None
        best = candidates[0]
        best_value = _min_by_value(best, field)
        for entry in candidates[1:]:
            value = _min_by_value(entry, field)
            if compare_values(value, best_value) < 0:
                best, best_value = entry, value
        return best

    return selector


def weighted[T](
    weight_fn: Callable[[Entry[T]], float], rng: random.Random | None = None
) -> Selector[T]:
    """Create a weighted random selector.

    Draws a value in [0, total) and walks the candidates subtracting each
    weight until the running value is no longer positive. A total weight of
    exactly zero falls back to uniform selection. Mixed-sign weights do not
    raise; which entry they produce is implementation-defined.

    Args:
        weight_fn: Weight for an entry.
        rng: Random source. Defaults to the module-level generator.

    Returns:
        Selector function.
    """

    def selector(candidates: Sequence[Entry[T]]) -> Entry[T] | None:
        if not candidates:
            return None

        weights = [weight_fn(entry) for entry in candidates]
        total = sum(weights)
        if total == 0:
            return select_random(candidates, rng)

        remaining = (rng or random).random() * total
        for entry, weight in zip(candidates, weights, strict=True):
            remaining -= weight
            if remaining <= 0:
                return entry

        # Float residue can leave the walk slightly positive
        return candidates[-1]

    return selector


class Selectors:
    """Namespace of built-in selectors and selector factories.

    Usage:
        pool.query().select(Selectors.first)
        pool.query().select(Selectors.min_by("usedCount"))
        pool.query().select(Selectors.weighted(lambda e: e.data["speed"]))
    """

    first = staticmethod(select_first)
    last = staticmethod(select_last)
    random = staticmethod(select_random)
    min_by = staticmethod(min_by)
    weighted = staticmethod(weighted)
