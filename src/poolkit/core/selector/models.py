"""Selector models: the selector protocol and named built-in strategies."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from poolkit.core.entry.models import Entry


class Selector[T](Protocol):
    """Pure function choosing at most one entry from a candidate sequence."""

    def __call__(self, candidates: Sequence[Entry[T]], /) -> Entry[T] | None: ...


class SelectorKind(Enum):
    """Named built-in selectors, used where a selector comes from configuration."""

    FIRST = "first"
    LAST = "last"
    RANDOM = "random"

    def get_strategy(self) -> Selector[object]:
        """Get the selector function for this kind.

        Returns:
            Pure function implementing the selection strategy.
        """
        # Late import to avoid circular dependency
        from poolkit.core.selector import strategies

        selectors: dict[SelectorKind, Selector[object]] = {
            SelectorKind.FIRST: strategies.select_first,
            SelectorKind.LAST: strategies.select_last,
            SelectorKind.RANDOM: strategies.select_random,
        }
        return selectors[self]
