"""Selector functionality: strategies for picking one entry from candidates."""

from poolkit.core.selector.models import Selector, SelectorKind
from poolkit.core.selector.strategies import (
    Selectors,
    min_by,
    random_with,
    select_first,
    select_last,
    select_random,
    weighted,
)

__all__ = [
    # Models
    "Selector",
    "SelectorKind",
    # Strategies
    "Selectors",
    "select_first",
    "select_last",
    "select_random",
    "random_with",
    "min_by",
    "weighted",
]
