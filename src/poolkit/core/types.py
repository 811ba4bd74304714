"""Core type definitions for poolkit."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from poolkit.core.entry.models import Entry

type Copy[T] = T
"""Type alias indicating a value is a copy that is detached from its pool.

When you see `Copy[T]` in a return type, mutating the returned value does NOT
affect the pool it came from.
"""

type Predicate[T] = Callable[[Entry[T]], bool]
"""Entry-level filter: receives the whole entry (data and metadata)."""

type DataPredicate[T] = Callable[[T], bool]
"""Data-level filter used by remove()/remove_batch()."""

type Comparator[T] = Callable[[Entry[T], Entry[T]], int]
"""Three-way comparison: negative, zero or positive."""

type KeyFn[T] = Callable[[T], Any]
"""Key extraction from an entry's data."""

type KeySpec[T] = str | KeyFn[T]
"""Field name or key extraction function."""

type CompareFn[T] = Callable[[T, T], bool]
"""Equality test between two data values."""


class SortOrder(StrEnum):
    """Direction for field-based sorting."""

    ASC = "asc"
    DESC = "desc"
