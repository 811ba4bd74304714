"""Entry models: the {data, metadata} pairing stored in a Pool, and KeyStore.

KeyStore backs grouping and uniqueness checks, whose keys may be unhashable.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Final


class _Missing:
    """Sentinel for a field that is not defined on a value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


@dataclass(slots=True, eq=False)
class Entry[T]:
    """One item in a Pool.

    `data` is caller-owned and never interpreted beyond reading fields by name.
    `metadata` is a per-entry bag for derived state (usage counters, timestamps,
    flags) kept out of `data`.

    Entries compare by identity: two entries holding equal data are still
    distinct members of a pool.
    """

    data: T
    metadata: dict[str, Any] = field(default_factory=dict)


class KeyStore[K, V](MutableMapping[K, V]):
    """Insertion-ordered mapping that also accepts unhashable keys.

    Grouping and uniqueness keys come from caller data and may be lists,
    dicts or sets. Hashable keys are looked up through a dict index;
    unhashable ones by a linear scan comparing with ==. Iteration follows
    the order in which keys were first stored.

    Usage:
        groups: KeyStore[Any, list[str]] = KeyStore()
        groups.setdefault(["a", "b"], []).append("x")
        ["a", "b"] in groups  # True
    """

    __slots__ = ("_keys", "_values", "_index", "_unhashable")

    def __init__(self) -> None:
        self._keys: list[K] = []
        self._values: list[V] = []
        self._index: dict[Any, int] = {}
        self._unhashable: list[int] = []

    def _find(self, key: K) -> int | None:
        try:
            return self._index.get(key)
        except TypeError:
            for position in self._unhashable:
                if self._keys[position] == key:
                    return position
            return None

    def _register(self, key: K, position: int) -> None:
        try:
            self._index[key] = position
        except TypeError:
            self._unhashable.append(position)

    def __getitem__(self, key: K) -> V:
        position = self._find(key)
        if position is None:
            raise KeyError(key)
        return self._values[position]

    def __setitem__(self, key: K, value: V) -> None:
        position = self._find(key)
        if position is None:
            self._keys.append(key)
            self._values.append(value)
            self._register(key, len(self._keys) - 1)
        else:
            self._values[position] = value

    def __delitem__(self, key: K) -> None:
        position = self._find(key)
        if position is None:
            raise KeyError(key)
        del self._keys[position]
        del self._values[position]
        self._index.clear()
        self._unhashable.clear()
        for i, remaining in enumerate(self._keys):
            self._register(remaining, i)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in zip(self._keys, self._values, strict=True))
        return f"KeyStore({{{items}}})"
