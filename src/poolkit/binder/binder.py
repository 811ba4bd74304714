"""Binder: all-or-nothing selection of one item from each of several pools.

Usage:
    bundle = (
        Binder()
        .bind("proxy", proxies)
        .bind("account", accounts)
        .where("proxy", lambda e: e.data["country"] == "US")
        .where("account", lambda e: e.data["service"] == "twitter")
        .select_with("proxy", Selectors.min_by("usedCount"))
        .execute()
    )
    if bundle is None:
        ...  # at least one pool had no match; no pool emitted get
    else:
        use(bundle["proxy"], bundle["account"])
"""

from __future__ import annotations

from typing import Any

from poolkit.config import PoolSettings, get_settings
from poolkit.core.entry import Entry
from poolkit.core.events import PoolEvent
from poolkit.core.selector import Selector, SelectorKind
from poolkit.core.types import Predicate
from poolkit.pool import Pool


class Binder:
    """Coordinates per-pool filters and selectors across named pools.

    Configuration only accumulates; execute() is repeatable and re-reads the
    live state of every bound pool on each call.

    Args:
        settings: Supplies the default selector for pools without select_with().
    """

    def __init__(self, settings: PoolSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._pools: dict[str, Pool[Any]] = {}
        self._filters: dict[str, list[Predicate[Any]]] = {}
        self._selectors: dict[str, Selector[Any]] = {}

    def bind(self, name: str, pool: Pool[Any]) -> Binder:
        """Register a pool under a name. Rebinding a name replaces its pool in place."""
        self._pools[name] = pool
        return self

    def unbind(self, name: str) -> Binder:
        """Forget a pool together with its filters and selector."""
        self._pools.pop(name, None)
        self._filters.pop(name, None)
        self._selectors.pop(name, None)
        return self

    def where(self, name: str, predicate: Predicate[Any]) -> Binder:
        """Add a filter for the named pool. Names need not be bound yet."""
        self._filters.setdefault(name, []).append(predicate)
        return self

    def select_with(self, name: str, selector: Selector[Any]) -> Binder:
        """Set the selector for the named pool, replacing any previous one."""
        self._selectors[name] = selector
        return self

    @property
    def names(self) -> list[str]:
        """Bound pool names, in binding order."""
        return list(self._pools)

    def _default_selector(self, pool: Pool[Any]) -> Selector[Any]:
        kind = SelectorKind(self._settings.default_selector)
        if kind is SelectorKind.RANDOM:
            return pool.random_selector()
        return kind.get_strategy()

    def execute(self) -> dict[str, Any] | None:
        """Select one item from every bound pool.

        Pools are visited in binding order. Each gets a fresh query with its
        filters and its selector (default from settings, normally first; the
        random default draws from the pool's own seeded random source).

        Selection happens in two phases. First every pool picks an entry
        without emitting anything; if any pool has no match, execute()
        returns None and no pool sees a `before_select`, `after_select` or
        `get` event. Only once every pool has a pick are those events
        emitted, pool by pool, so usage counters never move for a bundle
        that was not handed out.

        Returns:
            Mapping of name to selected data, {} when nothing is bound, or
            None as soon as any pool yields no selection.
        """
        picks: list[tuple[str, Pool[Any], list[Entry[Any]], Entry[Any]]] = []

        for name, pool in self._pools.items():
            query = pool.query()
            for predicate in self._filters.get(name, []):
                query = query.where(predicate)

            candidates = query.materialize()
            selector = self._selectors.get(name) or self._default_selector(pool)
            chosen = selector(candidates)
            if chosen is None:
                return None
            picks.append((name, pool, candidates, chosen))

        result: dict[str, Any] = {}
        for name, pool, candidates, chosen in picks:
            pool.emit(PoolEvent.BEFORE_SELECT, candidates)
            pool.emit(PoolEvent.AFTER_SELECT, chosen.data)
            pool.emit(PoolEvent.GET, chosen)
            result[name] = chosen.data

        return result
