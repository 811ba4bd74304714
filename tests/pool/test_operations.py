"""Tests for the pure multi-pool functions."""

from poolkit import (
    Pool,
    PoolSettings,
    group_pools,
    intersect_pools,
    merge_pools,
    merge_unique_pools,
    merge_unique_with,
    pool_from_query,
)


def _accounts(settings, *rows):
    pool = Pool(settings=settings)
    for username, ts in rows:
        pool.add({"username": username}, {"ts": ts})
    return pool


def test_merge_pools_leaves_inputs_untouched(settings):
    a = _accounts(settings, ("ann", 1))
    b = _accounts(settings, ("bob", 2))

    merged = merge_pools(a, b, settings=settings)

    assert [d["username"] for d in merged.all] == ["ann", "bob"]
    assert a.size == b.size == 1
    assert merged.settings is settings


def test_merge_unique_pools_first_wins(settings):
    a = _accounts(settings, ("ann", 1), ("bob", 1))
    b = _accounts(settings, ("bob", 2), ("cat", 2))

    merged = merge_unique_pools([a, b], "username", settings=settings)

    assert [d["username"] for d in merged.all] == ["ann", "bob", "cat"]
    assert merged.all_entries[1].metadata == {"ts": 1}


def test_merge_unique_with_resolver(settings):
    a = _accounts(settings, ("ann", 1), ("bob", 1))
    b = _accounts(settings, ("bob", 5), ("cat", 2))

    def newest(existing, duplicate):
        return duplicate if duplicate.metadata["ts"] > existing.metadata["ts"] else existing

    merged = merge_unique_with([a, b], "username", newest, settings=settings)

    assert [d["username"] for d in merged.all] == ["ann", "bob", "cat"]
    assert merged.all_entries[1].metadata == {"ts": 5}

    merged.all_entries[1].metadata["ts"] = 0
    assert b.all_entries[0].metadata == {"ts": 5}


def test_merge_unique_with_query_sources(settings):
    a = _accounts(settings, ("ann", 1))
    b = _accounts(settings, ("ann", 2), ("bob", 2))

    merged = merge_unique_with(
        [a, b.query().where(lambda e: e.metadata["ts"] == 2)],
        lambda d: d["username"],
        lambda existing, duplicate: duplicate,
        settings=settings,
    )

    assert [d["username"] for d in merged.all] == ["ann", "bob"]
    # The query's "ann" replaced the pool's, and query results carry no metadata
    assert merged.all_entries[0].metadata == {}


def test_intersect_pools_is_non_mutating(settings):
    a = _accounts(settings, ("ann", 1), ("bob", 1))
    b = _accounts(settings, ("bob", 9))

    result = intersect_pools(a, b)

    assert [d["username"] for d in result.all] == ["bob"]
    assert a.size == 2
    assert result is not a


def test_group_pools(settings):
    a = _accounts(settings, ("ann", 1))
    b = _accounts(settings, ("bob", 2), ("ann", 3))

    groups = group_pools([a, b], "username", settings=settings)

    assert list(groups) == ["ann", "bob"]
    assert [e.metadata["ts"] for e in groups["ann"].all_entries] == [1, 3]


def test_pool_from_query():
    settings = PoolSettings(metadata_copy="deep")
    pool = Pool(settings=settings)
    pool.add({"username": "ann"}, {"tags": ["x"]})

    result = pool_from_query(pool.query())
    result.all_entries[0].metadata["tags"].append("y")

    assert pool.all_entries[0].metadata == {"tags": ["x"]}
    assert result.settings is settings


def test_merge_unique_with_list_keys(settings):
    a = Pool(settings=settings)
    a.add({"route": ["a", "b"], "cost": 5})
    b = Pool(settings=settings)
    b.add({"route": ["a", "b"], "cost": 3})
    b.add({"route": ["b", "c"], "cost": 1})

    def cheapest(existing, duplicate):
        return duplicate if duplicate.data["cost"] < existing.data["cost"] else existing

    merged = merge_unique_with([a, b], "route", cheapest, settings=settings)

    assert [d["cost"] for d in merged.all] == [3, 1]
