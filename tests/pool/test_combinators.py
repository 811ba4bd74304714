"""Tests for pool combinators: merging, set algebra, grouping and sampling.

Critical Invariants:
- merge_unique never duplicates a key, and merging the same sources again adds nothing
- partition splits a pool completely and disjointly, preserving order
- clone() and to_pool() never leak metadata changes back to the source
"""

from collections import Counter

import pytest
from hypothesis import given
from hypothesis import strategies as st

from poolkit import Pool, PoolSettings

ids = st.lists(st.integers(min_value=0, max_value=8), max_size=15)


def _pool_of(values, settings=None) -> Pool:
    pool = Pool(settings=settings or PoolSettings(random_seed=0))
    for v in values:
        pool.add({"id": v})
    return pool


def _ids(pool: Pool) -> list[int]:
    return [d["id"] for d in pool.all]


# merge


def test_merge_appends_in_argument_order(settings):
    a = _pool_of([1, 2], settings)
    b = _pool_of([2, 3], settings)
    target = _pool_of([0], settings)

    result = target.merge(a, b)

    assert result is target
    assert _ids(target) == [0, 1, 2, 2, 3]


def test_merge_flattens_lists_and_accepts_queries(proxy_pool, settings):
    extra = _pool_of([7], settings)
    target = Pool(settings=settings)

    target.merge([extra], proxy_pool.query().where(lambda e: e.data["country"] == "US"))

    assert [d.get("id", d.get("ip")) for d in target.all] == [7, "1.1.1.1", "3.3.3.3"]
    # Query results arrive without metadata
    assert target.all_entries[1].metadata == {}


def test_merge_copies_metadata_from_pools(proxy_pool, settings):
    target = Pool(settings=settings).merge(proxy_pool)

    target.all_entries[0].metadata["usedCount"] = 99

    assert proxy_pool.all_entries[0].metadata["usedCount"] == 0
    assert target.all[0] is proxy_pool.all[0]


def test_merge_rejects_non_sources(pool):
    with pytest.raises(TypeError, match="expected Pool or Query"):
        pool.merge([{"id": 1}])


# merge_unique


@given(a=ids, b=ids)
def test_merge_unique_is_unique_and_idempotent(a, b):
    """PROPERTY: keys never repeat, and re-merging the same sources adds nothing."""
    settings = PoolSettings(random_seed=0)
    first = _pool_of(a, settings)
    second = _pool_of(b, settings)

    target = Pool(settings=settings).merge_unique("id", first, second)
    keys = _ids(target)

    assert len(keys) == len(set(keys))
    assert keys == list(dict.fromkeys(a + b))

    target.merge_unique("id", first, second)
    assert _ids(target) == keys


def test_merge_unique_respects_existing_keys(settings):
    target = _pool_of([1], settings)
    target.all_entries[0].metadata["origin"] = "target"

    target.merge_unique(lambda d: d["id"], _pool_of([1, 2], settings))

    assert _ids(target) == [1, 2]
    assert target.all_entries[0].metadata == {"origin": "target"}


# Set algebra


def test_union_uses_structural_equality_by_default(settings):
    a = _pool_of([1, 2], settings)
    b = _pool_of([2, 3, 3], settings)

    a.union(b)

    assert _ids(a) == [1, 2, 3]


def test_union_with_custom_compare(settings):
    a = Pool(settings=settings)
    a.add({"id": 1, "v": "x"})
    b = Pool(settings=settings)
    b.add({"id": 1, "v": "y"})
    b.add({"id": 2, "v": "z"})

    a.union(b, lambda x, y: x["id"] == y["id"])

    assert [d["v"] for d in a.all] == ["x", "z"]


def test_intersect_and_difference(settings):
    a = _pool_of([1, 2, 3, 2], settings)
    b = _pool_of([2, 3, 4], settings)

    assert _ids(_pool_of([1, 2, 3, 2], settings).intersect(b)) == [2, 3, 2]
    assert _ids(a.difference(b)) == [1]


def test_set_operations_with_dataclasses(settings, proxy_cls):
    a = Pool(settings=settings)
    a.add(proxy_cls("1.1.1.1", "US", 100))
    a.add(proxy_cls("2.2.2.2", "UK", 200))
    b = Pool(settings=settings)
    b.add(proxy_cls("1.1.1.1", "US", 100))

    a.intersect(b)

    assert [p.ip for p in a.all] == ["1.1.1.1"]


def test_intersect_with_empty_pool_empties(settings):
    a = _pool_of([1, 2], settings)

    assert a.intersect(Pool(settings=settings)).size == 0


# deduplicate / group_by / partition


def test_deduplicate_keeps_first_occurrence(proxy_pool):
    proxy_pool.deduplicate("country")

    assert [d["ip"] for d in proxy_pool.all] == ["1.1.1.1", "2.2.2.2"]


def test_group_by_field_and_function(proxy_pool):
    by_country = proxy_pool.group_by("country")
    by_speed = proxy_pool.group_by(lambda d: "fast" if d["speed"] > 120 else "slow")

    assert list(by_country) == ["US", "UK"]
    assert [d["ip"] for d in by_country["US"].all] == ["1.1.1.1", "3.3.3.3"]
    assert by_speed["fast"].size == 2
    assert by_speed["slow"].size == 1


def test_group_by_shares_entries(proxy_pool):
    groups = proxy_pool.group_by("country")

    groups["UK"].all_entries[0].metadata["usedCount"] = 0

    assert proxy_pool.all_entries[1].metadata["usedCount"] == 0
    assert groups["UK"].settings is proxy_pool.settings


@given(values=ids)
def test_partition_is_complete_and_disjoint(values):
    """PROPERTY: matching + rest covers every entry exactly once, order preserved."""
    pool = _pool_of(values)

    matching, rest = pool.partition(lambda e: e.data["id"] % 2 == 0)

    assert _ids(matching) == [v for v in values if v % 2 == 0]
    assert _ids(rest) == [v for v in values if v % 2 != 0]
    assert matching.size + rest.size == pool.size
    assert {id(e) for e in matching.all_entries}.isdisjoint(id(e) for e in rest.all_entries)


# Unhashable keys


def _tagged(settings, *rows) -> Pool:
    pool = Pool(settings=settings)
    for name, tags in rows:
        pool.add({"name": name, "tags": tags})
    return pool


def test_group_by_list_valued_field(settings):
    pool = _tagged(settings, ("a", ["x"]), ("b", ["y", "z"]), ("c", ["x"]))

    groups = pool.group_by("tags")

    assert list(groups) == [["x"], ["y", "z"]]
    assert [d["name"] for d in groups[["x"]].all] == ["a", "c"]
    assert groups[["y", "z"]].size == 1


def test_group_by_key_function_returning_dict(settings):
    pool = _tagged(settings, ("a", ["x"]), ("b", ["y"]), ("c", ["x"]))

    groups = pool.group_by(lambda d: {"first": d["tags"][0]})

    assert len(groups) == 2
    assert groups[{"first": "x"}].size == 2


def test_deduplicate_on_unhashable_key(settings):
    pool = Pool(settings=settings)
    for i, loc in enumerate([{"x": 1}, {"x": 2}, {"x": 1}]):
        pool.add({"id": i, "loc": loc})

    pool.deduplicate("loc")

    assert _ids(pool) == [0, 1]


def test_merge_unique_on_list_keys(settings):
    a = _tagged(settings, ("a", ["x"]), ("b", ["y"]))
    b = _tagged(settings, ("c", ["y"]), ("d", ["z"]))

    a.merge_unique("tags", b)

    assert [d["name"] for d in a.all] == ["a", "b", "d"]


def test_union_keeps_booleans_distinct_from_ints(settings):
    a = Pool(settings=settings)
    a.add({"v": 1})
    b = Pool(settings=settings)
    b.add({"v": True})

    a.union(b)

    assert a.size == 2
    assert a.all[1]["v"] is True


# Randomized operations


def test_sample_sizes(settings):
    pool = _pool_of(range(10), settings)

    assert pool.sample(0).size == 0
    assert pool.sample(-3).size == 0
    assert pool.sample(4).size == 4
    assert sorted(_ids(pool.sample(50))) == list(range(10))


def test_sample_draws_without_replacement(settings):
    pool = _pool_of(range(10), settings)

    drawn = _ids(pool.sample(6))

    assert len(set(drawn)) == 6
    assert set(drawn) <= set(range(10))
    assert _ids(pool) == list(range(10))


def test_shuffle_is_permutation_and_seeded():
    a = _pool_of(range(20), PoolSettings(random_seed=99)).shuffle()
    b = _pool_of(range(20), PoolSettings(random_seed=99)).shuffle()

    assert sorted(_ids(a)) == list(range(20))
    assert _ids(a) == _ids(b)


def test_shuffle_is_uniform_over_permutations():
    """All 3! orderings appear with roughly equal frequency."""
    pool = _pool_of([0, 1, 2], PoolSettings(random_seed=2024))

    counts = Counter(tuple(_ids(pool.shuffle())) for _ in range(6000))

    assert len(counts) == 6
    assert all(800 < n < 1200 for n in counts.values()), counts


def test_random_selector_uses_pool_seed():
    a = _pool_of(range(10), PoolSettings(random_seed=3))
    b = _pool_of(range(10), PoolSettings(random_seed=3))

    picks_a = [a.query().select(a.random_selector())["id"] for _ in range(5)]
    picks_b = [b.query().select(b.random_selector())["id"] for _ in range(5)]

    assert picks_a == picks_b


# clone


def test_clone_isolates_metadata(proxy_pool):
    copy = proxy_pool.clone()

    copy.all_entries[0].metadata["usedCount"] = 10
    copy.add({"ip": "4.4.4.4"})

    assert proxy_pool.all_entries[0].metadata["usedCount"] == 0
    assert proxy_pool.size == 3
    assert copy.all[:3] == proxy_pool.all


def test_clone_does_not_copy_handlers_or_wrappers(proxy_pool):
    calls = []
    proxy_pool.on("add", calls.append)
    proxy_pool.wrap("add", lambda original, *a, **kw: None)

    copy = proxy_pool.clone()
    copy.add({"ip": "4.4.4.4"})

    assert calls == []
    assert copy.size == 4
