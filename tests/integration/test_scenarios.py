"""End-to-end journeys through pools, queries, selectors and binders."""

from poolkit import Binder, Pool, PoolEvent, PoolSettings, Selectors, merge_unique_pools


def _proxies(settings, *rows) -> Pool:
    pool = Pool(settings=settings)
    for ip, country, speed in rows:
        pool.add({"ip": ip, "country": country, "speed": speed}, {"usedCount": 0})
    return pool


def test_fastest_proxy_in_country(settings):
    pool = _proxies(
        settings,
        ("1.1.1.1", "US", 100),
        ("2.2.2.2", "UK", 200),
        ("3.3.3.3", "US", 150),
    )

    chosen = (
        pool.query()
        .where(lambda e: e.data["country"] == "US")
        .sort_by("speed", "desc")
        .select(Selectors.first)
    )

    assert chosen == {"ip": "3.3.3.3", "country": "US", "speed": 150}


def test_merge_unique_with_one_shared_key(settings):
    a = _proxies(settings, ("1.1.1.1", "US", 100), ("2.2.2.2", "UK", 200))
    b = _proxies(settings, ("2.2.2.2", "UK", 210), ("3.3.3.3", "US", 150))

    merged = merge_unique_pools([a, b], "ip", settings=settings)

    assert merged.size == 3
    assert merged.get("ip", "2.2.2.2")["speed"] == 200


def test_group_by_country(settings):
    pool = _proxies(
        settings,
        ("1.1.1.1", "US", 100),
        ("2.2.2.2", "UK", 200),
        ("3.3.3.3", "US", 150),
        ("4.4.4.4", "DE", 90),
    )

    groups = pool.group_by("country")

    assert len(groups) == 3
    assert groups["US"].size == 2


def test_get_handler_counts_usage(settings):
    pool = Pool(settings=settings)
    pool.add({"id": "x"}, {"usedCount": 0})
    pool.add({"id": "y"}, {"usedCount": 0})

    def count_use(entry):
        entry.metadata["usedCount"] += 1

    pool.on(PoolEvent.GET, count_use)
    pool.get("id", "x")
    pool.get("id", "x")

    assert pool.all_entries[0].metadata["usedCount"] == 2
    assert pool.all_entries[1].metadata["usedCount"] == 0


def test_account_rotation_across_pools():
    """Least-used proxy and account are paired until a pool runs dry."""
    settings = PoolSettings(random_seed=7)
    proxies = _proxies(settings, ("1.1.1.1", "US", 100), ("3.3.3.3", "US", 150))
    accounts = Pool(settings=settings)
    accounts.add({"username": "ann", "service": "twitter"}, {"usedCount": 0})
    accounts.add({"username": "bob", "service": "twitter"}, {"usedCount": 0})

    def count_use(entry):
        entry.metadata["usedCount"] += 1

    proxies.on(PoolEvent.GET, count_use)
    accounts.on(PoolEvent.GET, count_use)

    binder = (
        Binder(settings=settings)
        .bind("proxy", proxies)
        .bind("account", accounts)
        .where("account", lambda e: e.metadata["usedCount"] < 1)
        .select_with("proxy", Selectors.min_by("usedCount"))
        .select_with("account", Selectors.min_by("usedCount"))
    )

    first = binder.execute()
    second = binder.execute()
    third = binder.execute()

    assert (first["proxy"]["ip"], first["account"]["username"]) == ("1.1.1.1", "ann")
    assert (second["proxy"]["ip"], second["account"]["username"]) == ("3.3.3.3", "bob")
    assert third is None


def test_query_to_pool_pipeline(settings):
    pool = _proxies(
        settings,
        ("1.1.1.1", "US", 100),
        ("2.2.2.2", "UK", 200),
        ("3.3.3.3", "US", 150),
    )

    fast = pool.query().where(lambda e: e.data["speed"] >= 150).to_pool()
    fast.all_entries[0].metadata["usedCount"] = 10
    by_country = fast.group_by("country")

    assert sorted(by_country) == ["UK", "US"]
    assert pool.all_entries[1].metadata["usedCount"] == 0
