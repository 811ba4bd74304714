"""poolkit: in-memory pools of data with queries, selectors and set algebra.

Usage:
    from poolkit import Binder, Pool, PoolEvent, Selectors

    proxies = Pool()
    proxies.add({"ip": "1.1.1.1", "country": "US", "speed": 100}, {"usedCount": 0})
    proxies.add({"ip": "3.3.3.3", "country": "US", "speed": 150}, {"usedCount": 2})

    fastest = (
        proxies.query()
        .where(lambda e: e.data["country"] == "US")
        .sort_by("speed", "desc")
        .select(Selectors.first)
    )

    accounts = Pool()
    accounts.add({"username": "user1", "service": "twitter"})

    bundle = Binder().bind("proxy", proxies).bind("account", accounts).execute()
"""

__version__ = "0.1.0"

# Core primitives
from poolkit.core import (
    MISSING,
    Entry,
    PoolEvent,
    Query,
    RetryPolicy,
    Selector,
    SelectorKind,
    Selectors,
    SortOrder,
    min_by,
    random_with,
    retrying,
    select_first,
    select_last,
    select_random,
    structurally_equal,
    warn_on_call,
    weighted,
)

# Cross-pool selection
from poolkit.binder import Binder

# Configuration
from poolkit.config import PoolSettings, get_settings

# Container and multi-pool operations
from poolkit.pool import (
    Pool,
    group_pools,
    intersect_pools,
    merge_pools,
    merge_unique_pools,
    merge_unique_with,
    pool_from_query,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Entry",
    "MISSING",
    "Query",
    "SortOrder",
    "PoolEvent",
    "Selector",
    "SelectorKind",
    "Selectors",
    "select_first",
    "select_last",
    "select_random",
    "random_with",
    "min_by",
    "weighted",
    "structurally_equal",
    "RetryPolicy",
    "retrying",
    "warn_on_call",
    # Pool
    "Pool",
    "merge_pools",
    "merge_unique_pools",
    "merge_unique_with",
    "intersect_pools",
    "group_pools",
    "pool_from_query",
    # Binder
    "Binder",
    # Config
    "PoolSettings",
    "get_settings",
]
