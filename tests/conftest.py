"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass

from poolkit import Pool, PoolSettings


@dataclass(slots=True)
class FixtureProxy:
    ip: str
    country: str
    speed: int


@pytest.fixture
def settings() -> PoolSettings:
    """Deterministic settings (seeded random source)."""
    return PoolSettings(random_seed=1234)


@pytest.fixture
def pool(settings) -> Pool:
    """Fresh empty Pool."""
    return Pool(settings=settings)


@pytest.fixture
def proxy_pool(settings) -> Pool:
    """Three proxies: two US, one UK, with usage counters in metadata."""
    proxies = Pool(settings=settings)
    proxies.add({"ip": "1.1.1.1", "country": "US", "speed": 100}, {"usedCount": 0})
    proxies.add({"ip": "2.2.2.2", "country": "UK", "speed": 200}, {"usedCount": 5})
    proxies.add({"ip": "3.3.3.3", "country": "US", "speed": 150}, {"usedCount": 2})
    return proxies


@pytest.fixture
def proxy_cls():
    return FixtureProxy
