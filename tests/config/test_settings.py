"""Tests for PoolSettings."""

import pytest
from pydantic import ValidationError

from poolkit import PoolSettings


def test_defaults(monkeypatch):
    for name in ("RANDOM_SEED", "DEFAULT_SELECTOR", "METADATA_COPY", "WARN_ON_CLAMP"):
        monkeypatch.delenv(f"POOL_{name}", raising=False)

    settings = PoolSettings(_env_file=None)

    assert settings.random_seed is None
    assert settings.default_selector == "first"
    assert settings.metadata_copy == "shallow"
    assert settings.warn_on_clamp is True


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("POOL_RANDOM_SEED", "42")
    monkeypatch.setenv("POOL_DEFAULT_SELECTOR", "random")
    monkeypatch.setenv("POOL_METADATA_COPY", "deep")
    monkeypatch.setenv("POOL_WARN_ON_CLAMP", "false")

    settings = PoolSettings(_env_file=None)

    assert settings.random_seed == 42
    assert settings.default_selector == "random"
    assert settings.metadata_copy == "deep"
    assert settings.warn_on_clamp is False


def test_explicit_values_override_environment(monkeypatch):
    monkeypatch.setenv("POOL_RANDOM_SEED", "42")

    assert PoolSettings(random_seed=1, _env_file=None).random_seed == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"random_seed": -1},
        {"default_selector": "weighted"},
        {"metadata_copy": "none"},
    ],
    ids=["negative_seed", "unknown_selector", "unknown_copy_mode"],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        PoolSettings(_env_file=None, **overrides)
