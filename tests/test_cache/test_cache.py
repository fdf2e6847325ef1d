"""Tests for the ModelCache module."""

from __future__ import annotations

import time

import pytest

from cmdschemas.cache import ModelCache
from cmdschemas.models import CacheConfig

URL = "https://example.com/s3/2006-03-01/service-2.json"


@pytest.fixture()
def cache(tmp_path):
    """Create a ModelCache with default config pointing at tmp_path."""
    c = ModelCache(tmp_path, CacheConfig(enabled=True, ttl_seconds=300))
    yield c
    c.close()


@pytest.fixture()
def disabled_cache(tmp_path):
    """Create a disabled ModelCache."""
    c = ModelCache(tmp_path, CacheConfig(enabled=False, ttl_seconds=300))
    yield c
    c.close()


def _make_model(operation: str = "PutObject") -> dict:
    """Build a minimal raw service model."""
    return {
        "metadata": {"endpointPrefix": "s3"},
        "operations": {operation: {"input": {"shape": f"{operation}Request"}}},
        "shapes": {f"{operation}Request": {"type": "structure", "members": {}}},
    }


# ------------------------------------------------------------------ #
# Core get/set behaviour
# ------------------------------------------------------------------ #


class TestGetSet:
    def test_set_and_get(self, cache: ModelCache) -> None:
        """Cache stores and retrieves a model by URL."""
        cache.set(URL, _make_model())
        assert cache.get(URL) == _make_model()

    def test_cache_miss_returns_none(self, cache: ModelCache) -> None:
        assert cache.get("https://example.com/missing.json") is None

    def test_urls_are_distinct_keys(self, cache: ModelCache) -> None:
        cache.set(URL, _make_model("PutObject"))
        cache.set(URL + "?v=2", _make_model("GetObject"))
        assert "PutObject" in cache.get(URL)["operations"]
        assert "GetObject" in cache.get(URL + "?v=2")["operations"]

    def test_persists_across_instances(self, tmp_path) -> None:
        config = CacheConfig(enabled=True, ttl_seconds=300)
        with ModelCache(tmp_path, config) as first:
            first.set(URL, _make_model())
        with ModelCache(tmp_path, config) as second:
            assert second.get(URL) == _make_model()


# ------------------------------------------------------------------ #
# TTL expiry
# ------------------------------------------------------------------ #


class TestTTL:
    def test_ttl_expiry(self, tmp_path) -> None:
        """Entries expire after ttl_seconds."""
        c = ModelCache(tmp_path, CacheConfig(enabled=True, ttl_seconds=1))
        try:
            c.set(URL, _make_model())
            assert c.get(URL) is not None
            time.sleep(1.5)
            assert c.get(URL) is None
        finally:
            c.close()


# ------------------------------------------------------------------ #
# Disabled cache
# ------------------------------------------------------------------ #


class TestDisabled:
    def test_disabled_get_returns_none(self, disabled_cache: ModelCache) -> None:
        assert disabled_cache.get(URL) is None

    def test_disabled_set_is_noop(self, disabled_cache: ModelCache) -> None:
        disabled_cache.set(URL, _make_model())
        assert disabled_cache.get(URL) is None

    def test_disabled_creates_no_directory(self, tmp_path) -> None:
        with ModelCache(tmp_path / "c", CacheConfig(enabled=False)):
            pass
        assert not (tmp_path / "c" / "models").exists()

    def test_disabled_stats(self, disabled_cache: ModelCache) -> None:
        assert disabled_cache.stats() == {"enabled": False}


# ------------------------------------------------------------------ #
# Clear and stats
# ------------------------------------------------------------------ #


class TestClearAndStats:
    def test_clear_removes_all_entries(self, cache: ModelCache) -> None:
        cache.set(URL, _make_model())
        cache.set(URL + "?v=2", _make_model())
        cache.clear()
        assert cache.get(URL) is None
        assert cache.get(URL + "?v=2") is None

    def test_stats(self, cache: ModelCache, tmp_path) -> None:
        cache.set(URL, _make_model())
        stats = cache.stats()
        assert stats["enabled"] is True
        assert stats["size"] == 1
        assert stats["directory"] == str(tmp_path / "models")
        assert stats["ttl_seconds"] == 300
