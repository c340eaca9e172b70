"""
Unit Tests for Cache Stores
===========================
Tests for the in-memory and Redis cache stores.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from litcal_components.cache import CacheStore, InMemoryCache, RedisCache, ttl_seconds


class TestTtlSeconds:
    """Tests for TTL normalization."""

    def test_values(self):
        """Should accept numbers and timedeltas."""
        assert ttl_seconds(None) is None
        assert ttl_seconds(60) == 60.0
        assert ttl_seconds(1.5) == 1.5
        assert ttl_seconds(timedelta(minutes=2)) == 120.0
        assert ttl_seconds(-5) == 0.0


class TestInMemoryCache:
    """Tests for InMemoryCache."""

    def test_implements_protocol(self):
        """Should satisfy the CacheStore protocol."""
        assert isinstance(InMemoryCache(), CacheStore)

    def test_set_get_has_delete(self):
        """Should store, report and delete values."""
        cache = InMemoryCache()

        assert cache.get("k") is None
        assert cache.get("k", "default") == "default"
        assert cache.has("k") is False

        cache.set("k", {"status": 200})
        assert cache.get("k") == {"status": 200}
        assert cache.has("k") is True

        cache.delete("k")
        assert cache.has("k") is False

    def test_ttl_expiry(self, clock):
        """Entries should expire after their TTL."""
        cache = InMemoryCache(clock=clock)
        cache.set("k", "v", ttl=10)

        clock.advance(10)
        assert cache.get("k") == "v"

        clock.advance(0.5)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_timedelta_ttl(self, clock):
        """Should accept timedelta TTLs."""
        cache = InMemoryCache(clock=clock)
        cache.set("k", "v", ttl=timedelta(seconds=5))

        clock.advance(6)
        assert cache.has("k") is False

    def test_no_ttl_never_expires(self, clock):
        """Entries without a TTL should not expire."""
        cache = InMemoryCache(clock=clock)
        cache.set("k", "v")

        clock.advance(10 ** 9)
        assert cache.get("k") == "v"

    def test_stored_none_is_present(self):
        """has() should report a key holding None as present."""
        cache = InMemoryCache()
        cache.set("k", None)

        assert cache.has("k") is True
        assert cache.has("other") is False

    def test_len_excludes_expired_entries(self, clock):
        """len() should not count entries whose TTL has passed."""
        cache = InMemoryCache(clock=clock)
        cache.set("short", 1, ttl=5)
        cache.set("long", 2, ttl=60)
        cache.set("forever", 3)

        clock.advance(10)

        assert len(cache) == 2
        assert cache.has("short") is False
        assert cache.get("long") == 2

    def test_clear(self):
        """Should remove every entry."""
        cache = InMemoryCache()
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.clear() is True
        assert len(cache) == 0


class TestRedisCache:
    """Tests for RedisCache against a mocked client."""

    @pytest.fixture
    def redis_client(self):
        return MagicMock()

    def test_implements_protocol(self, redis_client):
        """Should satisfy the CacheStore protocol."""
        assert isinstance(RedisCache(redis_client), CacheStore)

    def test_set_with_ttl_uses_setex(self, redis_client):
        """Should store JSON under the prefixed key with an expiry."""
        cache = RedisCache(redis_client, prefix="test:")

        cache.set("k", {"a": 1}, ttl=60)

        redis_client.setex.assert_called_once_with("test:k", 60, '{"a": 1}')

    def test_sub_second_ttl_rounds_up(self, redis_client):
        """Expiry should be at least one second."""
        RedisCache(redis_client).set("k", 1, ttl=0.2)

        redis_client.setex.assert_called_once_with("litcal:k", 1, "1")

    def test_set_without_ttl(self, redis_client):
        """Should use a plain SET when no TTL is given."""
        RedisCache(redis_client).set("k", "v")

        redis_client.set.assert_called_once_with("litcal:k", '"v"')

    def test_get_decodes_json(self, redis_client):
        """Should decode stored JSON."""
        redis_client.get.return_value = b'{"status": 200}'

        assert RedisCache(redis_client).get("k") == {"status": 200}
        redis_client.get.assert_called_once_with("litcal:k")

    def test_get_missing(self, redis_client):
        """Should return the default for missing keys."""
        redis_client.get.return_value = None

        assert RedisCache(redis_client).get("k", "default") == "default"

    def test_corrupt_entry_is_dropped(self, redis_client):
        """Undecodable entries should be deleted and treated as missing."""
        redis_client.get.return_value = b"not json"

        assert RedisCache(redis_client).get("k") is None
        redis_client.delete.assert_called_once_with("litcal:k")

    def test_has(self, redis_client):
        """Should use EXISTS."""
        redis_client.exists.return_value = 1

        assert RedisCache(redis_client).has("k") is True
        redis_client.exists.assert_called_once_with("litcal:k")

    def test_clear_deletes_prefixed_keys(self, redis_client):
        """Should delete only keys under the prefix."""
        redis_client.scan_iter.return_value = iter(["litcal:a", "litcal:b"])

        RedisCache(redis_client).clear()

        redis_client.scan_iter.assert_called_once_with(match="litcal:*")
        redis_client.delete.assert_called_once_with("litcal:a", "litcal:b")

    def test_clear_empty(self, redis_client):
        """Should not call DELETE when nothing matches."""
        redis_client.scan_iter.return_value = iter([])

        RedisCache(redis_client).clear()

        redis_client.delete.assert_not_called()

    def test_from_url(self):
        """Should build a client from a redis:// URL without connecting."""
        cache = RedisCache.from_url("redis://localhost:6379/0", prefix="cal:")

        assert cache.prefix == "cal:"
        assert cache.redis.connection_pool.connection_kwargs["port"] == 6379
