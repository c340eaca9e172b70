"""
Redis Cache
===========
Redis-backed cache store shared across processes.
"""

import json
from typing import Any

import redis
import structlog

from .base import TTL, ttl_seconds

logger = structlog.get_logger(__name__)


class RedisCache:
    """
    Cache store on top of a synchronous Redis client.

    Values are stored as JSON, so anything the caching transport writes
    (plain dicts of status, headers and body) round-trips unchanged.
    """

    def __init__(self, redis_client, prefix: str = "litcal:"):
        """
        Args:
            redis_client: `redis.Redis` (or compatible) client
            prefix: Namespace prepended to every key
        """
        self.redis = redis_client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "litcal:") -> "RedisCache":
        """Build a cache from a redis:// URL."""
        return cls(redis.Redis.from_url(url), prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str, default: Any = None) -> Any:
        raw = self.redis.get(self._key(key))
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("redis_cache_corrupt_entry", key=key)
            self.redis.delete(self._key(key))
            return default

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        payload = json.dumps(value)
        seconds = ttl_seconds(ttl)
        if seconds is None:
            return bool(self.redis.set(self._key(key), payload))
        # SETEX rejects a zero expiry
        return bool(self.redis.setex(self._key(key), max(1, int(seconds)), payload))

    def has(self, key: str) -> bool:
        return bool(self.redis.exists(self._key(key)))

    def delete(self, key: str) -> bool:
        self.redis.delete(self._key(key))
        return True

    def clear(self) -> bool:
        keys = list(self.redis.scan_iter(match=f"{self.prefix}*"))
        if keys:
            self.redis.delete(*keys)
        logger.info("redis_cache_cleared", prefix=self.prefix, entries=len(keys))
        return True
