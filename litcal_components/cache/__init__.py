"""
Cache Stores
============
Key-value stores consumed by the caching transport.
"""

from .base import CacheStore, TTL, ttl_seconds
from .memory import InMemoryCache
from .redis_cache import RedisCache

__all__ = [
    "CacheStore",
    "TTL",
    "ttl_seconds",
    "InMemoryCache",
    "RedisCache",
]
