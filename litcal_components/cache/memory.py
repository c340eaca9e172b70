"""
In-Memory Cache
===============
Process-local TTL cache for development, tests and single-process apps.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from .base import TTL, ttl_seconds

logger = structlog.get_logger(__name__)

_MISSING = object()


class InMemoryCache:
    """
    Dictionary-backed cache with per-key expiry.

    Expired entries are evicted lazily, when read or counted. For caches shared between
    processes, use RedisCache.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default

            value, expires_at = entry
            if expires_at is not None and self._clock() > expires_at:
                del self._entries[key]
                return default
            return value

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        seconds = ttl_seconds(ttl)
        expires_at = None if seconds is None else self._clock() + seconds
        with self._lock:
            self._entries[key] = (value, expires_at)
        return True

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def delete(self, key: str) -> bool:
        with self._lock:
            self._entries.pop(key, None)
        return True

    def clear(self) -> bool:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("memory_cache_cleared", entries=count)
        return True

    def __len__(self) -> int:
        """Number of live entries; expired ones are evicted first."""
        with self._lock:
            self._evict_expired()
            return len(self._entries)

    def _evict_expired(self) -> None:
        """Drop every expired entry. Caller holds the lock."""
        now = self._clock()
        expired = [
            key for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and now > expires_at
        ]
        for key in expired:
            del self._entries[key]
