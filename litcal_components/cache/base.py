"""
Cache Store Interface
=====================
Key-value contract consumed by the caching transport.
"""

from datetime import timedelta
from typing import Any, Optional, Protocol, Union, runtime_checkable

TTL = Optional[Union[int, float, timedelta]]


@runtime_checkable
class CacheStore(Protocol):
    """Any store offering get/set/has/delete/clear with per-key TTL."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> bool: ...

    def clear(self) -> bool: ...


def ttl_seconds(ttl: TTL) -> Optional[float]:
    """Normalize a TTL to seconds; None means no expiry."""
    if ttl is None:
        return None
    if isinstance(ttl, timedelta):
        return max(0.0, ttl.total_seconds())
    return max(0.0, float(ttl))
