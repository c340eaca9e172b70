"""
Caching Decorator
=================
Serves successful GET responses from a cache store; POST always bypasses.
"""

import hashlib
import json
from typing import Dict

from litcal_components.cache.base import CacheStore
from litcal_components.logging import NULL_LOGGER
from litcal_components.metrics import record_cache_event

from .base import Body, Headers, HttpClient
from .response import Response

# Headers that change the representation returned by the API
CACHE_RELEVANT_HEADERS = frozenset({"accept", "accept-language"})

DEFAULT_TTL = 3600


class CachingTransport(HttpClient):
    """
    Transport decorator caching 2xx GET responses for `ttl` seconds.

    Cache keys cover the URL plus `Accept` and `Accept-Language`, so that
    headers like User-Agent or request ids do not fragment the cache.
    """

    def __init__(
        self,
        client: HttpClient,
        cache: CacheStore,
        ttl: int = DEFAULT_TTL,
        logger=None,
    ):
        self._client = client
        self.cache = cache
        self.ttl = ttl
        self._logger = logger if logger is not None else NULL_LOGGER

    def get(self, url: str, headers: Headers = None) -> Response:
        key = cache_key(url, headers or {})

        cached = self.cache.get(key)
        if cached is not None:
            self._logger.debug("http_cache_hit", url=url, key=key)
            record_cache_event("hit")
            return Response.from_dict(cached)

        self._logger.debug("http_cache_miss", url=url, key=key)
        record_cache_event("miss")

        response = self._client.get(url, headers)
        if response.is_success:
            self.cache.set(key, response.to_dict(), self.ttl)
            self._logger.debug("http_response_cached", key=key, ttl=self.ttl, size=response.size)
        return response

    def post(self, url: str, body: Body, headers: Headers = None) -> Response:
        return self._client.post(url, body, headers)

    def close(self) -> None:
        self._client.close()


def cache_key(url: str, headers: Dict[str, str]) -> str:
    """SHA-256 key over the URL and the representation-affecting headers."""
    relevant = {
        name.lower(): value
        for name, value in headers.items()
        if name.lower() in CACHE_RELEVANT_HEADERS
    }
    key_data = json.dumps({"url": url, "headers": relevant}, sort_keys=True)
    return "http_" + hashlib.sha256(key_data.encode("utf-8")).hexdigest()
