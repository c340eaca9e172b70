"""
HTTP Client Factory
===================
Builders for the standard transport compositions.

Production stack, innermost to outermost:

1. Base transport (httpx)
2. Circuit breaker (protects the base transport)
3. Retry (retries whatever the breaker lets through)
4. Caching (stores successful responses after retries)
5. Logging (observes the end-to-end outcome)
"""

from typing import Callable, Iterable, Optional

import httpx

from litcal_components.cache import CacheStore, InMemoryCache
from litcal_components.circuit_breaker import CircuitBreakerTransport
from litcal_components.config import ClientConfig
from litcal_components.http import (
    DEFAULT_RETRY_STATUS_CODES,
    CachingTransport,
    HttpClient,
    HttpxTransport,
    LoggingTransport,
    RetryTransport,
    UrllibTransport,
)
from litcal_components.http.httpx_client import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT


def create_client(
    http_client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
) -> HttpClient:
    """Base httpx transport, on the given client or a new pooled one."""
    return HttpxTransport(http_client, timeout=timeout, connect_timeout=connect_timeout)


def create_fallback_client(timeout: float = DEFAULT_TIMEOUT) -> HttpClient:
    """Base transport on the standard library opener."""
    return UrllibTransport(timeout=timeout)


def create_with_logging(
    logger=None,
    http_client: Optional[httpx.Client] = None,
) -> HttpClient:
    return LoggingTransport(create_client(http_client), logger)


def create_with_caching(
    cache: Optional[CacheStore] = None,
    ttl: int = 3600,
    logger=None,
    http_client: Optional[httpx.Client] = None,
) -> HttpClient:
    """Caching wrapped in logging, so cache hits and misses are logged too."""
    cached = CachingTransport(
        create_client(http_client),
        cache if cache is not None else InMemoryCache(),
        ttl,
        logger,
    )
    return LoggingTransport(cached, logger)


def create_with_retry(
    max_retries: int = 3,
    retry_delay_ms: int = 1000,
    exponential_backoff: bool = True,
    retry_status_codes: Iterable[int] = DEFAULT_RETRY_STATUS_CODES,
    logger=None,
    http_client: Optional[httpx.Client] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> HttpClient:
    retrying = RetryTransport(
        create_client(http_client),
        max_retries=max_retries,
        retry_delay_ms=retry_delay_ms,
        exponential_backoff=exponential_backoff,
        retry_status_codes=retry_status_codes,
        logger=logger,
        sleep=sleep,
    )
    return LoggingTransport(retrying, logger)


def create_with_circuit_breaker(
    failure_threshold: int = 5,
    recovery_timeout: float = 60.0,
    success_threshold: int = 2,
    logger=None,
    http_client: Optional[httpx.Client] = None,
    clock: Optional[Callable[[], float]] = None,
) -> HttpClient:
    breaker = CircuitBreakerTransport(
        create_client(http_client),
        failure_threshold=failure_threshold,
        recovery_timeout=recovery_timeout,
        success_threshold=success_threshold,
        logger=logger,
        clock=clock,
    )
    return LoggingTransport(breaker, logger)


def create_production_client(
    cache: Optional[CacheStore] = None,
    logger=None,
    config: Optional[ClientConfig] = None,
    http_client: Optional[httpx.Client] = None,
    sleep: Optional[Callable[[float], None]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> HttpClient:
    """
    Full resilience stack: circuit breaker, retry, caching and logging.

    Args:
        cache: Cache store (defaults to a new InMemoryCache)
        logger: structlog-style logger shared by every layer
        config: Thresholds, delays and TTLs (defaults from the environment)
        http_client: Optional preconfigured httpx.Client
        sleep: Retry sleep override, for tests
        clock: Circuit breaker time source override, for tests
    """
    config = config or ClientConfig()

    base = create_client(
        http_client,
        timeout=config.timeout,
        connect_timeout=config.connect_timeout,
    )
    breaker = CircuitBreakerTransport(
        base,
        failure_threshold=config.failure_threshold,
        recovery_timeout=config.recovery_timeout,
        success_threshold=config.success_threshold,
        logger=logger,
        clock=clock,
    )
    retrying = RetryTransport(
        breaker,
        max_retries=config.max_retries,
        retry_delay_ms=config.retry_delay_ms,
        exponential_backoff=True,
        retry_status_codes=DEFAULT_RETRY_STATUS_CODES,
        logger=logger,
        sleep=sleep,
    )
    cached = CachingTransport(
        retrying,
        cache if cache is not None else InMemoryCache(),
        config.cache_ttl,
        logger,
    )
    return LoggingTransport(cached, logger)
