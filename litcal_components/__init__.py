"""
litcal-components
=================
HTTP client core for the Liturgical Calendar API: a composable transport
stack (retry, circuit breaker, caching, logging) and the calendar
metadata provider, plus the fluent calendar request client.

Usage:
    from litcal_components import create_production_client, get_logger
    from litcal_components.metadata import get_instance

    client = create_production_client(logger=get_logger("litcal"))
    provider = get_instance(http_client=client)
"""

__version__ = "0.1.0"

# Errors
from litcal_components.exceptions import LitCalError, CalendarRequestError

# Configuration
from litcal_components.config import ClientConfig, DEFAULT_API_URL
from litcal_components.logging import configure_logging, get_logger

# Transports
from litcal_components.http import (
    HttpClient,
    Response,
    TransportError,
    CircuitOpenError,
    HttpxTransport,
    UrllibTransport,
    RetryTransport,
    CachingTransport,
    LoggingTransport,
)
from litcal_components.circuit_breaker import CircuitBreakerTransport, CircuitState

# Cache stores
from litcal_components.cache import CacheStore, InMemoryCache, RedisCache

# Factory
from litcal_components.factory import (
    create_client,
    create_fallback_client,
    create_with_logging,
    create_with_caching,
    create_with_retry,
    create_with_circuit_breaker,
    create_production_client,
)

# Metadata
from litcal_components.metadata import (
    MetadataProvider,
    MetadataValidationError,
    ConfigurationError,
    CalendarIndex,
)

# Client
from litcal_components.client import ApiClient, CalendarRequest

__all__ = [
    "__version__",
    # Errors
    "LitCalError",
    "CalendarRequestError",
    "TransportError",
    "CircuitOpenError",
    "MetadataValidationError",
    "ConfigurationError",
    # Configuration
    "ClientConfig",
    "DEFAULT_API_URL",
    "configure_logging",
    "get_logger",
    # Transports
    "HttpClient",
    "Response",
    "HttpxTransport",
    "UrllibTransport",
    "RetryTransport",
    "CircuitBreakerTransport",
    "CircuitState",
    "CachingTransport",
    "LoggingTransport",
    # Cache stores
    "CacheStore",
    "InMemoryCache",
    "RedisCache",
    # Factory
    "create_client",
    "create_fallback_client",
    "create_with_logging",
    "create_with_caching",
    "create_with_retry",
    "create_with_circuit_breaker",
    "create_production_client",
    # Metadata
    "MetadataProvider",
    "CalendarIndex",
    # Client
    "ApiClient",
    "CalendarRequest",
]
