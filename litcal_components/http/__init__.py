"""
HTTP Transports
===============
Base transports and the decorators layered around them.
"""

from .base import HttpClient, encode_body, has_header
from .response import Response
from .exceptions import TransportError, CircuitOpenError
from .httpx_client import HttpxTransport
from .urllib_client import UrllibTransport
from .retry import RetryTransport, DEFAULT_RETRY_STATUS_CODES
from .caching import CachingTransport, cache_key
from .logging_client import LoggingTransport, sanitize_headers

__all__ = [
    # Interface
    "HttpClient",
    "Response",
    "encode_body",
    "has_header",
    # Exceptions
    "TransportError",
    "CircuitOpenError",
    # Base transports
    "HttpxTransport",
    "UrllibTransport",
    # Decorators
    "RetryTransport",
    "DEFAULT_RETRY_STATUS_CODES",
    "CachingTransport",
    "cache_key",
    "LoggingTransport",
    "sanitize_headers",
]
