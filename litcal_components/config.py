"""
Client Configuration
====================
Defaults for the transport stack and the metadata provider, overridable
through `LITCAL_*` environment variables.
"""

import os
from dataclasses import dataclass, field

DEFAULT_API_URL = "https://litcal.johnromanodorazio.com/api/dev"


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


@dataclass
class ClientConfig:
    """Configuration for the Liturgical Calendar API client stack."""
    api_url: str = field(default_factory=lambda: _env("LITCAL_API_URL", DEFAULT_API_URL))
    timeout: float = field(default_factory=lambda: float(_env("LITCAL_HTTP_TIMEOUT", "30")))
    connect_timeout: float = field(default_factory=lambda: float(_env("LITCAL_CONNECT_TIMEOUT", "10")))

    # Caching
    cache_ttl: int = field(default_factory=lambda: int(_env("LITCAL_CACHE_TTL", "3600")))
    metadata_cache_ttl: int = field(default_factory=lambda: int(_env("LITCAL_METADATA_CACHE_TTL", "86400")))

    # Retry
    max_retries: int = field(default_factory=lambda: int(_env("LITCAL_MAX_RETRIES", "3")))
    retry_delay_ms: int = field(default_factory=lambda: int(_env("LITCAL_RETRY_DELAY_MS", "1000")))

    # Circuit breaker
    failure_threshold: int = field(default_factory=lambda: int(_env("LITCAL_FAILURE_THRESHOLD", "5")))
    recovery_timeout: float = field(default_factory=lambda: float(_env("LITCAL_RECOVERY_TIMEOUT", "60")))
    success_threshold: int = field(default_factory=lambda: int(_env("LITCAL_SUCCESS_THRESHOLD", "2")))
