"""
Metadata Provider
=================
Single point of access to the calendar metadata served by `/calendars`.

Metadata is fetched once and kept for the life of the provider. The HTTP
cache TTL only bounds the upstream response cache: once the index is held
here it is not refreshed until `clear_cache()` is called, which long-running
workers must do themselves.

Application code normally goes through the module-level holder, whose
configuration is fixed by the first `get_instance()` call:

    from litcal_components.metadata import get_instance, is_valid_diocese_for_nation

    get_instance(api_url="https://litcal.johnromanodorazio.com/api/dev", logger=log)
    is_valid_diocese_for_nation("boston_us", "US")
"""

import threading
import warnings
from enum import Enum
from typing import Optional

import pydantic

from litcal_components.cache import CacheStore
from litcal_components.config import ClientConfig
from litcal_components.http import CachingTransport, HttpClient, HttpxTransport, LoggingTransport
from litcal_components.logging import NULL_LOGGER

from .exceptions import ConfigurationError, MetadataValidationError
from .models import CalendarIndex

REQUIRED_FIELDS = ("diocesan_calendars", "national_calendars", "locales")


class ProviderState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    FETCHED = "fetched"


class MetadataProvider:
    """
    Fetches, validates and holds the calendar index for one API base URL.

    Args:
        api_url: API base URL (defaults to LITCAL_API_URL or the public service)
        http_client: Transport to use; a plain httpx transport when omitted
        cache: Optional store for the upstream HTTP response cache
        logger: Optional structlog-style logger; also wraps the transport in logging
        cache_ttl: TTL in seconds for the upstream HTTP response cache
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        cache: Optional[CacheStore] = None,
        logger=None,
        cache_ttl: Optional[int] = None,
    ):
        config = ClientConfig()
        self._api_url = api_url or config.api_url
        self._cache_ttl = cache_ttl if cache_ttl is not None else config.metadata_cache_ttl

        if http_client is not None and (cache is not None or logger is not None):
            warnings.warn(
                "MetadataProvider received both http_client and cache/logger. If http_client "
                "is already decorated (e.g. from create_production_client()), this wraps it "
                "twice. Pass either http_client or cache/logger, not both.",
                UserWarning,
                stacklevel=3,
            )

        transport = http_client if http_client is not None else HttpxTransport()
        if cache is not None:
            transport = CachingTransport(transport, cache, self._cache_ttl, logger)
        if logger is not None:
            transport = LoggingTransport(transport, logger)

        self._http_client = transport
        self._logger = logger if logger is not None else NULL_LOGGER
        self._metadata: Optional[CalendarIndex] = None
        self._lock = threading.Lock()

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def metadata_url(self) -> str:
        return self._api_url.rstrip("/") + "/calendars"

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    @property
    def state(self) -> ProviderState:
        return ProviderState.FETCHED if self._metadata is not None else ProviderState.INITIALIZED

    def is_cached(self) -> bool:
        return self._metadata is not None

    def clear_cache(self) -> None:
        """Drop the held index; the next `get_metadata()` fetches again."""
        with self._lock:
            self._metadata = None

    def get_metadata(self) -> CalendarIndex:
        """
        Return the calendar index, fetching it on first use.

        Raises:
            MetadataValidationError: Bad status, undecodable or malformed payload
            TransportError: The request itself failed
        """
        with self._lock:
            if self._metadata is not None:
                self._logger.debug("metadata_cache_hit", url=self._api_url)
                return self._metadata

            self._metadata = self._fetch()
            return self._metadata

    def is_valid_diocese_for_nation(self, diocese_id: str, nation: str) -> bool:
        return diocese_id in self.get_metadata().dioceses_for_nation(nation)

    def _fetch(self) -> CalendarIndex:
        url = self.metadata_url
        self._logger.info("metadata_fetch", url=url)

        response = self._http_client.get(url)
        if response.status_code != 200:
            raise MetadataValidationError(
                f"Failed to fetch metadata from {url}. HTTP status: {response.status_code}",
                url=url,
                field="status_code",
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MetadataValidationError(
                f"Failed to decode metadata from {url}: {e}",
                url=url,
                field="body",
            ) from e

        if not isinstance(payload, dict):
            raise MetadataValidationError(
                f"Invalid metadata from {url}: expected a JSON object",
                url=url,
                field="body",
            )
        if "litcal_metadata" not in payload:
            raise MetadataValidationError(
                f"Missing 'litcal_metadata' in metadata from {url}",
                url=url,
                field="litcal_metadata",
            )

        litcal_metadata = payload["litcal_metadata"]
        if not isinstance(litcal_metadata, dict):
            raise MetadataValidationError(
                f"'litcal_metadata' must be an object in metadata from {url}",
                url=url,
                field="litcal_metadata",
            )

        for field in REQUIRED_FIELDS:
            if field not in litcal_metadata:
                raise MetadataValidationError(
                    f"Missing '{field}' in metadata from {url}",
                    url=url,
                    field=field,
                )

        try:
            index = CalendarIndex.model_validate(litcal_metadata)
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            raise MetadataValidationError(
                f"Invalid '{location}' in metadata from {url}: {error['msg']}",
                url=url,
                field=location,
            ) from e

        self._logger.info(
            "metadata_cached",
            url=self._api_url,
            national_calendars=len(index.national_calendars),
            diocesan_calendars=len(index.diocesan_calendars),
            locales=len(index.locales),
        )
        return index


# Process-wide holder, configured once by the first get_instance() call
_instance: Optional[MetadataProvider] = None
_instance_lock = threading.Lock()


def get_instance(
    api_url: Optional[str] = None,
    http_client: Optional[HttpClient] = None,
    cache: Optional[CacheStore] = None,
    logger=None,
    cache_ttl: Optional[int] = None,
) -> MetadataProvider:
    """
    Get or create the shared provider.

    Arguments are only used on the first call; later calls return the
    already-configured provider unchanged.
    """
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = MetadataProvider(
                api_url=api_url,
                http_client=http_client,
                cache=cache,
                logger=logger,
                cache_ttl=cache_ttl,
            )
        return _instance


def clear_cache() -> None:
    """Forget fetched metadata while keeping the provider's configuration."""
    if _instance is not None:
        _instance.clear_cache()


def reset_for_testing() -> None:
    """Discard the shared provider and its configuration. Tests only."""
    global _instance
    with _instance_lock:
        _instance = None


def is_cached() -> bool:
    return _instance is not None and _instance.is_cached()


def get_api_url() -> Optional[str]:
    return _instance.api_url if _instance is not None else None


def get_metadata_url() -> Optional[str]:
    return _instance.metadata_url if _instance is not None else None


def get_state() -> ProviderState:
    if _instance is None:
        return ProviderState.UNINITIALIZED
    return _instance.state


def is_valid_diocese_for_nation(diocese_id: str, nation: str) -> bool:
    """
    Check whether `diocese_id` belongs to the national calendar `nation`.

    Raises:
        ConfigurationError: If get_instance() has not been called yet
    """
    if _instance is None:
        raise ConfigurationError(
            "MetadataProvider must be initialized before calling validation methods. "
            "Call get_instance() first."
        )
    return _instance.is_valid_diocese_for_nation(diocese_id, nation)
