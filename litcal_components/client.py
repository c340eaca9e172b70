"""
API Client
==========
Shared configuration for every request to the Liturgical Calendar API, and
the fluent calendar request built on it.

Usage:
    from litcal_components.client import get_instance

    api = get_instance(api_url="https://litcal.johnromanodorazio.com/api/dev", logger=log)

    calendar = api.calendar().nation("IT").year(2024).locale("it").get()
    index = api.metadata().get_metadata()
"""

import dataclasses
import re
import threading
import warnings
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from litcal_components.cache import CacheStore
from litcal_components.config import ClientConfig
from litcal_components.exceptions import CalendarRequestError, LitCalError
from litcal_components.factory import create_client, create_production_client
from litcal_components.http import HttpClient, Response
from litcal_components.logging import NULL_LOGGER
from litcal_components.metadata import MetadataProvider
from litcal_components.metadata import get_instance as get_metadata_provider

DEFAULT_CACHE_TTL = 86400

YEAR_MIN = 1970
YEAR_MAX = 9999

RETURN_TYPE_ACCEPT = {
    "json": "application/json",
    "xml": "application/xml",
    "yaml": "application/yaml",
    "ical": "text/calendar",
}

_HEADER_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


def _has_line_break(value: str) -> bool:
    return "\r" in value or "\n" in value


class ApiClient:
    """
    Transport, cache, logger and base URL shared by calendar and metadata requests.

    When no `http_client` is given, the production stack is built from
    `cache`, `logger` and `cache_ttl`. A supplied `http_client` is used as-is.

    Args:
        api_url: API base URL (defaults to LITCAL_API_URL or the public service)
        http_client: Ready-made transport stack
        cache: Cache store for the production stack
        logger: structlog-style logger shared by the stack and requests
        cache_ttl: Response cache TTL in seconds
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        cache: Optional[CacheStore] = None,
        logger=None,
        cache_ttl: int = DEFAULT_CACHE_TTL,
    ):
        config = ClientConfig()
        self._api_url = (api_url or config.api_url).rstrip("/")
        self._cache = cache
        self._logger = logger if logger is not None else NULL_LOGGER
        self._cache_ttl = cache_ttl

        if http_client is not None and (cache is not None or logger is not None):
            warnings.warn(
                "ApiClient received both http_client and cache/logger. Since a custom "
                "http_client is provided, the cache/logger configuration is ignored. "
                "Pass either http_client or cache/logger, not both.",
                UserWarning,
                stacklevel=3,
            )

        if http_client is not None:
            self._http_client = http_client
        else:
            self._http_client = create_production_client(
                cache=cache,
                logger=logger,
                config=dataclasses.replace(config, cache_ttl=cache_ttl),
            )

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    @property
    def cache(self) -> Optional[CacheStore]:
        return self._cache

    @property
    def logger(self):
        return self._logger

    @property
    def cache_ttl(self) -> int:
        return self._cache_ttl

    def calendar(self) -> "CalendarRequest":
        """A fresh calendar request using this client's configuration."""
        return CalendarRequest(http_client=self._http_client, logger=self._logger, api_url=self._api_url)

    def metadata(self) -> MetadataProvider:
        """
        The shared metadata provider.

        If it is not configured yet, it is configured from this client; an
        already configured provider is returned unchanged.
        """
        return get_metadata_provider(api_url=self._api_url, http_client=self._http_client)


# Process-wide client, configured once by the first get_instance() call
_instance: Optional[ApiClient] = None
_instance_lock = threading.Lock()


def get_instance(
    api_url: Optional[str] = None,
    http_client: Optional[HttpClient] = None,
    cache: Optional[CacheStore] = None,
    logger=None,
    cache_ttl: int = DEFAULT_CACHE_TTL,
) -> ApiClient:
    """
    Get or create the shared API client.

    Arguments are only used on the first call.
    """
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = ApiClient(
                api_url=api_url,
                http_client=http_client,
                cache=cache,
                logger=logger,
                cache_ttl=cache_ttl,
            )
        return _instance


def is_initialized() -> bool:
    return _instance is not None


def current() -> Optional[ApiClient]:
    """The shared client, or None before get_instance()."""
    return _instance


def reset_for_testing() -> None:
    """Discard the shared client. Tests only."""
    global _instance
    with _instance_lock:
        _instance = None


class CalendarRequest:
    """
    Fluent builder for `POST {base}/calendar[/nation|/diocese/{id}][/{year}]`.

    Dependencies resolve in order: explicit arguments, then the shared
    ApiClient, then defaults.

    The epiphany, ascension, corpus_christi, eternal_high_priest and
    holydays_of_obligation settings only affect the General Roman Calendar;
    the API ignores them for national and diocesan calendars.

    Example:
        calendar = CalendarRequest().diocese("boston_us").year(2025).locale("en").get()
    """

    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        logger=None,
        api_url: Optional[str] = None,
    ):
        shared = current()

        if api_url is None:
            api_url = shared.api_url if shared is not None else ClientConfig().api_url
        if http_client is None:
            http_client = shared.http_client if shared is not None else create_client()
        if logger is None and shared is not None:
            logger = shared.logger

        self._base_url = api_url.rstrip("/")
        self._http_client = http_client
        self._logger = logger if logger is not None else NULL_LOGGER

        self._calendar_type: Optional[str] = None
        self._calendar_id: Optional[str] = None
        self._year: Optional[int] = None
        self._year_type: Optional[str] = None
        self._locale: Optional[str] = None
        self._return_type: Optional[str] = None
        self._epiphany: Optional[str] = None
        self._ascension: Optional[str] = None
        self._corpus_christi: Optional[str] = None
        self._eternal_high_priest: Optional[bool] = None
        self._holydays_of_obligation: List[str] = []
        self._custom_headers: Dict[str, str] = {}

    def base_url(self, url: str) -> "CalendarRequest":
        self._base_url = url.rstrip("/")
        return self

    def nation(self, nation_code: str) -> "CalendarRequest":
        self._calendar_type = "nation"
        self._calendar_id = nation_code
        return self

    def diocese(self, diocese_id: str) -> "CalendarRequest":
        self._calendar_type = "diocese"
        self._calendar_id = diocese_id
        return self

    def year(self, year: int) -> "CalendarRequest":
        if year < YEAR_MIN or year > YEAR_MAX:
            raise ValueError(f"Year must be between {YEAR_MIN} and {YEAR_MAX}, got {year}")
        self._year = year
        return self

    def year_type(self, year_type: str) -> "CalendarRequest":
        """LITURGICAL or CIVIL."""
        self._year_type = year_type
        return self

    def locale(self, locale: str) -> "CalendarRequest":
        """Locale sent as Accept-Language."""
        if _has_line_break(locale):
            raise ValueError("Invalid locale value: locale cannot contain CR or LF characters")
        self._locale = locale
        return self

    def return_type(self, return_type: str) -> "CalendarRequest":
        """json, xml, yaml or ical; always decides the Accept header."""
        self._return_type = return_type
        return self

    def epiphany(self, setting: str) -> "CalendarRequest":
        self._epiphany = setting
        return self

    def ascension(self, setting: str) -> "CalendarRequest":
        self._ascension = setting
        return self

    def corpus_christi(self, setting: str) -> "CalendarRequest":
        self._corpus_christi = setting
        return self

    def eternal_high_priest(self, enabled: bool) -> "CalendarRequest":
        self._eternal_high_priest = enabled
        return self

    def holydays_of_obligation(self, holydays: Iterable[str]) -> "CalendarRequest":
        self._holydays_of_obligation = list(holydays)
        return self

    def header(self, name: str, value: str) -> "CalendarRequest":
        """
        Add a custom header.

        Raises:
            ValueError: Name outside [A-Za-z0-9_-], or value containing CR/LF
        """
        if not _HEADER_NAME.match(name):
            raise ValueError(
                f"Invalid header name: '{name}'. "
                "Header names must contain only letters, digits, hyphens, and underscores."
            )
        if _has_line_break(value):
            raise ValueError(f"Invalid header value for '{name}': header values cannot contain CR or LF characters")
        self._custom_headers[name] = value
        return self

    def accept_language(self, language: str) -> "CalendarRequest":
        return self.header("Accept-Language", language)

    @property
    def request_url(self) -> str:
        """The endpoint the current settings resolve to."""
        segments = ["calendar"]
        if self._calendar_type and self._calendar_id:
            segments.append(quote(self._calendar_type, safe=""))
            segments.append(quote(self._calendar_id, safe=""))
        if self._year is not None:
            segments.append(str(self._year))
        return self._base_url + "/" + "/".join(segments)

    def get(self) -> Dict[str, Any]:
        """
        Send the request and return the decoded calendar.

        Raises:
            CalendarRequestError: Non-200 status or malformed calendar payload
            TransportError: The request itself failed
        """
        url = self.request_url
        self._logger.info(
            "calendar_fetch",
            url=url,
            calendar_type=self._calendar_type,
            calendar_id=self._calendar_id,
            year=self._year,
        )

        try:
            response = self._http_client.post(url, self._build_post_data(), self._build_headers())
            return self._parse(response, url)
        except LitCalError as e:
            self._logger.error("calendar_request_failed", url=url, error=str(e))
            raise

    def _build_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._locale:
            headers["Accept-Language"] = self._locale
        headers.update(self._custom_headers)

        if self._return_type:
            headers = {name: value for name, value in headers.items() if name.lower() != "accept"}
            headers["Accept"] = RETURN_TYPE_ACCEPT.get(self._return_type, "application/json")
        return headers

    def _build_post_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self._year_type:
            data["year_type"] = self._year_type
        if self._epiphany:
            data["epiphany"] = self._epiphany
        if self._ascension:
            data["ascension"] = self._ascension
        if self._corpus_christi:
            data["corpus_christi"] = self._corpus_christi
        if self._eternal_high_priest is not None:
            data["eternal_high_priest"] = self._eternal_high_priest
        if self._holydays_of_obligation:
            data["holydays_of_obligation"] = list(self._holydays_of_obligation)
        return data

    @staticmethod
    def _parse(response: Response, url: str) -> Dict[str, Any]:
        if response.status_code != 200:
            raise CalendarRequestError(
                f"Calendar API returned status {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            calendar = response.json()
        except ValueError as e:
            raise CalendarRequestError(f"Invalid JSON response from {url}: {e}", url=url) from e

        if not isinstance(calendar, dict):
            raise CalendarRequestError(
                f"Invalid JSON response: expected an object, got {type(calendar).__name__}",
                url=url,
            )
        if "litcal" not in calendar:
            raise CalendarRequestError("Invalid calendar response: missing litcal property", url=url)
        if "settings" not in calendar:
            raise CalendarRequestError("Invalid calendar response: missing settings property", url=url)
        if not isinstance(calendar["litcal"], list):
            raise CalendarRequestError("Invalid calendar response: litcal must be a list", url=url)
        return calendar
