"""
Logging Decorator
=================
Records a structured event before and after every call, with credentials
redacted. Placed outermost so it observes the end-to-end outcome.
"""

import json
import time
from typing import Callable, Dict, Mapping

from litcal_components.logging import NULL_LOGGER
from litcal_components.metrics import record_request

from .base import Body, Headers, HttpClient
from .exceptions import TransportError
from .response import Response

SENSITIVE_HEADERS = frozenset({"authorization", "api-key", "x-api-key", "cookie", "set-cookie"})
REDACTED = "***REDACTED***"


class LoggingTransport(HttpClient):
    """Transport decorator that logs requests, responses and failures."""

    def __init__(self, client: HttpClient, logger=None):
        self._client = client
        self._logger = logger if logger is not None else NULL_LOGGER

    def get(self, url: str, headers: Headers = None) -> Response:
        self._logger.info(
            "http_request",
            method="GET",
            url=url,
            headers=sanitize_headers(headers or {}),
        )
        return self._observe("GET", url, lambda: self._client.get(url, headers))

    def post(self, url: str, body: Body, headers: Headers = None) -> Response:
        self._logger.info(
            "http_request",
            method="POST",
            url=url,
            headers=sanitize_headers(headers or {}),
            body_size=body_size(body),
        )
        return self._observe("POST", url, lambda: self._client.post(url, body, headers))

    def close(self) -> None:
        self._client.close()

    def _observe(self, method: str, url: str, send: Callable[[], Response]) -> Response:
        start = time.perf_counter()
        try:
            response = send()
        except TransportError as e:
            duration = time.perf_counter() - start
            self._logger.error(
                "http_request_failed",
                method=method,
                url=url,
                error=str(e),
                exception=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            record_request(method, url, "error", duration)
            raise

        duration = time.perf_counter() - start
        self._logger.info(
            "http_response",
            method=method,
            url=url,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
            response_size=response.size,
        )
        record_request(method, url, str(response.status_code), duration)
        return response


def sanitize_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of `headers` with credential-bearing values replaced."""
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def body_size(body: Body) -> int:
    """Size in bytes of the body as it will be sent."""
    if isinstance(body, str):
        return len(body.encode("utf-8"))
    if isinstance(body, (bytes, bytearray)):
        return len(body)
    try:
        return len(json.dumps(body).encode("utf-8"))
    except (TypeError, ValueError):
        return 0
