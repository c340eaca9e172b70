"""
Httpx Transport
===============
Primary base transport backed by a pluggable `httpx.Client`.
"""

from typing import Optional

import httpx
import structlog

from .base import Body, Headers, HttpClient, encode_body
from .exceptions import TransportError
from .response import Response

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0


class HttpxTransport(HttpClient):
    """
    Performs one GET or POST per call through httpx.

    Non-2xx responses are returned as-is; only failures to complete the
    exchange are raised, as `TransportError`.

    Example:
        with HttpxTransport() as transport:
            response = transport.get("https://example.org/api/calendars")
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ):
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            follow_redirects=True,
        )

    @property
    def client(self) -> httpx.Client:
        return self._client

    def get(self, url: str, headers: Headers = None) -> Response:
        return self._send("GET", url, headers=dict(headers or {}))

    def post(self, url: str, body: Body, headers: Headers = None) -> Response:
        content, out_headers = encode_body(body, headers)
        return self._send("POST", url, headers=out_headers, content=content)

    def _send(self, method: str, url: str, headers, content: Optional[bytes] = None) -> Response:
        try:
            response = self._client.request(method, url, headers=headers, content=content)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(
                f"HTTP {method} request failed: {e}",
                url=url,
                method=method,
            ) from e
        return Response.from_httpx(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
            logger.debug("httpx_client_closed")
