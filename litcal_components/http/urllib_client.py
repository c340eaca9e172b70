"""
Urllib Transport
================
Fallback base transport built on `urllib.request`, for environments where
a pooled httpx client is unwanted. Also reads `data:` and `file:` URLs.
"""

import http.client
import re
import urllib.error
import urllib.request
from typing import Dict, Optional

from .base import Body, Headers, HttpClient, encode_body
from .exceptions import TransportError
from .response import Response

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


class UrllibTransport(HttpClient):
    """
    Minimal synchronous transport using the standard library opener.

    HTTP error statuses are returned as responses. Exchanges over schemes
    that carry no status line (`data:`, `file:`) are reported as 200, while
    an HTTP(S) exchange without a usable status line is a TransportError.
    """

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def get(self, url: str, headers: Headers = None) -> Response:
        return self._fetch("GET", url, dict(headers or {}))

    def post(self, url: str, body: Body, headers: Headers = None) -> Response:
        content, out_headers = encode_body(body, headers)
        return self._fetch("POST", url, out_headers, content)

    def _fetch(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[bytes] = None,
    ) -> Response:
        try:
            request = urllib.request.Request(url, data=content, headers=headers, method=method)
            with urllib.request.urlopen(request, timeout=self.timeout) as raw:
                body = raw.read()
                status = getattr(raw, "status", None)
                response_headers = dict(raw.headers.items()) if raw.headers else {}
        except urllib.error.HTTPError as e:
            # Error statuses still carry a complete response
            body = e.read()
            status = e.code
            response_headers = dict(e.headers.items()) if e.headers else {}
        except http.client.HTTPException as e:
            raise TransportError(
                f"Invalid HTTP response received from {url}: {e!r}",
                url=url,
                method=method,
            ) from e
        except (OSError, ValueError) as e:
            action = "fetch" if method == "GET" else "post to"
            raise TransportError(
                f"Failed to {action} URL: {url} ({e})",
                url=url,
                method=method,
            ) from e

        return Response(self._status_code(status, url, method), response_headers, body)

    @staticmethod
    def _status_code(status: Optional[int], url: str, method: str) -> int:
        if status is not None:
            return int(status)
        if _HTTP_URL.match(url):
            raise TransportError(
                "No HTTP status line received - unable to determine status code",
                url=url,
                method=method,
            )
        return 200
