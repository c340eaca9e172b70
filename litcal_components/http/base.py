"""
HTTP Client Interface
=====================
Abstract transport contract implemented by base clients and decorators.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .exceptions import TransportError
from .response import Response

Body = Union[str, bytes, Mapping[str, Any]]
Headers = Optional[Mapping[str, str]]


class HttpClient(ABC):
    """
    Abstract base class for HTTP transports.

    Base transports perform exactly one exchange per call. Decorators hold
    one inner `HttpClient` and add a single cross-cutting behaviour.
    """

    @abstractmethod
    def get(self, url: str, headers: Headers = None) -> Response:
        """Perform a GET request. Raises TransportError on failure."""

    @abstractmethod
    def post(self, url: str, body: Body, headers: Headers = None) -> Response:
        """Perform a POST request. A mapping body is sent as JSON."""

    def close(self) -> None:
        """Release underlying resources, if any."""

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
        return False


def has_header(headers: Mapping[str, str], name: str) -> bool:
    """Case-insensitive header presence check."""
    name = name.lower()
    return any(key.lower() == name for key in headers)


def encode_body(
    body: Body,
    headers: Headers = None,
) -> Tuple[bytes, Dict[str, str]]:
    """
    Serialize a request body and return it with the outgoing headers.

    Mappings are JSON-encoded and get `Content-Type: application/json`
    unless the caller already set a content type.
    """
    out_headers = dict(headers or {})

    if isinstance(body, Mapping):
        try:
            content = json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise TransportError(f"Failed to encode request body as JSON: {e}") from e
        if not has_header(out_headers, "Content-Type"):
            out_headers["Content-Type"] = "application/json"
        return content, out_headers

    if isinstance(body, str):
        return body.encode("utf-8"), out_headers

    return bytes(body), out_headers
