"""
HTTP Response
=============
Immutable response value shared by every transport and decorator.
"""

import base64
import json
from typing import Any, Dict, Mapping, Optional, Union

import httpx


class Response:
    """
    Status code, case-insensitive headers and a re-readable body.

    Example:
        response = Response(200, {"Content-Type": "application/json"}, '{"ok": true}')
        response.header("content-type")  # "application/json"
        response.json()                  # {"ok": True}
    """

    __slots__ = ("_status_code", "_headers", "_content")

    def __init__(
        self,
        status_code: int,
        headers: Optional[Mapping[str, str]] = None,
        body: Union[str, bytes] = b"",
    ):
        self._status_code = int(status_code)
        self._headers = httpx.Headers(headers or {})
        self._content = body.encode("utf-8") if isinstance(body, str) else bytes(body)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "Response":
        return cls(response.status_code, response.headers, response.content)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Response":
        """Rebuild a response serialized with `to_dict`."""
        body = base64.b64decode(data.get("body", ""))
        return cls(data["status"], data.get("headers") or {}, body)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> httpx.Headers:
        """A copy of the response headers."""
        return httpx.Headers(self._headers)

    @property
    def content(self) -> bytes:
        return self._content

    @property
    def text(self) -> str:
        return self._content.decode("utf-8", errors="replace")

    @property
    def size(self) -> int:
        return len(self._content)

    @property
    def is_success(self) -> bool:
        return 200 <= self._status_code < 300

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._headers.get(name, default)

    def json(self) -> Any:
        return json.loads(self._content)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self._status_code,
            "headers": dict(self._headers.items()),
            # JSON-safe for any bytes
            "body": base64.b64encode(self._content).decode("ascii"),
        }

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_content"):
            raise AttributeError("Response is immutable")
        object.__setattr__(self, name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Response):
            return NotImplemented
        return (
            self._status_code == other._status_code
            and self._headers == other._headers
            and self._content == other._content
        )

    def __hash__(self) -> int:
        return hash((self._status_code, self._content))

    def __repr__(self) -> str:
        return f"<Response [{self._status_code}] {self.size} bytes>"
