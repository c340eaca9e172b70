"""
HTTP Exceptions
===============
Errors raised by transports and transport decorators.
"""

from typing import Optional

from litcal_components.exceptions import LitCalError


class TransportError(LitCalError):
    """Raised when an HTTP exchange could not be completed."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ):
        self.message = message
        self.url = url
        self.method = method
        super().__init__(message)


class CircuitOpenError(TransportError):
    """Raised by the circuit breaker when it rejects a call without trying it."""

    def __init__(
        self,
        url: Optional[str] = None,
        method: Optional[str] = None,
        state: str = "open",
        retry_after: float = 0.0,
    ):
        self.state = state
        self.retry_after = retry_after
        super().__init__(
            "Service temporarily unavailable (circuit breaker open). "
            f"Retry after {retry_after:.1f}s",
            url=url,
            method=method,
        )
