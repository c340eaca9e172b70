"""
Base Exceptions
===============
Root of the litcal-components exception hierarchy.
"""

from typing import Optional


class LitCalError(Exception):
    """Base exception for all errors raised by this library."""
    pass


class CalendarRequestError(LitCalError):
    """Raised when a calendar response is missing, malformed or not a 200."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(message)
