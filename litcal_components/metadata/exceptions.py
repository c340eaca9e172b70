"""
Metadata Exceptions
===================
Errors raised by the calendar metadata provider.
"""

from typing import Optional

from litcal_components.exceptions import LitCalError


class MetadataValidationError(LitCalError):
    """Raised when the /calendars payload cannot be fetched or understood."""

    def __init__(self, message: str, url: Optional[str] = None, field: Optional[str] = None):
        self.message = message
        self.url = url
        self.field = field
        super().__init__(message)


class ConfigurationError(LitCalError):
    """Raised when the provider is used before it has been initialized."""
    pass
