"""
Calendar Metadata
=================
Process-wide access to the `/calendars` index of the Liturgical Calendar API.

Usage:
    from litcal_components.metadata import get_instance, is_valid_diocese_for_nation

    provider = get_instance(api_url="https://litcal.johnromanodorazio.com/api/dev")
    index = provider.get_metadata()
"""

from .exceptions import ConfigurationError, MetadataValidationError
from .models import (
    CalendarIndex,
    DiocesanCalendar,
    DiocesanGroup,
    NationalCalendar,
    NationalCalendarSettings,
    WiderRegion,
)
from .provider import (
    MetadataProvider,
    ProviderState,
    clear_cache,
    get_api_url,
    get_instance,
    get_metadata_url,
    get_state,
    is_cached,
    is_valid_diocese_for_nation,
    reset_for_testing,
)

__all__ = [
    # Exceptions
    "ConfigurationError",
    "MetadataValidationError",
    # Models
    "CalendarIndex",
    "DiocesanCalendar",
    "DiocesanGroup",
    "NationalCalendar",
    "NationalCalendarSettings",
    "WiderRegion",
    # Provider
    "MetadataProvider",
    "ProviderState",
    "get_instance",
    "clear_cache",
    "reset_for_testing",
    "is_cached",
    "get_api_url",
    "get_metadata_url",
    "get_state",
    "is_valid_diocese_for_nation",
]
