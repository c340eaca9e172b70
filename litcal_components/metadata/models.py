"""
Calendar Index Models
=====================
Typed view of the `litcal_metadata` object served by `/calendars`.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class _IndexModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class NationalCalendarSettings(_IndexModel):
    """Mobile-feast and holy-day settings of a national calendar."""
    epiphany: str = ""
    ascension: str = ""
    corpus_christi: str = ""
    eternal_high_priest: bool = False
    holydays_of_obligation: Dict[str, bool] = {}


class NationalCalendar(_IndexModel):
    calendar_id: str
    locales: List[str] = []
    missals: List[str] = []
    settings: NationalCalendarSettings
    wider_region: Optional[str] = None
    dioceses: Optional[List[str]] = None


class DiocesanCalendar(_IndexModel):
    calendar_id: str
    diocese: str = ""
    nation: str = ""
    locales: List[str] = []
    timezone: str = ""
    group: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None


class DiocesanGroup(_IndexModel):
    group_name: str
    dioceses: List[str]


class WiderRegion(_IndexModel):
    name: str
    locales: List[str]
    api_path: str


class CalendarIndex(_IndexModel):
    """
    Catalogue of every calendar the API can produce.

    Example:
        index = CalendarIndex.model_validate(payload["litcal_metadata"])
        index.national_calendar("US").dioceses
    """
    national_calendars: List[NationalCalendar]
    national_calendars_keys: List[str] = []
    diocesan_calendars: List[DiocesanCalendar]
    diocesan_calendars_keys: List[str] = []
    diocesan_groups: List[DiocesanGroup] = []
    wider_regions: List[WiderRegion] = []
    wider_regions_keys: List[str] = []
    locales: List[str]

    def national_calendar(self, calendar_id: str) -> Optional[NationalCalendar]:
        for calendar in self.national_calendars:
            if calendar.calendar_id == calendar_id:
                return calendar
        return None

    def diocesan_calendar(self, calendar_id: str) -> Optional[DiocesanCalendar]:
        for calendar in self.diocesan_calendars:
            if calendar.calendar_id == calendar_id:
                return calendar
        return None

    def dioceses_for_nation(self, nation: str) -> List[str]:
        """Diocese ids listed by a nation's calendar; empty if unknown."""
        calendar = self.national_calendar(nation)
        if calendar is None or calendar.dioceses is None:
            return []
        return list(calendar.dioceses)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
