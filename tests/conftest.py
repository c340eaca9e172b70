"""
Shared Test Fixtures
====================
Scripted transports, a controllable clock and a sleep recorder.
"""

import copy
import json

import pytest

from litcal_components.http import HttpClient, Response
from litcal_components import client as api_client
from litcal_components.metadata import reset_for_testing


class StubTransport(HttpClient):
    """
    Transport that replays a script of responses and exceptions.

    Each call consumes the next item; the last item repeats once the
    script runs out.
    """

    def __init__(self, *script):
        self.script = list(script) or [Response(200, {}, b"")]
        self.calls = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def get(self, url, headers=None):
        self.calls.append(("GET", url, headers, None))
        return self._next()

    def post(self, url, body, headers=None):
        self.calls.append(("POST", url, headers, body))
        return self._next()

    def close(self):
        self.closed = True

    def _next(self):
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, BaseException):
            raise item
        return item


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    """Sleep replacement that records requested delays in seconds."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(float(seconds))


SAMPLE_METADATA = {
    "litcal_metadata": {
        "national_calendars": [
            {
                "calendar_id": "US",
                "locales": ["en_US"],
                "missals": ["US_2011"],
                "settings": {
                    "epiphany": "SUNDAY_JAN2_JAN8",
                    "ascension": "SUNDAY",
                    "corpus_christi": "SUNDAY",
                    "eternal_high_priest": False,
                },
                "wider_region": "Americas",
                "dioceses": ["boston_us", "newyork_us"],
            },
            {
                "calendar_id": "IT",
                "locales": ["it_IT"],
                "missals": ["IT_1983", "IT_2020"],
                "settings": {
                    "epiphany": "JAN6",
                    "ascension": "SUNDAY",
                    "corpus_christi": "SUNDAY",
                    "eternal_high_priest": False,
                },
                "wider_region": "Europe",
                "dioceses": ["roma_it"],
            },
            {
                "calendar_id": "VA",
                "locales": ["it_IT", "la_VA"],
                "missals": [],
                "settings": {
                    "epiphany": "JAN6",
                    "ascension": "THURSDAY",
                    "corpus_christi": "THURSDAY",
                    "eternal_high_priest": False,
                },
            },
        ],
        "national_calendars_keys": ["US", "IT", "VA"],
        "diocesan_calendars": [
            {
                "calendar_id": "boston_us",
                "diocese": "Archdiocese of Boston",
                "nation": "US",
                "locales": ["en_US"],
                "timezone": "America/New_York",
            },
            {
                "calendar_id": "newyork_us",
                "diocese": "Archdiocese of New York",
                "nation": "US",
                "locales": ["en_US"],
                "timezone": "America/New_York",
            },
            {
                "calendar_id": "roma_it",
                "diocese": "Diocesi di Roma",
                "nation": "IT",
                "locales": ["it_IT"],
                "timezone": "Europe/Rome",
                "group": "Lazio",
            },
        ],
        "diocesan_calendars_keys": ["boston_us", "newyork_us", "roma_it"],
        "diocesan_groups": [{"group_name": "Lazio", "dioceses": ["roma_it"]}],
        "wider_regions": [
            {"name": "Americas", "locales": ["en_US"], "api_path": "/data/wider-region/Americas"},
            {"name": "Europe", "locales": ["it_IT"], "api_path": "/data/wider-region/Europe"},
        ],
        "wider_regions_keys": ["Americas", "Europe"],
        "locales": ["en_US", "it_IT", "la_VA"],
    }
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def calendars_payload():
    """A fresh copy of a representative /calendars payload."""
    return copy.deepcopy(SAMPLE_METADATA)


@pytest.fixture
def calendars_response(calendars_payload):
    return Response(200, {"Content-Type": "application/json"}, json.dumps(calendars_payload))


@pytest.fixture(autouse=True)
def reset_shared_instances():
    """Every test starts and ends without a shared metadata provider or API client."""
    reset_for_testing()
    api_client.reset_for_testing()
    yield
    reset_for_testing()
    api_client.reset_for_testing()
