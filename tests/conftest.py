"""Shared fixtures for the outyet tests."""

import copy

import pytest

from outyet.app.config import Settings
from tests.fakes import RecordingSleep


WEATHER_PAYLOAD = {
    "location": {
        "name": "Mountain View",
        "region": "California",
        "country": "USA",
        "lat": 37.39,
        "lon": -122.08,
        "tz_id": "America/Los_Angeles",
        "localtime_epoch": 1506633300,
        "localtime": "2017-09-28 14:15",
    },
    "current": {
        "last_updated_epoch": 1506632400,
        "last_updated": "2017-09-28 14:00",
        "temp_c": 16.1,
        "temp_f": 61.0,
        "is_day": 1,
        "condition": {
            "text": "Partly cloudy",
            "icon": "//cdn.apixu.com/weather/64x64/day/116.png",
            "code": 1003,
        },
        "wind_mph": 8.1,
        "wind_dir": "WNW",
        "humidity": 72,
        "feelslike_f": 61,
    },
}


@pytest.fixture
def weather_payload() -> dict:
    return copy.deepcopy(WEATHER_PAYLOAD)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        POLL_PERIOD_S=3600.0,
        VERSION="1.4",
        BASE_CHANGE_URL="https://go.test/go/+/",
        WEATHER_API_URL="https://weather.test/v1/current.json",
        WEATHER_API_KEY="test-key",
        UA="outyet-tests/1.0",
    )
