"""Current-weather lookup against a weatherapi.com style ``current.json`` endpoint.

The response is decoded into typed dataclasses. Anything that does not match
the expected shape raises DecodeError, which callers treat like any other
failed lookup.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)


class WeatherLookupError(Exception):
    """The lookup did not produce a usable report."""


class UpstreamRejectedError(WeatherLookupError):
    """The upstream refused the query itself (unknown place, bad query)."""


class DecodeError(WeatherLookupError):
    """The upstream answered, but not with the JSON shape we need."""


@dataclass(frozen=True)
class Location:
    name: str
    region: str
    country: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    tz_id: Optional[str] = None
    localtime: Optional[str] = None


@dataclass(frozen=True)
class Condition:
    text: str
    icon: str
    code: Optional[int] = None


@dataclass(frozen=True)
class Current:
    temp_f: float
    condition: Condition
    temp_c: Optional[float] = None
    humidity: Optional[int] = None
    wind_mph: Optional[float] = None
    wind_dir: Optional[str] = None
    feelslike_f: Optional[float] = None
    last_updated: Optional[str] = None


@dataclass(frozen=True)
class WeatherReport:
    location: Location
    current: Current

    @property
    def city(self) -> str:
        return self.location.name

    @property
    def region(self) -> str:
        return self.location.region

    @property
    def temp(self) -> float:
        return self.current.temp_f

    @property
    def weather_text(self) -> str:
        return self.current.condition.text

    @property
    def weather_icon(self) -> str:
        return self.current.condition.icon


def _obj(parent: Mapping[str, Any], key: str, path: str) -> Mapping[str, Any]:
    value = parent.get(key)
    if not isinstance(value, dict):
        raise DecodeError(f"{path}{key}: expected object, got {type(value).__name__}")
    return value


def _str(parent: Mapping[str, Any], key: str, path: str, required: bool = True) -> Optional[str]:
    value = parent.get(key)
    if value is None and not required:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{path}{key}: expected string, got {type(value).__name__}")
    return value


def _num(parent: Mapping[str, Any], key: str, path: str, required: bool = True) -> Optional[float]:
    value = parent.get(key)
    if value is None and not required:
        return None
    # bool is an int subclass; a true/false temperature is still malformed
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{path}{key}: expected number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise DecodeError(f"{path}{key}: expected a finite number, got {value!r}")
    return value


def _int(parent: Mapping[str, Any], key: str, path: str) -> Optional[int]:
    value = _num(parent, key, path, required=False)
    return None if value is None else int(value)


def _upstream_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return str(payload["error"].get("message") or "unknown error")
    return None


def decode_weather(payload: Any) -> WeatherReport:
    """Validate and convert a decoded JSON body into a WeatherReport."""
    if not isinstance(payload, dict):
        raise DecodeError(f"expected object at top level, got {type(payload).__name__}")
    message = _upstream_message(payload)
    if message is not None:
        # weatherapi reports bad keys and unknown places in-band
        raise DecodeError(f"upstream error: {message}")

    loc = _obj(payload, "location", "")
    cur = _obj(payload, "current", "")
    cond = _obj(cur, "condition", "current.")

    location = Location(
        name=_str(loc, "name", "location."),
        region=_str(loc, "region", "location."),
        country=_str(loc, "country", "location.", required=False),
        lat=_num(loc, "lat", "location.", required=False),
        lon=_num(loc, "lon", "location.", required=False),
        tz_id=_str(loc, "tz_id", "location.", required=False),
        localtime=_str(loc, "localtime", "location.", required=False),
    )
    condition = Condition(
        text=_str(cond, "text", "current.condition."),
        icon=_str(cond, "icon", "current.condition."),
        code=_int(cond, "code", "current.condition."),
    )
    current = Current(
        temp_f=_num(cur, "temp_f", "current."),
        condition=condition,
        temp_c=_num(cur, "temp_c", "current.", required=False),
        humidity=_int(cur, "humidity", "current."),
        wind_mph=_num(cur, "wind_mph", "current.", required=False),
        wind_dir=_str(cur, "wind_dir", "current.", required=False),
        feelslike_f=_num(cur, "feelslike_f", "current.", required=False),
        last_updated=_str(cur, "last_updated", "current.", required=False),
    )
    return WeatherReport(location=location, current=current)


class WeatherClient:
    def __init__(self, base_url: str, api_key: str, client: httpx.AsyncClient,
                 user_agent: str = "outyet/1.0", timeout: float = 12.0):
        self.base_url = base_url
        self.api_key = api_key
        self.client = client
        self.user_agent = user_agent
        self.timeout = timeout

    async def lookup(self, query: str) -> WeatherReport:
        params: Dict[str, str] = {"key": self.api_key, "q": query}
        try:
            r = await self.client.get(
                self.base_url, params=params,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                timeout=self.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise WeatherLookupError(f"request failed: {str(e) or e.__class__.__name__}") from e

        try:
            payload = r.json()
        except ValueError as e:
            if r.is_success:
                raise DecodeError(f"response is not JSON: {e}") from e
            payload = None

        if not r.is_success:
            message = _upstream_message(payload)
            detail = f": {message}" if message else ""
            if r.status_code in (httpx.codes.BAD_REQUEST, httpx.codes.NOT_FOUND):
                raise UpstreamRejectedError(f"upstream answered HTTP {r.status_code}{detail}")
            raise WeatherLookupError(f"upstream answered HTTP {r.status_code}{detail}")

        report = decode_weather(payload)
        logger.info("weather for %r: %s, %s %s°F %s",
                    query, report.city, report.region, report.temp, report.weather_text)
        return report
