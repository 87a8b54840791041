"""Open-Meteo weather provider implementation.

Open-Meteo needs no API key but only accepts coordinates, so every request is
a two-step pipeline: geocode the location text, then fetch weather for the
resolved latitude/longitude. A geocoding failure stops the pipeline before the
weather request is made.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..config import Settings
from ..exceptions import LocationNotFoundError, WeatherDataError, WeatherDecodeError
from .base import WeatherProvider
from .models import CurrentWeather, DailyForecast, Forecast

FORECAST_DAYS = 5

CURRENT_FIELDS = "temperature_2m,relativehumidity_2m,weathercode,windspeed_10m"
CURRENT_DAILY_FIELDS = "temperature_2m_max,temperature_2m_min"
FORECAST_DAILY_FIELDS = (
    "weathercode,temperature_2m_max,temperature_2m_min,"
    "windspeed_10m_max,relative_humidity_2m_max"
)

_ZIP_RE = re.compile(r"[0-9]{5}")
_CITY_STATE_RE = re.compile(r"[a-zA-Z ]+, ?[A-Z]{2}")

# WMO weather interpretation codes (https://open-meteo.com/en/docs).
WEATHER_CODES: Mapping[int, str] = MappingProxyType({
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "foggy",
    48: "depositing rime fog",
    51: "light drizzle",
    53: "moderate drizzle",
    55: "dense drizzle",
    61: "slight rain",
    63: "moderate rain",
    65: "heavy rain",
    71: "slight snow",
    73: "moderate snow",
    75: "heavy snow",
    77: "snow grains",
    80: "slight rain showers",
    81: "moderate rain showers",
    82: "violent rain showers",
    85: "slight snow showers",
    86: "heavy snow showers",
    95: "thunderstorm",
    96: "thunderstorm with slight hail",
    99: "thunderstorm with heavy hail",
})

STATE_ABBREVIATIONS: Mapping[str, str] = MappingProxyType({
    "Alabama": "AL",
    "Alaska": "AK",
    "Arizona": "AZ",
    "Arkansas": "AR",
    "California": "CA",
    "Colorado": "CO",
    "Connecticut": "CT",
    "Delaware": "DE",
    "Florida": "FL",
    "Georgia": "GA",
    "Hawaii": "HI",
    "Idaho": "ID",
    "Illinois": "IL",
    "Indiana": "IN",
    "Iowa": "IA",
    "Kansas": "KS",
    "Kentucky": "KY",
    "Louisiana": "LA",
    "Maine": "ME",
    "Maryland": "MD",
    "Massachusetts": "MA",
    "Michigan": "MI",
    "Minnesota": "MN",
    "Mississippi": "MS",
    "Missouri": "MO",
    "Montana": "MT",
    "Nebraska": "NE",
    "Nevada": "NV",
    "New Hampshire": "NH",
    "New Jersey": "NJ",
    "New Mexico": "NM",
    "New York": "NY",
    "North Carolina": "NC",
    "North Dakota": "ND",
    "Ohio": "OH",
    "Oklahoma": "OK",
    "Oregon": "OR",
    "Pennsylvania": "PA",
    "Rhode Island": "RI",
    "South Carolina": "SC",
    "South Dakota": "SD",
    "Tennessee": "TN",
    "Texas": "TX",
    "Utah": "UT",
    "Vermont": "VT",
    "Virginia": "VA",
    "Washington": "WA",
    "West Virginia": "WV",
    "Wisconsin": "WI",
    "Wyoming": "WY",
})


def describe_weather_code(code: int) -> str:
    return WEATHER_CODES.get(code, "unknown")


def matches_state(state_name: str, abbreviation: str) -> bool:
    """True when a full US state name maps to the given two-letter code."""
    return STATE_ABBREVIATIONS.get(state_name) == abbreviation


@dataclass(frozen=True)
class LocationQuery:
    name: str
    state: str | None
    count: int


def classify_location(location: str) -> LocationQuery:
    """Decide what to send to the geocoder for a zip, "City, ST" or free-text name."""
    if _ZIP_RE.fullmatch(location):
        return LocationQuery(name=location, state=None, count=1)
    if _CITY_STATE_RE.fullmatch(location):
        city, _, state = location.partition(",")
        # Several cities share a name; fetch enough candidates to filter by state.
        return LocationQuery(name=city.strip(), state=state.strip(), count=10)
    return LocationQuery(name=location, state=None, count=1)


class GeocodingResult(BaseModel):
    name: str = ""
    admin1: str = ""
    country: str = ""
    latitude: float
    longitude: float


class _GeocodingResponse(BaseModel):
    results: list[GeocodingResult] = Field(default_factory=list)


class _Current(BaseModel):
    temperature_2m: float = 0.0
    relativehumidity_2m: int = 0
    weathercode: int = 0
    windspeed_10m: float = 0.0


class _Daily(BaseModel):
    time: list[str] = Field(default_factory=list)
    temperature_2m_max: list[float] = Field(default_factory=list)
    temperature_2m_min: list[float] = Field(default_factory=list)
    windspeed_10m_max: list[float] = Field(default_factory=list)
    weathercode: list[int] = Field(default_factory=list)
    relative_humidity_2m_max: list[int] = Field(default_factory=list)


class WeatherResponse(BaseModel):
    """Subset of the `/v1/forecast` response used for normalization."""

    current: _Current = Field(default_factory=_Current)
    daily: _Daily = Field(default_factory=_Daily)


class OpenMeteoProvider(WeatherProvider):
    """Geocodes location text and fetches weather by coordinates from Open-Meteo."""

    provider_name = "openmeteo"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(settings=settings, logger=logger, client=client)

    def get_current_weather(self, location: str) -> CurrentWeather:
        place = self.resolve_location(location)
        data = self._fetch_weather(place, daily=CURRENT_DAILY_FIELDS, forecast_days=1)
        return self._build_current(place, data)

    def get_forecast(self, location: str) -> Forecast:
        place = self.resolve_location(location)
        # One extra day: offset 0 is today, which the current block already covers.
        data = self._fetch_weather(
            place, daily=FORECAST_DAILY_FIELDS, forecast_days=FORECAST_DAYS + 1
        )

        daily = data.daily
        if len(daily.time) < FORECAST_DAYS + 1:
            raise WeatherDataError("insufficient forecast data available")

        items = [self._build_day(daily, offset) for offset in range(1, FORECAST_DAYS + 1)]
        try:
            return Forecast(
                location=place.name,
                current=self._build_current(place, data),
                daily=items,
            )
        except ValidationError as exc:
            raise WeatherDecodeError(f"openmeteo forecast failed validation: {exc}") from exc

    def resolve_location(self, location: str) -> GeocodingResult:
        """Geocode location text to the first candidate in the requested state."""
        query = classify_location(location)
        raw = self._request_json(
            self.settings.openmeteo_geocoding_url,
            params={
                "name": query.name,
                "count": query.count,
                "language": "en",
                "format": "json",
            },
            context="geocoding",
        )
        try:
            response = _GeocodingResponse.model_validate(raw)
        except ValidationError as exc:
            raise WeatherDecodeError(
                f"openmeteo geocoding payload did not match the expected schema: {exc}"
            ) from exc

        if not response.results:
            raise LocationNotFoundError(f"location not found: {query.name}")

        # The geocoder does not filter by state, so candidates are matched here.
        if query.state:
            for result in response.results:
                if matches_state(result.admin1, query.state):
                    return result
            raise LocationNotFoundError(f"location not found: {query.name}")

        return response.results[0]

    def _fetch_weather(
        self, place: GeocodingResult, *, daily: str, forecast_days: int
    ) -> WeatherResponse:
        self.logger.debug(
            "openmeteo resolved %s, %s to (%.4f, %.4f)",
            place.name,
            place.admin1,
            place.latitude,
            place.longitude,
        )
        raw = self._request_json(
            self.settings.openmeteo_forecast_url,
            params={
                "latitude": place.latitude,
                "longitude": place.longitude,
                "current": CURRENT_FIELDS,
                "daily": daily,
                "temperature_unit": "fahrenheit",
                "timezone": "auto",
                "forecast_days": forecast_days,
            },
            context="forecast",
        )
        try:
            return WeatherResponse.model_validate(raw)
        except ValidationError as exc:
            raise WeatherDecodeError(
                f"openmeteo forecast payload did not match the expected schema: {exc}"
            ) from exc

    @staticmethod
    def _build_current(place: GeocodingResult, data: WeatherResponse) -> CurrentWeather:
        high = low = 0.0
        if data.daily.temperature_2m_max and data.daily.temperature_2m_min:
            high = data.daily.temperature_2m_max[0]
            low = data.daily.temperature_2m_min[0]

        current = data.current
        try:
            return CurrentWeather(
                location=place.name,
                conditions=describe_weather_code(current.weathercode),
                temperature=current.temperature_2m,
                # The current block has no apparent temperature.
                feels_like=current.temperature_2m,
                temp_max=high,
                temp_min=low,
                humidity=current.relativehumidity_2m,
                wind_speed=current.windspeed_10m,
            )
        except ValidationError as exc:
            raise WeatherDecodeError(f"openmeteo current weather out of range: {exc}") from exc

    @staticmethod
    def _build_day(daily: _Daily, offset: int) -> DailyForecast:
        try:
            return DailyForecast(
                date=datetime.date.fromisoformat(daily.time[offset]),
                conditions=describe_weather_code(daily.weathercode[offset]),
                high=daily.temperature_2m_max[offset],
                low=daily.temperature_2m_min[offset],
                wind_speed=daily.windspeed_10m_max[offset],
                humidity=daily.relative_humidity_2m_max[offset],
            )
        except (IndexError, ValueError) as exc:
            raise WeatherDecodeError(
                f"openmeteo daily data incomplete at offset {offset}: {exc}"
            ) from exc
