"""OpenWeather (api.openweathermap.org) weather provider implementation."""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..config import Settings
from ..exceptions import (
    ConfigError,
    WeatherDataError,
    WeatherDecodeError,
    WeatherTransportError,
)
from .base import WeatherProvider
from .models import CurrentWeather, DailyForecast, Forecast

# Status codes seen from OpenWeather: 200 success, 400 bad parameters,
# 401 invalid API key, 404 city not found, 429 rate limited, 5xx server error.

_ZIP_RE = re.compile(r"[0-9]{5}")

# Samples before this hour are left out so overnight lows do not skew a day.
DAY_START_HOUR = "06"
NOON_MARKER = "12:00:00"

TEST_DATA_FILES: dict[str, str] = {
    "weather": "weather.weather.json",
    "forecast": "weather.forecast.json",
}

Endpoint = Literal["weather", "forecast"]


class _Condition(BaseModel):
    description: str = ""


class _Main(BaseModel):
    temp: float = 0.0
    feels_like: float = 0.0
    temp_min: float = 0.0
    temp_max: float = 0.0
    humidity: int = 0


class _Wind(BaseModel):
    speed: float = 0.0


class _City(BaseModel):
    name: str = ""


class CurrentPayload(BaseModel):
    """Subset of the `/weather` response used for normalization."""

    name: str = ""
    weather: list[_Condition] = Field(default_factory=list)
    main: _Main = Field(default_factory=_Main)
    wind: _Wind = Field(default_factory=_Wind)


class ForecastSample(BaseModel):
    """One 3-hour entry of the `/forecast` response."""

    dt_txt: str = ""
    weather: list[_Condition] = Field(default_factory=list)
    main: _Main = Field(default_factory=_Main)
    wind: _Wind = Field(default_factory=_Wind)

    @property
    def description(self) -> str:
        return self.weather[0].description if self.weather else "unknown"


class ForecastPayload(BaseModel):
    """Subset of the `/forecast` response used for normalization."""

    samples: list[ForecastSample] = Field(default_factory=list, alias="list")
    city: _City = Field(default_factory=_City)


@dataclass
class _DayAccumulator:
    high: float
    low: float
    wind_speed: float
    description: str
    humidity: int

    def add(self, sample: ForecastSample) -> None:
        self.high = max(self.high, sample.main.temp_max)
        self.low = min(self.low, sample.main.temp_min)
        self.wind_speed = max(self.wind_speed, sample.wind.speed)
        if NOON_MARKER in sample.dt_txt:
            self.description = sample.description
            self.humidity = sample.main.humidity


def _split_timestamp(dt_txt: str) -> tuple[str, str]:
    """Split "YYYY-MM-DD HH:MM:SS" into its date and hour parts."""
    date_part, sep, time_part = dt_txt.partition(" ")
    if not sep or len(time_part) < 2 or not date_part:
        raise WeatherDecodeError(f"Malformed forecast timestamp: {dt_txt!r}")
    return date_part, time_part[:2]


def aggregate_daily(samples: Sequence[ForecastSample]) -> list[DailyForecast]:
    """Collapse 3-hour forecast samples into one record per calendar day.

    Samples earlier than 06:00 are skipped. High and low are the extremes of
    the retained samples, wind is the strongest reading, and conditions and
    humidity come from the noon sample when one exists, otherwise from the
    first retained sample of the day.
    """
    days: dict[str, _DayAccumulator] = {}
    for sample in samples:
        date_key, hour = _split_timestamp(sample.dt_txt)
        if hour < DAY_START_HOUR:
            continue

        day = days.get(date_key)
        if day is None:
            day = _DayAccumulator(
                high=sample.main.temp_max,
                low=sample.main.temp_min,
                wind_speed=0.0,
                description=sample.description,
                humidity=sample.main.humidity,
            )
            days[date_key] = day
        day.add(sample)

    result: list[DailyForecast] = []
    for date_key in sorted(days):
        day = days[date_key]
        try:
            parsed_date = datetime.date.fromisoformat(date_key)
        except ValueError as exc:
            raise WeatherDecodeError(f"Malformed forecast date: {date_key!r}") from exc
        result.append(
            DailyForecast(
                date=parsed_date,
                conditions=day.description,
                high=day.high,
                low=day.low,
                wind_speed=day.wind_speed,
                humidity=day.humidity,
            )
        )
    return result


class OpenWeatherProvider(WeatherProvider):
    """Fetches and normalizes current weather and forecasts from OpenWeather."""

    provider_name = "openweather"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        api_key: str | None,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(settings=settings, logger=logger, client=client)
        self._api_key = api_key
        self._use_test_data = settings.weather_use_test_data

    def get_current_weather(self, location: str) -> CurrentWeather:
        raw = self._fetch_payload(location, "weather")
        data = self._validate(CurrentPayload, raw, context="current weather")

        if not data.weather:
            raise WeatherDataError("no weather data available")

        try:
            return CurrentWeather(
                location=data.name,
                conditions=data.weather[0].description,
                temperature=data.main.temp,
                feels_like=data.main.feels_like,
                temp_max=data.main.temp_max,
                temp_min=data.main.temp_min,
                humidity=data.main.humidity,
                wind_speed=data.wind.speed,
            )
        except ValidationError as exc:
            raise WeatherDecodeError(f"openweather current weather out of range: {exc}") from exc

    def get_forecast(self, location: str) -> Forecast:
        raw = self._fetch_payload(location, "forecast")
        data = self._validate(ForecastPayload, raw, context="forecast")

        if not data.samples:
            raise WeatherDataError("no forecast data available")

        daily = aggregate_daily(data.samples)
        self.logger.debug(
            "openweather aggregated %d samples into %d days", len(data.samples), len(daily)
        )
        try:
            return Forecast(
                location=data.city.name,
                current=self._current_from_forecast(data),
                daily=daily,
            )
        except ValidationError as exc:
            raise WeatherDecodeError(f"openweather forecast out of range: {exc}") from exc

    def build_params(self, location: str) -> dict[str, Any]:
        """Build the query for a zip code or a free-text city name, always in the US."""
        params: dict[str, Any] = {}
        if _ZIP_RE.fullmatch(location):
            params["zip"] = f"{location},us"
        else:
            params["q"] = f"{location},us"
        params["units"] = "imperial"
        params["appid"] = self._api_key
        return params

    @staticmethod
    def _current_from_forecast(data: ForecastPayload) -> CurrentWeather | None:
        first = data.samples[0]
        if not first.weather:
            return None
        return CurrentWeather(
            location=data.city.name,
            conditions=first.weather[0].description,
            temperature=first.main.temp,
            feels_like=first.main.feels_like,
            temp_max=first.main.temp_max,
            temp_min=first.main.temp_min,
            humidity=first.main.humidity,
            wind_speed=first.wind.speed,
        )

    def _fetch_payload(self, location: str, endpoint: Endpoint) -> dict[str, Any]:
        if self._use_test_data:
            return self._read_test_data(endpoint)

        if not self._api_key:
            raise ConfigError("openweather API key is required for live requests.")

        url = f"{self.settings.openweather_base_url}/{endpoint}"
        return self._request_json(url, params=self.build_params(location), context=endpoint)

    def _read_test_data(self, endpoint: Endpoint) -> dict[str, Any]:
        path = self.settings.weather_test_data_dir / TEST_DATA_FILES[endpoint]
        self.logger.debug("openweather reading test data from %s", path)
        try:
            body = path.read_bytes()
        except OSError as exc:
            raise WeatherTransportError(f"Error reading test file {path}: {exc}") from exc
        return self._decode_json(body, context=f"test data {path.name}")

    @staticmethod
    def _validate(model: type[BaseModel], raw: dict[str, Any], context: str) -> Any:
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            raise WeatherDecodeError(
                f"openweather {context} payload did not match the expected schema: {exc}"
            ) from exc
