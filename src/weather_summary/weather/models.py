"""Typed models for normalized weather results."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CurrentWeather(BaseModel):
    """Current conditions for one location. Temperatures are Fahrenheit."""

    model_config = ConfigDict(frozen=True)

    location: str
    conditions: str
    temperature: float
    feels_like: float
    temp_max: float
    temp_min: float
    humidity: int = Field(ge=0, le=100)
    wind_speed: float


class DailyForecast(BaseModel):
    """One aggregated forecast day."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    conditions: str
    high: float
    low: float
    wind_speed: float
    humidity: int


class Forecast(BaseModel):
    """Multi-day forecast with optional current conditions."""

    model_config = ConfigDict(frozen=True)

    location: str
    current: CurrentWeather | None = None
    daily: tuple[DailyForecast, ...] = ()

    @model_validator(mode="after")
    def validate_daily_order(self) -> Forecast:
        """Daily items must be strictly ascending by date."""
        for previous, item in zip(self.daily, self.daily[1:]):
            if item.date <= previous.date:
                raise ValueError(
                    f"daily forecasts must be strictly ascending by date; "
                    f"{item.date.isoformat()} follows {previous.date.isoformat()}"
                )
        return self
