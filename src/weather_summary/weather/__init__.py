"""Weather provider integrations."""

from __future__ import annotations

import logging

from ..config import ProviderName, Settings
from ..exceptions import ConfigError
from .base import WeatherProvider
from .models import CurrentWeather, DailyForecast, Forecast
from .openmeteo import OpenMeteoProvider
from .openweather import OpenWeatherProvider

PROVIDER_NAMES: tuple[ProviderName, ...] = ("openweather", "openmeteo")


def build_provider(
    settings: Settings,
    logger: logging.Logger,
    name: str | None = None,
) -> WeatherProvider:
    """Construct the provider selected by name, defaulting to WEATHER_PROVIDER."""
    selected = name or settings.weather_provider
    if selected == "openweather":
        api_key = None if settings.weather_use_test_data else settings.resolve_openweather_api_key()
        return OpenWeatherProvider(settings=settings, logger=logger, api_key=api_key)
    if selected == "openmeteo":
        return OpenMeteoProvider(settings=settings, logger=logger)
    raise ConfigError(
        f"Unknown weather provider {selected!r}; expected one of {', '.join(PROVIDER_NAMES)}."
    )


__all__ = [
    "PROVIDER_NAMES",
    "CurrentWeather",
    "DailyForecast",
    "Forecast",
    "OpenMeteoProvider",
    "OpenWeatherProvider",
    "WeatherProvider",
    "build_provider",
]
