"""Normalized weather model invariants."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from pydantic import ValidationError

from weather_summary.weather.models import CurrentWeather, DailyForecast, Forecast


def _current(**overrides: Any) -> CurrentWeather:
    fields: dict[str, Any] = {
        "location": "Boston",
        "conditions": "clear sky",
        "temperature": 50.0,
        "feels_like": 48.0,
        "temp_max": 55.0,
        "temp_min": 44.0,
        "humidity": 60,
        "wind_speed": 8.0,
    }
    fields.update(overrides)
    return CurrentWeather(**fields)


def _day(day: date, **overrides: Any) -> DailyForecast:
    fields: dict[str, Any] = {
        "date": day,
        "conditions": "clear sky",
        "high": 55.0,
        "low": 44.0,
        "wind_speed": 8.0,
        "humidity": 60,
    }
    fields.update(overrides)
    return DailyForecast(**fields)


def test_current_weather_is_immutable() -> None:
    current = _current()
    with pytest.raises(ValidationError):
        current.temperature = 10.0  # type: ignore[misc]


@pytest.mark.parametrize("humidity", [-1, 101])
def test_current_weather_rejects_humidity_out_of_range(humidity: int) -> None:
    with pytest.raises(ValidationError):
        _current(humidity=humidity)


@pytest.mark.parametrize("humidity", [0, 100])
def test_current_weather_accepts_humidity_bounds(humidity: int) -> None:
    assert _current(humidity=humidity).humidity == humidity


def test_daily_forecast_allows_high_below_low() -> None:
    day = _day(date(2026, 3, 1), high=30.0, low=40.0)
    assert day.high < day.low


def test_forecast_accepts_ascending_days_and_missing_current() -> None:
    forecast = Forecast(
        location="Boston",
        daily=[_day(date(2026, 3, 1)), _day(date(2026, 3, 2)), _day(date(2026, 3, 4))],
    )
    assert forecast.current is None
    assert [d.date.day for d in forecast.daily] == [1, 2, 4]


def test_forecast_rejects_duplicate_dates() -> None:
    with pytest.raises(ValidationError, match="strictly ascending"):
        Forecast(location="Boston", daily=[_day(date(2026, 3, 1)), _day(date(2026, 3, 1))])


def test_forecast_rejects_unsorted_dates() -> None:
    with pytest.raises(ValidationError, match="strictly ascending"):
        Forecast(location="Boston", daily=[_day(date(2026, 3, 2)), _day(date(2026, 3, 1))])


def test_daily_date_parses_iso_string() -> None:
    assert _day("2026-03-01").date == date(2026, 3, 1)  # type: ignore[arg-type]


def test_forecast_daily_sequence_cannot_be_mutated() -> None:
    forecast = Forecast(location="Boston", daily=[_day(date(2026, 3, 2))])

    with pytest.raises(AttributeError):
        forecast.daily.append(_day(date(2026, 3, 1)))  # type: ignore[attr-defined]
    assert [d.date for d in forecast.daily] == [date(2026, 3, 2)]


def test_forecast_daily_defaults_to_empty_tuple() -> None:
    assert Forecast(location="Boston").daily == ()
