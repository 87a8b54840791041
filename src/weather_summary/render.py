"""Text rendering for normalized weather results."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .weather.models import CurrentWeather, Forecast


def _temp(value: float) -> str:
    return f"{value:.1f}°F"


def render_current(console: Console, current: CurrentWeather) -> None:
    """Print a current-conditions summary block."""
    header = f"Weather Summary for {current.location}:"
    console.print(header, markup=False, highlight=False)
    console.print("-" * len(header), markup=False, highlight=False)
    lines = [
        f"Conditions: {current.conditions.title()}",
        f"Temperature: {_temp(current.temperature)}",
        f"Feels Like: {_temp(current.feels_like)}",
        f"High/Low: {_temp(current.temp_max)} / {_temp(current.temp_min)}",
        f"Humidity: {current.humidity}%",
        f"Wind Speed: {current.wind_speed:.1f} mph",
    ]
    for line in lines:
        console.print(line, markup=False, highlight=False)


def render_forecast(console: Console, forecast: Forecast) -> None:
    """Print current conditions (when present) followed by a daily table."""
    if forecast.current is not None:
        render_current(console, forecast.current)
        console.print()

    if not forecast.daily:
        console.print(f"No daily forecast available for {forecast.location}.", markup=False)
        return

    table = Table(title=f"Forecast for {forecast.location}")
    table.add_column("Date")
    table.add_column("Conditions", overflow="fold")
    table.add_column("High", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Wind", justify="right")
    table.add_column("Humidity", justify="right")

    for day in forecast.daily:
        table.add_row(
            day.date.strftime("%a %b %d"),
            day.conditions.title(),
            _temp(day.high),
            _temp(day.low),
            f"{day.wind_speed:.1f} mph",
            f"{day.humidity}%",
        )
    console.print(table)
