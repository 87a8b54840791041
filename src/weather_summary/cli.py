"""CLI: fetch current weather or a forecast for a US location and print it."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from rich.console import Console

from .config import Settings, load_settings
from .exceptions import ConfigError, WeatherProviderError
from .log_setup import setup_logger
from .render import render_current, render_forecast
from .weather import PROVIDER_NAMES, build_provider


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse weather CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show current weather or a 5-day forecast for a US location."
    )
    parser.add_argument("location", help='5-digit zip code or "City,ST".')
    parser.add_argument(
        "--provider",
        choices=PROVIDER_NAMES,
        default=None,
        help="Weather provider (defaults to WEATHER_PROVIDER).",
    )
    parser.add_argument(
        "--forecast",
        action="store_true",
        help="Show the multi-day forecast instead of current conditions.",
    )
    parser.add_argument(
        "--test-data",
        action="store_true",
        help="Read canned OpenWeather JSON files instead of calling the API.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def _apply_overrides(args: argparse.Namespace, settings: Settings) -> Settings:
    updates: dict[str, object] = {}
    if args.provider:
        updates["weather_provider"] = args.provider
    if args.test_data:
        updates["weather_use_test_data"] = True
    if args.debug:
        updates["weather_debug"] = True
    return settings.model_copy(update=updates) if updates else settings


def _validate_location(location: str) -> str:
    # Only blank input is rejected; surrounding whitespace reaches the provider unchanged.
    if not location.strip():
        raise WeatherProviderError("Location must not be empty.")
    return location


def main(argv: Sequence[str] | None = None) -> int:
    """Run the weather lookup flow."""
    args = parse_args(argv)
    logger = setup_logger(debug=args.debug)
    console = Console()

    try:
        settings = _apply_overrides(args, load_settings())
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    logger = setup_logger(debug=settings.weather_debug)
    logger.debug("Settings: %s", settings.safe_summary())

    try:
        location = _validate_location(args.location)
        with build_provider(settings, logger) as provider:
            if args.forecast:
                render_forecast(console, provider.get_forecast(location))
            else:
                render_current(console, provider.get_current_weather(location))
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        if settings.weather_provider == "openweather":
            console.print(
                "Set the OpenWeather API key via OPENWEATHER_API_KEY or "
                f"{settings.openweather_api_key_file}, or use --provider openmeteo.",
                markup=False,
            )
        return 2
    except WeatherProviderError as exc:
        logger.error("Weather request failed: %s", exc)
        return 4
    except Exception as exc:  # pragma: no cover - defensive catch for CLI runtime
        logger.exception("Unexpected weather CLI failure: %s", exc)
        return 99

    return 0


if __name__ == "__main__":
    sys.exit(main())
