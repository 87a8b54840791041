"""Provider-agnostic weather interface."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherDecodeError, WeatherTransportError
from ..redaction import sanitize_text
from .models import CurrentWeather, Forecast


class WeatherProvider(ABC):
    """Base contract for weather providers.

    Each call performs its own blocking HTTP requests and returns a fresh
    normalized result. Failures surface immediately; nothing is retried.
    """

    provider_name: str = "base"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._client = client or httpx.Client(
            timeout=settings.weather_timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": settings.weather_user_agent,
            },
        )

    def __enter__(self) -> WeatherProvider:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release provider resources."""
        self._client.close()

    @abstractmethod
    def get_current_weather(self, location: str) -> CurrentWeather:
        """Fetch and normalize current conditions for a zip code or "City,ST"."""

    @abstractmethod
    def get_forecast(self, location: str) -> Forecast:
        """Fetch and normalize a multi-day forecast for a zip code or "City,ST"."""

    def _request_json(self, url: str, params: dict[str, Any], context: str) -> dict[str, Any]:
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise WeatherTransportError(
                f"{self.provider_name} {context} request failed: {sanitize_text(str(exc))}"
            ) from exc

        self.logger.debug(
            "%s %s GET %s -> HTTP %d (%d bytes)",
            self.provider_name,
            context,
            response.url,
            response.status_code,
            len(response.content),
        )

        if not response.is_success:
            body = response.text
            raise WeatherTransportError(
                f"{self.provider_name} API error (HTTP {response.status_code}): "
                f"{sanitize_text(body)}",
                status_code=response.status_code,
                body=body,
            )

        return self._decode_json(response.content, context=context)

    def _decode_json(self, body: bytes | str, context: str) -> dict[str, Any]:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise WeatherDecodeError(
                f"{self.provider_name} {context} returned non-JSON response: {exc}"
            ) from exc

        if not isinstance(payload, dict):
            raise WeatherDecodeError(
                f"{self.provider_name} {context} returned unexpected payload type "
                f"{type(payload).__name__}."
            )
        return payload
