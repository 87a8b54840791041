"""Typed settings loader for the weather summary tool."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

ProviderName = Literal["openweather", "openmeteo"]

DEFAULT_API_KEY_FILE = Path("~/.config/weather/openweather_api_key")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weather_provider: ProviderName = Field(default="openweather", alias="WEATHER_PROVIDER")

    openweather_api_key: str | None = Field(
        default=None, alias="OPENWEATHER_API_KEY", repr=False
    )
    openweather_api_key_file: Path = Field(
        default=DEFAULT_API_KEY_FILE, alias="OPENWEATHER_API_KEY_FILE", repr=False
    )
    openweather_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        alias="OPENWEATHER_BASE_URL",
    )
    openmeteo_geocoding_url: str = Field(
        default="https://geocoding-api.open-meteo.com/v1/search",
        alias="OPENMETEO_GEOCODING_URL",
    )
    openmeteo_forecast_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        alias="OPENMETEO_FORECAST_URL",
    )

    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_user_agent: str = Field(default="weather-summary/0.1", alias="WEATHER_USER_AGENT")
    weather_use_test_data: bool = Field(default=False, alias="WEATHER_USE_TEST_DATA")
    weather_test_data_dir: Path = Field(default=Path("."), alias="WEATHER_TEST_DATA_DIR")
    weather_debug: bool = Field(default=False, alias="WEATHER_DEBUG")

    @field_validator("openweather_api_key", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as an unset key."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_values(self) -> Settings:
        """Validate cross-field constraints."""
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if not self.weather_user_agent.strip():
            raise ValueError("WEATHER_USER_AGENT must not be empty.")
        for name in ("openweather_base_url", "openmeteo_geocoding_url", "openmeteo_forecast_url"):
            url = getattr(self, name)
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"{name.upper()} must be an http(s) URL.")
            setattr(self, name, url.rstrip("/"))
        return self

    def resolve_openweather_api_key(self) -> str:
        """Return the OpenWeather key from the environment, then the key file."""
        if self.openweather_api_key:
            return self.openweather_api_key.strip()

        key_path = self.openweather_api_key_file.expanduser()
        if key_path.is_file():
            try:
                key = key_path.read_text(encoding="utf-8").strip()
            except OSError as exc:
                raise ConfigError(f"Failed reading API key file ({key_path}): {exc}") from exc
            if key:
                return key

        raise ConfigError(
            "OpenWeather API key not found. Set OPENWEATHER_API_KEY or write the key "
            f"to {self.openweather_api_key_file}."
        )

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "provider": self.weather_provider,
            "openweather_base_url": self.openweather_base_url,
            "openmeteo_geocoding_url": self.openmeteo_geocoding_url,
            "openmeteo_forecast_url": self.openmeteo_forecast_url,
            "timeout_seconds": self.weather_timeout_seconds,
            "use_test_data": self.weather_use_test_data,
            "test_data_dir": str(self.weather_test_data_dir),
            "api_key_configured": bool(self.openweather_api_key),
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
