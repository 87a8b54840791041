"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or normalization fail."""


class WeatherTransportError(WeatherProviderError):
    """Raised for connection failures and non-success HTTP responses."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class WeatherDecodeError(WeatherProviderError):
    """Raised when a payload is not JSON or does not match the expected schema."""


class WeatherDataError(WeatherProviderError):
    """Raised when a well-formed payload carries no usable weather data."""


class LocationNotFoundError(WeatherDataError):
    """Raised when geocoding yields no matching location."""
