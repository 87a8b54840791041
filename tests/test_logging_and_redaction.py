"""Log formatting and API key redaction."""

from __future__ import annotations

import json
import logging

from weather_summary.log_setup import JsonConsoleFormatter, setup_logger
from weather_summary.redaction import REDACTED, sanitize_text


def test_appid_query_value_is_redacted_without_eating_other_params() -> None:
    url = (
        "https://api.openweathermap.org/data/2.5/weather"
        "?zip=02108%2Cus&appid=abc123def&units=imperial"
    )
    sanitized = sanitize_text(url)

    assert "abc123def" not in sanitized
    assert f"appid={REDACTED}" in sanitized
    assert "units=imperial" in sanitized
    assert "zip=02108%2Cus" in sanitized


def test_api_key_value_is_redacted() -> None:
    sanitized = sanitize_text("api_key: s3cret missing")
    assert "s3cret" not in sanitized
    assert sanitized.endswith("missing")


def test_non_secret_text_is_untouched() -> None:
    text = 'openweather API error (HTTP 401): {"message": "Invalid API key."}'
    assert sanitize_text(text) == text


def test_json_formatter_emits_redacted_record() -> None:
    record = logging.LogRecord(
        name="weather_summary",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg="GET %s",
        args=("https://example.test/weather?appid=abc123",),
        exc_info=None,
    )
    event = json.loads(JsonConsoleFormatter().format(record))

    assert event["level"] == "DEBUG"
    assert event["logger"] == "weather_summary"
    assert "abc123" not in event["message"]
    assert "ts" in event


def test_setup_logger_is_idempotent() -> None:
    first = setup_logger("weather_summary.test_idempotent")
    second = setup_logger("weather_summary.test_idempotent", debug=True)

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG
    assert second.propagate is False


def test_setup_logger_defaults_to_info() -> None:
    logger = setup_logger("weather_summary.test_default_level", debug=True)
    logger = setup_logger("weather_summary.test_default_level")

    assert logger.level == logging.INFO
