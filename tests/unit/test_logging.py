"""Unit tests for logging configuration and URL redaction."""

import logging

import httpx
import pytest

from city_weather.core.lifespan import create_http_client, log_request
from city_weather.logging_config import get_logger, log_with_context, setup_logging
from city_weather.middleware.logging_middleware import redact_sensitive_data


def test_redacts_api_key():
    url = "https://api.openweathermap.org/data/2.5/weather?q=Columbus&appid=secret123&units=imperial"

    redacted = redact_sensitive_data(url)

    assert "secret123" not in redacted
    assert "appid=***REDACTED***" in redacted
    assert "q=Columbus" in redacted
    assert "units=imperial" in redacted


def test_redaction_leaves_other_params():
    url = "https://example.com/weather?lat=1.0&lon=2.0"

    assert redact_sensitive_data(url) == url


@pytest.mark.asyncio
async def test_request_hook_logs_redacted_url(caplog):
    request = httpx.Request("GET", "https://api.openweathermap.org/data/2.5/weather?q=Columbus&appid=secret123")

    with caplog.at_level(logging.INFO, logger="city_weather.core.lifespan"):
        await log_request(request)

    assert "secret123" not in caplog.text
    record = caplog.records[-1]
    assert record.event_type == "http_request"
    assert "REDACTED" in record.url


@pytest.mark.asyncio
async def test_http_client_uses_settings_timeout(mock_settings):
    client = create_http_client(mock_settings)
    try:
        assert client.timeout.read == mock_settings.weather_request_timeout
        assert client.follow_redirects is True
    finally:
        await client.aclose()


def test_log_with_context_adds_fields(caplog):
    logger = get_logger("city_weather.test")

    with caplog.at_level(logging.INFO, logger="city_weather.test"):
        log_with_context(logger, "info", "Something happened", event_type="test_event", city="Columbus")

    record = caplog.records[-1]
    assert record.message == "Something happened"
    assert record.event_type == "test_event"
    assert record.city == "Columbus"


def test_setup_logging_writes_json_file(tmp_path):
    root = logging.getLogger()
    previous_handlers = root.handlers[:]
    previous_level = root.level
    try:
        setup_logging("DEBUG", log_dir=tmp_path)
        log_with_context(get_logger("city_weather.test"), "info", "json line", event_type="test_event")
        for handler in root.handlers:
            handler.flush()

        content = (tmp_path / "city_weather.log").read_text(encoding="utf-8")
        assert '"message": "json line"' in content
        assert '"event_type": "test_event"' in content
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)


def test_setup_logging_rejects_unknown_level(tmp_path):
    root = logging.getLogger()
    previous_handlers = root.handlers[:]

    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging("verbose", log_dir=tmp_path)

    assert root.handlers == previous_handlers
