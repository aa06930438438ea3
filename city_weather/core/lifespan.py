"""Application lifespan management."""

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI

from city_weather import __version__
from city_weather.config import Settings, get_settings
from city_weather.logging_config import get_logger, log_with_context
from city_weather.middleware.logging_middleware import redact_sensitive_data
from city_weather.services.weather_service import WeatherClient
from city_weather.state_managers import WeatherViewStateHolder
from city_weather.views.notifications import ErrorNotifier

logger = get_logger(__name__)


async def log_request(request: httpx.Request) -> None:
    """Event hook to log requests with redacted sensitive data."""
    log_with_context(
        logger,
        "info",
        "HTTP Request",
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="http_request",
    )


async def log_response(response: httpx.Response) -> None:
    """Event hook to log responses with redacted sensitive data."""
    log_with_context(
        logger,
        "info",
        "HTTP Response",
        status_code=response.status_code,
        url=redact_sensitive_data(str(response.request.url)),
        event_type="http_response",
    )


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared HTTP client with pooling, timeouts and logging hooks."""
    event_hooks: dict[str, list[Callable[..., Any]]] = {
        "request": [log_request],
        "response": [log_response],
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=5.0,  # Connection establishment timeout
            read=settings.weather_request_timeout,
            write=5.0,
            pool=5.0,
        ),
        limits=httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0,
        ),
        follow_redirects=True,
        event_hooks=event_hooks,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown events.

    Exceptions after yield are re-raised so cleanup still runs and the
    error is not swallowed.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.startup_time = time.time()

    log_with_context(
        logger,
        "info",
        "Starting City Weather application",
        version=__version__,
        units=settings.weather_units,
        event_type="app_startup",
    )

    client = create_http_client(settings)
    app.state.http_client = client

    weather_client = WeatherClient(client, settings)
    holder = WeatherViewStateHolder(weather_client, discard_stale_responses=settings.discard_stale_responses)
    notifier = ErrorNotifier()
    holder.subscribe(notifier)
    await holder.initialize()

    app.state.weather_client = weather_client
    app.state.weather_state_holder = holder
    app.state.error_notifier = notifier
    log_with_context(
        logger,
        "info",
        "Weather client and view state initialized",
        event_type="state_managers_ready",
    )

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        log_with_context(
            logger,
            "info",
            "Shutting down City Weather application",
            event_type="app_shutdown",
        )

        await holder.cleanup()
        await client.aclose()
        log_with_context(
            logger,
            "info",
            "HTTP client closed",
            event_type="http_client_cleanup",
        )
