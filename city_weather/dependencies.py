"""FastAPI dependencies for dependency injection."""

import httpx
from fastapi import Request

from city_weather.config import Settings, get_settings
from city_weather.services.weather_service import WeatherClient
from city_weather.state_managers import WeatherViewStateHolder
from city_weather.views.notifications import ErrorNotifier


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the shared HTTP client from app state.

    Raises:
        RuntimeError: If HTTP client is not initialized.
    """
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)

    if client is None:
        raise RuntimeError("HTTP client not initialized. This should never happen.")

    return client


async def get_weather_client(request: Request) -> WeatherClient:
    """
    Get the weather client from app state.

    Raises:
        RuntimeError: If the weather client is not initialized.
    """
    weather_client: WeatherClient | None = getattr(request.app.state, "weather_client", None)

    if weather_client is None:
        raise RuntimeError("Weather client not initialized.")

    return weather_client


async def get_weather_state_holder(request: Request) -> WeatherViewStateHolder:
    """
    Get the weather view-state holder from app state.

    Raises:
        RuntimeError: If the holder is not initialized.
    """
    holder: WeatherViewStateHolder | None = getattr(request.app.state, "weather_state_holder", None)

    if holder is None:
        raise RuntimeError("Weather view state not initialized.")

    return holder


async def get_error_notifier(request: Request) -> ErrorNotifier:
    """
    Get the error notifier from app state.

    Raises:
        RuntimeError: If the notifier is not initialized.
    """
    notifier: ErrorNotifier | None = getattr(request.app.state, "error_notifier", None)

    if notifier is None:
        raise RuntimeError("Error notifier not initialized.")

    return notifier


async def get_app_settings(request: Request) -> Settings:
    """
    Get the settings the app was created with, falling back to the singleton.
    """
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings or get_settings()
