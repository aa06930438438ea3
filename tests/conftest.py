"""Pytest configuration and shared fixtures."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from city_weather.config import OPENWEATHER_URL, Settings
from city_weather.core.app_factory import create_app
from city_weather.models.weather import CityNameQuery, CoordinatesQuery
from city_weather.services.weather_service import FetchResult, WeatherClient
from city_weather.state_managers import WeatherViewStateHolder
from city_weather.views.notifications import ErrorNotifier


class ControlledWeatherClient:
    """Weather client stand-in whose responses are released by the test.

    Each fetch waits on a future keyed by city name (or "lat,lon") until
    resolve() is called, so tests decide the order responses arrive in.
    """

    def __init__(self):
        self.calls: list[CityNameQuery | CoordinatesQuery] = []
        self._pending: dict[str, asyncio.Future] = {}

    @staticmethod
    def key_for(query: CityNameQuery | CoordinatesQuery) -> str:
        if isinstance(query, CityNameQuery):
            return query.name
        return f"{query.lat},{query.lon}"

    async def fetch(self, query: CityNameQuery | CoordinatesQuery) -> FetchResult:
        future = asyncio.get_running_loop().create_future()
        self._pending[self.key_for(query)] = future
        self.calls.append(query)
        return await future

    async def wait_for(self, *keys: str) -> None:
        """Yield to the loop until a fetch is waiting for every key."""
        for _ in range(100):
            if all(key in self._pending for key in keys):
                return
            await asyncio.sleep(0)
        raise AssertionError(f"fetches never started for {keys}")

    def resolve(self, key: str, result: FetchResult) -> None:
        self._pending.pop(key).set_result(result)


@pytest.fixture
def mock_settings():
    """Settings instance with test values, ignoring any local .env file."""
    return Settings(
        _env_file=None,
        api_host="127.0.0.1",
        api_port=8000,
        weather_api_key="test-weather-key",
        weather_units="imperial",
        weather_request_timeout=5.0,
        discard_stale_responses=True,
    )


@pytest.fixture
def mock_http_client():
    """Mock httpx.AsyncClient for external API calls."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get = AsyncMock()
    mock_client.aclose = AsyncMock()
    mock_client.is_closed = False
    return mock_client


@pytest.fixture
def make_response():
    """Factory for real httpx responses tied to the OpenWeatherMap URL."""

    def _make(status_code: int = 200, json=None, text: str = "") -> httpx.Response:
        request = httpx.Request("GET", OPENWEATHER_URL)
        if json is not None:
            return httpx.Response(status_code, json=json, request=request)
        return httpx.Response(status_code, text=text, request=request)

    return _make


@pytest.fixture
def mock_weather_response():
    """OpenWeatherMap current weather response for Columbus, imperial units."""
    return {
        "coord": {"lon": -82.9988, "lat": 39.9612},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "base": "stations",
        "main": {
            "temp": 72.5,
            "feels_like": 73.1,
            "temp_min": 70.0,
            "temp_max": 75.2,
            "pressure": 1015,
            "humidity": 68,
        },
        "visibility": 10000,
        "wind": {"speed": 8.05, "deg": 230},
        "clouds": {"all": 75},
        "dt": 1729360000,
        "sys": {"country": "US", "sunrise": 1729338000, "sunset": 1729378000},
        "timezone": -14400,
        "id": 4509177,
        "name": "Columbus",
        "cod": 200,
    }


@pytest.fixture
def weather_client(mock_http_client, mock_settings):
    """WeatherClient backed by the mocked HTTP client."""
    return WeatherClient(mock_http_client, mock_settings)


@pytest.fixture
def holder(weather_client):
    """View-state holder that discards stale responses."""
    return WeatherViewStateHolder(weather_client, discard_stale_responses=True)


@pytest.fixture
def controlled_client():
    return ControlledWeatherClient()


@pytest.fixture
def notifier(holder):
    """Error notifier subscribed to the holder."""
    error_notifier = ErrorNotifier()
    holder.subscribe(error_notifier)
    return error_notifier


@pytest.fixture
def app(mock_settings):
    """FastAPI app built with test settings (lifespan not run)."""
    return create_app(mock_settings)
