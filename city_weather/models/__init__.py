"""City Weather models"""

from city_weather.models.base_models import (
    DetailedHealthResponse,
    ErrorResponse,
    FetchRequest,
    HealthResponse,
    WeatherStateResponse,
)
from city_weather.models.view_state import Failed, FetchState, Idle, Loading, Success, WeatherViewState
from city_weather.models.weather import (
    CityNameQuery,
    CoordinatesQuery,
    CurrentWeather,
    WeatherQuery,
    WeatherRecord,
)

__all__ = [
    "DetailedHealthResponse",
    "ErrorResponse",
    "FetchRequest",
    "HealthResponse",
    "WeatherStateResponse",
    "Failed",
    "FetchState",
    "Idle",
    "Loading",
    "Success",
    "WeatherViewState",
    "CityNameQuery",
    "CoordinatesQuery",
    "CurrentWeather",
    "WeatherQuery",
    "WeatherRecord",
]
