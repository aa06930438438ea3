"""Health endpoints."""

from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from city_weather import __version__
from city_weather.config import Settings
from city_weather.dependencies import get_app_settings, get_http_client, get_weather_state_holder
from city_weather.models import DetailedHealthResponse, HealthResponse
from city_weather.state_managers import WeatherViewStateHolder

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint."""
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(
    client: httpx.AsyncClient = Depends(get_http_client),
    holder: WeatherViewStateHolder = Depends(get_weather_state_holder),
    settings: Settings = Depends(get_app_settings),
):
    """Readiness probe - can the application serve traffic?

    Does not call the weather provider, to keep probes off the API quota.

    **Returns:**
    - 200: Application is ready to serve requests
    - 503: Application is not ready
    """
    checks = {
        "http_client": "failed" if client.is_closed else "ok",
        "weather_api_key": "ok" if settings.weather_api_key else "missing",
        "view_state": holder.fetch_state.status,
    }
    all_healthy = checks["http_client"] == "ok" and checks["weather_api_key"] == "ok"

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content=DetailedHealthResponse(
            status="healthy" if all_healthy else "unhealthy",
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )
