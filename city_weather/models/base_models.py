"""Pydantic models for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from city_weather.models.view_state import FetchState
from city_weather.models.weather import WeatherQuery, WeatherRecord


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response with dependency status."""

    status: str = Field(..., description="Overall health status: healthy or unhealthy")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(..., description="Current server timestamp")
    checks: dict[str, str] = Field(..., description="Individual health check results")


class WeatherStateResponse(BaseModel):
    """Current view state as exposed by the JSON API."""

    result: WeatherRecord | None = Field(None, description="Latest successfully fetched record")
    is_loading: bool = Field(..., description="Whether a fetch is in flight")
    error_message: str | None = Field(None, description="Message of the latest failed fetch")
    request_id: int = Field(..., description="Id of the request that produced this state")
    fetch_state: FetchState = Field(..., description="The fields collapsed into a single state")
    icon_url: str | None = Field(None, description="Icon URL of the current result")


class ErrorResponse(BaseModel):
    """Error response."""

    code: str
    message: str
    details: dict = Field(default_factory=dict)


class FetchRequest(BaseModel):
    """Body of a request that starts a fetch in the view state."""

    query: WeatherQuery = Field(..., description="City name or coordinates query")
