"""Weather JSON API routes."""

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError

from city_weather.config import Settings
from city_weather.core.middleware import limiter
from city_weather.dependencies import get_app_settings, get_weather_client, get_weather_state_holder
from city_weather.exceptions import EmptyInputError, InvalidQueryError
from city_weather.models.base_models import FetchRequest, WeatherStateResponse
from city_weather.models.weather import CityNameQuery, CoordinatesQuery, WeatherRecord
from city_weather.services.weather_service import WeatherClient
from city_weather.state_managers import WeatherViewStateHolder

router = APIRouter()


def _state_response(holder: WeatherViewStateHolder, settings: Settings) -> WeatherStateResponse:
    state = holder.state
    return WeatherStateResponse(
        result=state.result,
        is_loading=state.is_loading,
        error_message=state.error_message,
        request_id=state.request_id,
        fetch_state=state.fetch_state,
        icon_url=state.result.icon_url(settings.weather_icon_base_url) if state.result else None,
    )


@router.get(
    "/current",
    response_model=WeatherRecord,
    summary="Get current weather",
    description="""
    One-shot fetch of current conditions, by city name (`city`) or by
    coordinates (`lat` + `lon`). Does not touch the page's view state.

    **Rate Limited:** 30 requests/minute
    """,
    responses={
        404: {"description": "Provider has no weather for the query"},
        422: {"description": "Missing or invalid query"},
        502: {"description": "Weather API error"},
        503: {"description": "Weather API unreachable"},
        504: {"description": "Weather API timed out"},
    },
)
@limiter.limit("30/minute")
async def get_current_weather(
    request: Request,
    city: str | None = Query(default=None, description="City name, e.g. Columbus"),
    lat: float | None = Query(default=None, description="Latitude"),
    lon: float | None = Query(default=None, description="Longitude"),
    weather_client: WeatherClient = Depends(get_weather_client),
):
    """Fetch current weather directly from the provider."""
    if city is not None:
        if not city.strip():
            raise EmptyInputError()
        query: CityNameQuery | CoordinatesQuery = CityNameQuery(name=city)
    elif lat is not None and lon is not None:
        try:
            query = CoordinatesQuery(lat=lat, lon=lon)
        except ValidationError as e:
            raise InvalidQueryError(
                f"Invalid coordinates ({lat}, {lon})",
                details={"lat": lat, "lon": lon},
            ) from e
    else:
        raise InvalidQueryError("Provide either 'city' or both 'lat' and 'lon'")

    return await weather_client.fetch_or_raise(query)


@router.get("/state", response_model=WeatherStateResponse, summary="Get the current view state")
async def get_view_state(
    holder: WeatherViewStateHolder = Depends(get_weather_state_holder),
    settings: Settings = Depends(get_app_settings),
):
    """Return the page's current weather view state."""
    return _state_response(holder, settings)


@router.post(
    "/fetch",
    response_model=WeatherStateResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a fetch in the view state",
)
async def start_fetch(
    body: FetchRequest,
    holder: WeatherViewStateHolder = Depends(get_weather_state_holder),
    settings: Settings = Depends(get_app_settings),
):
    """Dispatch a query to the view state and return the state right after dispatch."""
    query = body.query
    if isinstance(query, CityNameQuery):
        holder.fetch_by_city(query.name)
    else:
        holder.fetch_by_coordinates(query.lat, query.lon)
    return _state_response(holder, settings)
