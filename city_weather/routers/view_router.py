"""Page/view routes for serving the weather page and its tile fragment."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from city_weather.config import Settings
from city_weather.dependencies import get_app_settings, get_error_notifier, get_weather_state_holder
from city_weather.state_managers import WeatherViewStateHolder
from city_weather.views.notifications import ErrorNotifier
from city_weather.views.template_renderer import TemplateRenderer

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    holder: WeatherViewStateHolder = Depends(get_weather_state_holder),
    notifier: ErrorNotifier = Depends(get_error_notifier),
    settings: Settings = Depends(get_app_settings),
):
    """Render the weather page."""
    return TemplateRenderer.render_index(request, holder, notifier, settings)


@router.get("/tiles/weather", response_class=HTMLResponse)
async def weather_tile(
    request: Request,
    holder: WeatherViewStateHolder = Depends(get_weather_state_holder),
    notifier: ErrorNotifier = Depends(get_error_notifier),
    settings: Settings = Depends(get_app_settings),
):
    """Render the weather tile fragment."""
    return TemplateRenderer.render_weather_tile(request, holder, notifier, settings)


@router.post("/weather/city", response_class=HTMLResponse)
async def fetch_city_weather(
    request: Request,
    city: str = Form(default=""),
    holder: WeatherViewStateHolder = Depends(get_weather_state_holder),
    notifier: ErrorNotifier = Depends(get_error_notifier),
    settings: Settings = Depends(get_app_settings),
):
    """Start a fetch for the typed city and return the tile (usually loading)."""
    holder.fetch_by_city(city)
    return TemplateRenderer.render_weather_tile(request, holder, notifier, settings)


@router.post("/weather/location", response_class=HTMLResponse)
async def fetch_location_weather(
    request: Request,
    lat: float = Form(...),
    lon: float = Form(...),
    holder: WeatherViewStateHolder = Depends(get_weather_state_holder),
    notifier: ErrorNotifier = Depends(get_error_notifier),
    settings: Settings = Depends(get_app_settings),
):
    """Start a fetch for the position shared by the browser."""
    holder.fetch_by_coordinates(lat, lon)
    return TemplateRenderer.render_weather_tile(request, holder, notifier, settings)
