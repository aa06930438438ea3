"""Template rendering utilities for HTML views."""

from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from city_weather.config import Settings
from city_weather.state_managers import WeatherViewStateHolder
from city_weather.views.notifications import ErrorNotifier
from city_weather.views.screen import render_weather_screen

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)

# How often the weather tile re-renders itself while a fetch is in flight
LOADING_POLL_INTERVAL = "1s"


class TemplateRenderer:
    """Handles rendering of Jinja2 templates for the weather page."""

    @staticmethod
    def render_index(
        request: Request,
        holder: WeatherViewStateHolder,
        notifier: ErrorNotifier,
        settings: Settings,
        city_input: str = "",
    ) -> HTMLResponse:
        """Render the full weather page."""
        screen = render_weather_screen(
            holder.state,
            city_input=city_input,
            units=settings.weather_units,
            icon_base_url=settings.weather_icon_base_url,
        )
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "screen": screen,
                "notifications": notifier.drain(),
                "oob_toasts": False,
                "poll_interval": LOADING_POLL_INTERVAL,
            },
        )

    @staticmethod
    def render_weather_tile(
        request: Request,
        holder: WeatherViewStateHolder,
        notifier: ErrorNotifier,
        settings: Settings,
    ) -> HTMLResponse:
        """Render the weather tile fragment for HTMX swaps.

        Pending error toasts are drained into this fragment, so each toast
        reaches the page once.
        """
        screen = render_weather_screen(
            holder.state,
            units=settings.weather_units,
            icon_base_url=settings.weather_icon_base_url,
        )
        return templates.TemplateResponse(
            request,
            "tiles/weather.html",
            {
                "screen": screen,
                "notifications": notifier.drain(),
                "oob_toasts": True,
                "poll_interval": LOADING_POLL_INTERVAL,
            },
        )
