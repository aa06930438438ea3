"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI
from pydantic import ValidationError

from city_weather import __version__
from city_weather.config import Settings, get_settings
from city_weather.core.lifespan import lifespan
from city_weather.core.middleware import setup_middleware
from city_weather.exceptions import ConfigurationException
from city_weather.middleware.error_handlers import register_error_handlers
from city_weather.routers import health_router, view_router, weather_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings instance (defaults to the singleton)

    Returns:
        Configured FastAPI application instance

    Raises:
        ConfigurationException: If the environment does not hold valid settings
    """
    if settings is None:
        try:
            settings = get_settings()
        except ValidationError as e:
            raise ConfigurationException(
                f"Invalid configuration: {e.error_count()} error(s), check WEATHER_API_KEY and .env",
                details={"errors": [".".join(str(part) for part in err["loc"]) for err in e.errors()]},
            ) from e

    app = FastAPI(
        title="City Weather",
        description="""
        Current weather for a US city name or the browser's location,
        from OpenWeatherMap.

        ## Pages
        - `/` - Weather page
        - `/tiles/weather` - Weather tile fragment (HTMX)

        ## API
        - `/api/weather/current` - One-shot fetch by `city` or `lat`/`lon`
        - `/api/weather/state` - Current view state
        - `/api/weather/fetch` - Start a fetch in the view state

        ## Health
        - `/health` - Basic health check
        - `/health/ready` - Readiness probe
        """,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    setup_middleware(app, settings)
    register_error_handlers(app)

    app.include_router(view_router.router, tags=["views"])
    app.include_router(health_router.router, tags=["health"])
    app.include_router(weather_router.router, prefix="/api/weather", tags=["weather"])

    return app
