"""Middleware configuration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from city_weather.config import Settings
from city_weather.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# Shared by the app state and the route decorators
limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])

CORS_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"


def setup_middleware(app: FastAPI, settings: Settings) -> Limiter:
    """Configure all middleware for the application.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        Limiter instance for rate limiting
    """
    log_with_context(
        logger,
        "info",
        "Configuring CORS middleware",
        event_type="security_config",
        pattern=CORS_ORIGIN_REGEX,
        api_host=settings.api_host,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    return limiter
