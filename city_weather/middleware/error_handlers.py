"""Exception handlers for the application."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from city_weather.exceptions import ErrorCode, WeatherAppException
from city_weather.logging_config import get_logger, log_with_context
from city_weather.middleware.logging_middleware import redact_sensitive_data
from city_weather.models.base_models import ErrorResponse

logger = get_logger(__name__)


async def app_exception_handler(request: Request, exc: WeatherAppException) -> JSONResponse:
    """Handle application exceptions with their own HTTP status codes.

    Returns structured JSON error responses with error code, message and
    optional details for client-side error handling.
    """
    log_with_context(
        logger,
        "warning",
        "Application error",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="app_error",
    )

    error = ErrorResponse(code=exc.code.value, message=exc.message, details=exc.details)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error.model_dump()},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions with logging."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=exc)

    # Don't expose internal error details to clients
    error = ErrorResponse(code=ErrorCode.INTERNAL_ERROR.value, message="Internal server error")
    return JSONResponse(
        status_code=500,
        content={"error": error.model_dump()},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded

    app.add_exception_handler(WeatherAppException, app_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
