"""Custom exceptions for City Weather with proper HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    APP_ERROR = "APP_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Fetch errors
    WEATHER_ERROR = "WEATHER_ERROR"
    WEATHER_NETWORK_ERROR = "WEATHER_NETWORK_ERROR"
    WEATHER_TIMEOUT = "WEATHER_TIMEOUT"
    WEATHER_API_ERROR = "WEATHER_API_ERROR"
    WEATHER_NOT_FOUND = "WEATHER_NOT_FOUND"
    WEATHER_DECODE_ERROR = "WEATHER_DECODE_ERROR"
    INVALID_QUERY = "INVALID_QUERY"
    EMPTY_INPUT = "EMPTY_INPUT"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


class WeatherAppException(Exception):
    """Base exception for application errors with HTTP status code support.

    All custom exceptions inherit from this class so the exception handlers
    can render them consistently.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.APP_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize application exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class FetchError(WeatherAppException):
    """A weather fetch failed. The message is always fit to show to the user."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.WEATHER_ERROR,
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class NetworkError(FetchError):
    """Transport failure: DNS, connection reset, timeout."""

    def __init__(self, message: str, timed_out: bool = False, details: dict[str, Any] | None = None):
        self.timed_out = timed_out
        super().__init__(
            message,
            code=ErrorCode.WEATHER_TIMEOUT if timed_out else ErrorCode.WEATHER_NETWORK_ERROR,
            status_code=504 if timed_out else 503,
            details=details,
        )


class HttpError(FetchError):
    """Weather provider answered with a non-2xx status."""

    def __init__(self, message: str, upstream_status: int, details: dict[str, Any] | None = None):
        self.upstream_status = upstream_status
        super().__init__(
            message,
            code=ErrorCode.WEATHER_NOT_FOUND if upstream_status == 404 else ErrorCode.WEATHER_API_ERROR,
            status_code=404 if upstream_status == 404 else 502,
            details=details,
        )


class DecodeError(FetchError):
    """Weather provider answered with a body that is not the expected JSON."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.WEATHER_DECODE_ERROR,
            status_code=502,
            details=details,
        )


class InvalidQueryError(FetchError):
    """The query was rejected before any request was made."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_QUERY,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, status_code=422, details=details)


class EmptyInputError(InvalidQueryError):
    """City name was empty."""

    def __init__(self, message: str = "Please enter a city name", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.EMPTY_INPUT, details=details)


class ConfigurationException(WeatherAppException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)
