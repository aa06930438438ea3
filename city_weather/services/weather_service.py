"""Weather client for the OpenWeatherMap current weather API."""

from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from city_weather.config import Settings, get_settings
from city_weather.exceptions import DecodeError, FetchError, HttpError, NetworkError
from city_weather.logging_config import get_logger, log_with_context
from city_weather.models.weather import CityNameQuery, CoordinatesQuery, CurrentWeather, WeatherRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch: a record or an error, never both."""

    record: WeatherRecord | None = None
    error: FetchError | None = None

    def __post_init__(self):
        if (self.record is None) == (self.error is None):
            raise ValueError("FetchResult needs exactly one of record or error")

    @property
    def ok(self) -> bool:
        return self.error is None


def _provider_message(response: httpx.Response) -> str | None:
    """Extract OpenWeatherMap's own error message from a failed response, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


def _http_error(query: CityNameQuery | CoordinatesQuery, response: httpx.Response) -> HttpError:
    status = response.status_code
    provider_message = _provider_message(response)
    details = {"upstream_status": status, "query": query.describe()}
    if provider_message:
        details["provider_message"] = provider_message

    if status == 404:
        message = f"Weather not found for {query.describe()}"
    elif status == 401:
        message = "Weather API rejected the API key (HTTP 401)"
    elif status == 429:
        message = "Weather API rate limit exceeded, try again later (HTTP 429)"
    else:
        message = f"Weather API request failed (HTTP {status})"
        if provider_message:
            message = f"{message}: {provider_message}"
    return HttpError(message, upstream_status=status, details=details)


class WeatherClient:
    """Fetches current conditions, one round trip per call.

    No retries and no caching. Calls are independent of each other, so any
    number may be in flight at once on the shared HTTP client.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings | None = None):
        self._client = client
        self._settings = settings or get_settings()

    def build_params(self, query: CityNameQuery | CoordinatesQuery) -> dict[str, str]:
        """Query parameters for the current weather endpoint."""
        return {
            **query.to_params(),
            "appid": self._settings.weather_api_key,
            "units": self._settings.weather_units,
        }

    async def fetch_or_raise(self, query: CityNameQuery | CoordinatesQuery) -> WeatherRecord:
        """Fetch current weather for a query.

        Args:
            query: City name or coordinates query

        Returns:
            WeatherRecord with every field the provider returned

        Raises:
            NetworkError: On DNS, connection or timeout failures
            HttpError: If the provider answers with a non-2xx status
            DecodeError: If the body is not a JSON object of the expected shape
        """
        log_with_context(
            logger,
            "debug",
            "Fetching current weather",
            query=query.describe(),
            event_type="weather_fetch_start",
        )

        try:
            response = await self._client.get(
                self._settings.weather_api_url,
                params=self.build_params(query),
                timeout=self._settings.weather_request_timeout,
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _http_error(query, e.response) from e
        except httpx.TimeoutException as e:
            raise NetworkError(
                "Weather request timed out, please try again",
                timed_out=True,
                details={"error_type": "timeout"},
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Failed to reach the weather service: {str(e) or type(e).__name__}",
                details={"error_type": "network_error"},
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                "Weather service returned malformed JSON",
                details={"error_type": "parsing_error"},
            ) from e

        try:
            current_weather = CurrentWeather.model_validate(data)
        except ValidationError as e:
            raise DecodeError(
                "Weather service returned unexpected data",
                details={"error_type": "parsing_error", "errors": e.error_count()},
            ) from e

        return WeatherRecord.from_openweather(current_weather)

    async def fetch(self, query: CityNameQuery | CoordinatesQuery) -> FetchResult:
        """Fetch current weather without raising.

        Every failure comes back as a FetchResult carrying a FetchError.
        """
        try:
            record = await self.fetch_or_raise(query)
        except FetchError as e:
            log_with_context(
                logger,
                "warning",
                "Weather fetch failed",
                query=query.describe(),
                error=e.message,
                error_code=e.code.value,
                event_type="weather_fetch_failed",
            )
            return FetchResult(error=e)
        except Exception as e:
            logger.error("Unexpected error during weather fetch", exc_info=True)
            return FetchResult(
                error=FetchError(
                    f"Failed to fetch weather data: {str(e) or type(e).__name__}",
                    details={"error_type": type(e).__name__},
                )
            )

        log_with_context(
            logger,
            "info",
            "Weather fetch succeeded",
            query=query.describe(),
            location=record.location,
            event_type="weather_fetch_success",
        )
        return FetchResult(record=record)
