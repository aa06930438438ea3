"""State managers for handling application-wide mutable state.

All state managers inherit from StateManager ABC. State is only ever
written from the event loop thread, so writes are serialized without locks.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable

from pydantic import ValidationError

from city_weather.exceptions import InvalidQueryError
from city_weather.logging_config import get_logger, log_with_context
from city_weather.models.view_state import Failed, Idle, Loading, Success, WeatherViewState
from city_weather.models.weather import CityNameQuery, CoordinatesQuery, WeatherRecord
from city_weather.services.weather_service import WeatherClient

logger = get_logger(__name__)

StateListener = Callable[[WeatherViewState], None]


class StateManager(ABC):
    """Base class for all state managers.

    All subclasses must implement lifecycle methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


class WeatherViewStateHolder(StateManager):
    """Owns the weather view state and the commands that change it.

    The state is a single immutable WeatherViewState snapshot that is
    replaced on every transition and pushed to subscribers. Each command
    starts one background fetch; a new command never cancels one in flight.

    With discard_stale_responses enabled every fetch is tagged with an
    increasing request id and a response is dropped when a newer request has
    been dispatched since. With it disabled, whichever response arrives last
    wins.
    """

    def __init__(self, weather_client: WeatherClient, discard_stale_responses: bool = True):
        """Initialize the holder in the idle state.

        Args:
            weather_client: Client used for every fetch
            discard_stale_responses: Drop responses older than the latest dispatched request
        """
        self._weather_client = weather_client
        self._discard_stale_responses = discard_stale_responses
        self._state = WeatherViewState()
        self._listeners: list[StateListener] = []
        self._latest_request_id = 0
        self._tasks: set[asyncio.Task] = set()

    async def initialize(self) -> None:
        """Initialize the holder."""
        log_with_context(
            logger,
            "info",
            "Weather view state ready",
            discard_stale_responses=self._discard_stale_responses,
            event_type="view_state_ready",
        )

    async def cleanup(self) -> None:
        """Cancel fetches still in flight and drop subscribers."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._listeners.clear()

    # Observable fields

    @property
    def state(self) -> WeatherViewState:
        return self._state

    @property
    def result(self) -> WeatherRecord | None:
        return self._state.result

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error_message(self) -> str | None:
        return self._state.error_message

    @property
    def fetch_state(self) -> Idle | Loading | Success | Failed:
        return self._state.fetch_state

    @property
    def in_flight(self) -> int:
        """Number of fetches that have not completed yet."""
        return len(self._tasks)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every published snapshot.

        Args:
            listener: Callable receiving the new WeatherViewState

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Commands

    def fetch_by_city(self, name: str) -> asyncio.Task | None:
        """Start fetching weather for a city name.

        An empty or whitespace-only name is a no-op.

        Returns:
            The started fetch task, or None when nothing was started
        """
        if not name or not name.strip():
            log_with_context(logger, "debug", "Ignoring empty city name", event_type="fetch_ignored")
            return None
        return self._dispatch(CityNameQuery(name=name))

    def fetch_by_coordinates(self, lat: float, lon: float) -> asyncio.Task | None:
        """Start fetching weather for a coordinate pair.

        Out-of-range coordinates publish a failure straight away without
        touching the network, leaving the previous result in place.

        Returns:
            The started fetch task, or None when the coordinates were rejected
        """
        try:
            query = CoordinatesQuery(lat=lat, lon=lon)
        except ValidationError:
            error = InvalidQueryError(
                f"Invalid coordinates ({lat}, {lon}): latitude must be within ±90 and longitude within ±180",
                details={"lat": lat, "lon": lon},
            )
            log_with_context(
                logger,
                "warning",
                "Rejected coordinates",
                lat=lat,
                lon=lon,
                event_type="fetch_rejected",
            )
            # Supersedes any fetch still in flight
            self._latest_request_id += 1
            self._publish(self._state.failed(error.message, request_id=self._latest_request_id))
            return None
        return self._dispatch(query)

    async def wait_idle(self) -> None:
        """Wait until every fetch in flight has completed."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # Internals

    def _dispatch(self, query: CityNameQuery | CoordinatesQuery) -> asyncio.Task:
        self._latest_request_id += 1
        request_id = self._latest_request_id
        self._publish(self._state.loading(request_id))

        task = asyncio.create_task(self._run(request_id, query), name=f"weather-fetch-{request_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, request_id: int, query: CityNameQuery | CoordinatesQuery) -> None:
        outcome = await self._weather_client.fetch(query)

        if self._discard_stale_responses and request_id != self._latest_request_id:
            log_with_context(
                logger,
                "info",
                "Discarding stale weather response",
                request_id=request_id,
                latest_request_id=self._latest_request_id,
                event_type="stale_response_discarded",
            )
            return

        if outcome.record is not None:
            self._publish(self._state.succeeded(outcome.record, request_id))
        else:
            self._publish(self._state.failed(outcome.error.message, request_id))

    def _publish(self, new_state: WeatherViewState) -> None:
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                log_with_context(
                    logger,
                    "error",
                    "View state listener failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    event_type="listener_error",
                )
