"""One-shot toast notifications for fetch errors."""

from collections import deque
from datetime import UTC, datetime

from pydantic import BaseModel

from city_weather.models.view_state import WeatherViewState


class Notification(BaseModel):
    """A transient message shown to the user once."""

    message: str
    created_at: datetime


class ErrorNotifier:
    """Turns changes of the error message into toast notifications.

    A toast is queued each time error_message changes to a non-empty value,
    so an unchanged error re-rendered many times produces a single toast.
    The same message reported again after a successful or loading state
    counts as a new change.
    """

    def __init__(self, max_pending: int = 10):
        self._last_error: str | None = None
        self._pending: deque[Notification] = deque(maxlen=max_pending)

    def __call__(self, state: WeatherViewState) -> None:
        """Listener entry point for WeatherViewStateHolder.subscribe()."""
        message = state.error_message
        if message != self._last_error and message:
            self._pending.append(Notification(message=message, created_at=datetime.now(UTC)))
        self._last_error = message

    def drain(self) -> list[Notification]:
        """Hand out the queued notifications; each is returned exactly once."""
        notifications = list(self._pending)
        self._pending.clear()
        return notifications

    @property
    def pending(self) -> int:
        return len(self._pending)
