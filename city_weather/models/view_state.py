"""View state published by the weather view-state holder."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from city_weather.models.weather import WeatherRecord


class Idle(BaseModel):
    """Nothing fetched yet."""

    status: Literal["idle"] = "idle"


class Loading(BaseModel):
    """A fetch is in flight."""

    status: Literal["loading"] = "loading"


class Success(BaseModel):
    """Latest fetch produced a record."""

    status: Literal["success"] = "success"
    record: WeatherRecord


class Failed(BaseModel):
    """Latest fetch failed."""

    status: Literal["failed"] = "failed"
    message: str


FetchState = Annotated[Idle | Loading | Success | Failed, Field(discriminator="status")]


class WeatherViewState(BaseModel):
    """Immutable snapshot of the three observable fields.

    A new snapshot replaces the previous one on every transition. The
    transition helpers keep the fields mutually consistent: loading always
    clears the error, and a finished fetch always clears loading.
    """

    model_config = ConfigDict(frozen=True)

    result: WeatherRecord | None = None
    is_loading: bool = False
    error_message: str | None = None
    request_id: int = Field(default=0, ge=0, description="Id of the request that produced this snapshot")

    @model_validator(mode="after")
    def check_loading_has_no_error(self) -> "WeatherViewState":
        if self.is_loading and self.error_message is not None:
            raise ValueError("a loading state cannot carry an error message")
        return self

    @property
    def fetch_state(self) -> Idle | Loading | Success | Failed:
        """Collapse the fields into exactly one fetch state."""
        if self.is_loading:
            return Loading()
        if self.error_message is not None:
            return Failed(message=self.error_message)
        if self.result is not None:
            return Success(record=self.result)
        return Idle()

    def loading(self, request_id: int) -> "WeatherViewState":
        return WeatherViewState(result=self.result, is_loading=True, error_message=None, request_id=request_id)

    def succeeded(self, record: WeatherRecord, request_id: int) -> "WeatherViewState":
        return WeatherViewState(result=record, is_loading=False, error_message=None, request_id=request_id)

    def failed(self, message: str, request_id: int) -> "WeatherViewState":
        # The previous result stays visible next to the error
        return WeatherViewState(result=self.result, is_loading=False, error_message=message, request_id=request_id)
