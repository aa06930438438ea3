"""Pure rendering of the weather view state into a screen description.

The screen description is what the templates draw. Building it never
touches the network or the holder, so it is recomputed on every request.
"""

from pydantic import BaseModel

from city_weather.config import OPENWEATHER_ICON_BASE_URL
from city_weather.models.view_state import WeatherViewState
from city_weather.models.weather import WeatherRecord

PLACEHOLDER = "N/A"

TEMPERATURE_UNITS = {"imperial": "°F", "metric": "°C", "standard": "K"}
WIND_SPEED_UNITS = {"imperial": "mph", "metric": "m/s", "standard": "m/s"}


class DetailLine(BaseModel):
    """One "label: value" line of the weather details."""

    label: str
    value: str


class WeatherScreen(BaseModel):
    """Everything the weather page shows for one view state."""

    title: str = "My Weather App"
    city_input: str = ""
    input_label: str = "Enter US city name"
    city_button_label: str = "Get Weather by City"
    location_button_label: str = "Use Current Location"
    show_spinner: bool = False
    error_message: str | None = None
    details: list[DetailLine] = []
    icon_url: str | None = None


def format_number(value: float | None, suffix: str = "") -> str:
    """Format an optional number, dropping a trailing .0 on whole values."""
    if value is None:
        return PLACEHOLDER
    text = str(int(value)) if float(value).is_integer() else str(value)
    return f"{text} {suffix}".rstrip()


def detail_lines(record: WeatherRecord, units: str = "imperial") -> list[DetailLine]:
    """Build the field-by-field rendering of a record, with placeholders for gaps."""
    return [
        DetailLine(label="City", value=record.location or PLACEHOLDER),
        DetailLine(label="Temperature", value=format_number(record.temp, TEMPERATURE_UNITS.get(units, ""))),
        DetailLine(label="Humidity", value=format_number(record.humidity, "%")),
        DetailLine(label="Weather", value=record.description or PLACEHOLDER),
        DetailLine(label="Wind Speed", value=format_number(record.wind_speed, WIND_SPEED_UNITS.get(units, ""))),
        DetailLine(label="Wind Degree", value=format_number(record.wind_deg, "°")),
        DetailLine(label="Pressure", value=format_number(record.pressure, "hPa")),
    ]


def render_weather_screen(
    state: WeatherViewState,
    city_input: str = "",
    units: str = "imperial",
    icon_base_url: str = OPENWEATHER_ICON_BASE_URL,
) -> WeatherScreen:
    """Render a view state.

    While loading only the spinner shows. Otherwise the error shows when
    present, and the record's details show when a record is present.
    """
    if state.is_loading:
        return WeatherScreen(city_input=city_input, show_spinner=True)

    if state.result is None:
        return WeatherScreen(city_input=city_input, error_message=state.error_message)

    return WeatherScreen(
        city_input=city_input,
        error_message=state.error_message,
        details=detail_lines(state.result, units),
        icon_url=state.result.icon_url(icon_base_url),
    )
