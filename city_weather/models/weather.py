"""Pydantic models for weather queries and weather data."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from city_weather.config import OPENWEATHER_ICON_BASE_URL

# Queries


class CityNameQuery(BaseModel):
    """Current weather for a city name, e.g. "Columbus"."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["city"] = "city"
    name: str = Field(min_length=1, description="City name as typed by the user")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    def to_params(self) -> dict[str, str]:
        return {"q": self.name}

    def describe(self) -> str:
        return f"city '{self.name}'"


class CoordinatesQuery(BaseModel):
    """Current weather for a latitude/longitude pair."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["coordinates"] = "coordinates"
    lat: float = Field(ge=-90, le=90, description="Latitude in degrees")
    lon: float = Field(ge=-180, le=180, description="Longitude in degrees")

    def to_params(self) -> dict[str, str]:
        return {"lat": str(self.lat), "lon": str(self.lon)}

    def describe(self) -> str:
        return f"coordinates ({self.lat}, {self.lon})"


WeatherQuery = Annotated[CityNameQuery | CoordinatesQuery, Field(discriminator="kind")]


# Raw OpenWeatherMap response. Every object and field may be missing.


class WeatherCondition(BaseModel):
    """Weather condition entry from OpenWeatherMap."""

    id: int | None = None
    main: str | None = None
    description: str | None = None
    icon: str | None = None


class MainInfo(BaseModel):
    """Main weather metrics from OpenWeatherMap."""

    temp: float | None = None
    feels_like: float | None = None
    pressure: float | None = None
    humidity: float | None = None


class WindInfo(BaseModel):
    """Wind information from OpenWeatherMap."""

    speed: float | None = None
    deg: float | None = None
    gust: float | None = None


class CurrentWeather(BaseModel):
    """Raw OpenWeatherMap current weather response."""

    name: str | None = None
    main: MainInfo | None = None
    weather: list[WeatherCondition] | None = None
    wind: WindInfo | None = None


# Parsed record


class WeatherRecord(BaseModel):
    """Current conditions for one location, as shown to the user."""

    model_config = ConfigDict(frozen=True)

    location: str | None = None
    temp: float | None = None
    humidity: float | None = None
    pressure: float | None = None
    wind_speed: float | None = None
    wind_deg: float | None = None
    description: str | None = None
    icon: str | None = None

    def icon_url(self, base_url: str = OPENWEATHER_ICON_BASE_URL) -> str | None:
        """Get the large OpenWeatherMap icon URL, or None when there is no icon."""
        if not self.icon:
            return None
        return f"{base_url.rstrip('/')}/{self.icon}@4x.png"

    @classmethod
    def from_openweather(cls, data: CurrentWeather) -> "WeatherRecord":
        """Create a WeatherRecord from OpenWeatherMap data.

        Only the first condition entry is used, as the provider lists the
        primary condition first.
        """
        condition = data.weather[0] if data.weather else None
        return cls(
            location=data.name,
            temp=data.main.temp if data.main else None,
            humidity=data.main.humidity if data.main else None,
            pressure=data.main.pressure if data.main else None,
            wind_speed=data.wind.speed if data.wind else None,
            wind_deg=data.wind.deg if data.wind else None,
            description=condition.description if condition else None,
            icon=condition.icon if condition else None,
        )
