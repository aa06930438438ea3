from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent  # city-weather/

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
OPENWEATHER_ICON_BASE_URL = "https://openweathermap.org/img/wn"


class Settings(BaseSettings):
    """Application settings with validation.

    The OpenWeatherMap API key is required and must be provided via an
    environment variable or the .env file. Everything else has a default.
    """

    # Web server
    api_host: str = Field(default="127.0.0.1", min_length=1, description="Server host (e.g., '0.0.0.0')")
    api_port: int = Field(ge=1, le=65535, default=8000, description="Server port")

    # Weather provider
    weather_api_key: str = Field(min_length=1, description="OpenWeatherMap API key")
    weather_api_url: str = Field(
        default=OPENWEATHER_URL,
        pattern=r"^https?://",
        description="OpenWeatherMap current weather endpoint",
    )
    weather_icon_base_url: str = Field(
        default=OPENWEATHER_ICON_BASE_URL,
        pattern=r"^https?://",
        description="Base URL for condition icons",
    )
    weather_units: Literal["standard", "metric", "imperial"] = Field(
        default="imperial", description="Unit system requested from the provider"
    )
    weather_request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Root log level for console output"
    )

    # View state
    discard_stale_responses: bool = Field(
        default=True,
        description="Drop responses that belong to a request older than the latest dispatched one",
    )

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("api_host", mode="after")
    @classmethod
    def validate_api_host(cls, v: str) -> str:
        """Ensure api_host is not empty or whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("api_host cannot be empty")
        return v

    @field_validator("weather_api_key", mode="after")
    @classmethod
    def validate_weather_api_key(cls, v: str) -> str:
        """Ensure the API key is not whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("weather_api_key must not be empty")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("weather_icon_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


# Singleton settings instance
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Avoids re-reading the .env file on every request. Use with FastAPI's
    Depends().

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
