"""Main FastAPI application entry point."""

from pathlib import Path

from dotenv import load_dotenv

from city_weather.core.app_factory import create_app
from city_weather.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

# Settings are validated by the factory before logging is configured from them
app = create_app()

# Configure structured logging (JSON to file + console)
setup_logging(app.state.settings.log_level)


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run(
        "city_weather.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
