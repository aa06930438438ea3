"""City Weather App"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("city-weather")
except PackageNotFoundError:
    __version__ = "dev"
