from .errors import (
    InvalidInput,
    NetworkError,
    NotFound,
    RateLimited,
    RequestTimeout,
    SkycastError,
    UpstreamError,
)
from .models import Coordinates, CurrentWeather, Location
from .service import WeatherService
from .weather_codes import translate

__all__ = [
    "Coordinates",
    "CurrentWeather",
    "InvalidInput",
    "Location",
    "NetworkError",
    "NotFound",
    "RateLimited",
    "RequestTimeout",
    "SkycastError",
    "UpstreamError",
    "WeatherService",
    "translate",
]
