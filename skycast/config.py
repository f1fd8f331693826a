import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

GEOCODE_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


@dataclass
class Settings:
    geocode_url: str
    forecast_url: str
    http_timeout: float
    geocode_ttl: float
    weather_ttl: float
    min_interval: float
    cache_max_entries: int
    storage: str
    cache_dir: Path
    redis_url: Optional[str]
    log_level: str


def get_settings() -> Settings:
    return Settings(
        geocode_url=os.getenv("SKYCAST_GEOCODE_URL", GEOCODE_URL),
        forecast_url=os.getenv("SKYCAST_FORECAST_URL", FORECAST_URL),
        http_timeout=float(os.getenv("SKYCAST_HTTP_TIMEOUT", "8")),
        geocode_ttl=float(os.getenv("SKYCAST_GEOCODE_TTL", str(24 * 60 * 60))),
        weather_ttl=float(os.getenv("SKYCAST_WEATHER_TTL", str(10 * 60))),
        min_interval=float(os.getenv("SKYCAST_MIN_INTERVAL", "15")),
        cache_max_entries=int(os.getenv("SKYCAST_CACHE_MAX_ENTRIES", "12")),
        storage=os.getenv("SKYCAST_STORAGE", "file").lower(),
        cache_dir=Path(os.getenv("SKYCAST_CACHE_DIR", str(Path.home() / ".cache" / "skycast"))),
        redis_url=os.getenv("REDIS_URL"),
        log_level=os.getenv("SKYCAST_LOG_LEVEL", "INFO").upper(),
    )
