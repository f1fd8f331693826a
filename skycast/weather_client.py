"""Current conditions from the Open-Meteo forecast API."""

import logging
from typing import Any, Dict, Optional

import httpx

from .cache import TTLCache
from .config import FORECAST_URL
from .errors import UpstreamError
from .http_client import DEFAULT_TIMEOUT, get_json
from .models import Coordinates, CurrentWeather
from .storage import DEFAULT_MAX_ENTRIES, CacheStore
from .throttle import ThrottleLedger
from .weather_codes import translate

logger = logging.getLogger(__name__)

CACHE_NAME = "weather"


def coordinate_key(lat: float, lon: float) -> str:
    return f"{float(lat)!r},{float(lon)!r}"


def normalize_weather(payload: Dict[str, Any]) -> CurrentWeather:
    current = payload["current_weather"]
    hourly = payload.get("hourly")
    humidity_series = hourly.get("relativehumidity_2m") if isinstance(hourly, dict) else None
    if not isinstance(humidity_series, list):
        humidity_series = []
    return CurrentWeather(
        location=Coordinates(lat=float(payload["latitude"]), lon=float(payload["longitude"])),
        temp=current["temperature"],
        windspeed=current["windspeed"],
        winddirection=current["winddirection"],
        weathercode=current["weathercode"],
        time=current["time"],
        humidity=humidity_series[0] if humidity_series else None,
        description=translate(current["weathercode"]),
    )


class WeatherFetcher:
    def __init__(self, cache: TTLCache, ledger: ThrottleLedger, store: Optional[CacheStore] = None, *,
                 url: str = FORECAST_URL, timeout: float = DEFAULT_TIMEOUT,
                 client: Optional[httpx.AsyncClient] = None,
                 max_entries: int = DEFAULT_MAX_ENTRIES):
        self.cache = cache
        self.ledger = ledger
        self.store = store
        self.url = url
        self.timeout = timeout
        self.client = client
        self.max_entries = max_entries

    async def fetch(self, lat: float, lon: float) -> CurrentWeather:
        """Current weather at ``(lat, lon)``.

        Fresh cache hits are returned without consulting the throttle. On a
        miss the ledger may reject the call with :class:`RateLimited` before
        any request is made. The ledger is only updated after a successful
        fetch.
        """
        key = coordinate_key(lat, lon)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Weather cache hit for %s", key)
            return cached

        self.ledger.check(key)

        params = {
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
            "hourly": "relativehumidity_2m",
        }
        data = await get_json(self.url, params, timeout=self.timeout, client=self.client)
        try:
            weather = normalize_weather(data)
        except (TypeError, KeyError, ValueError, AttributeError) as e:
            raise UpstreamError(f"Malformed forecast payload for {key}") from e

        self.cache.set(key, weather)
        if self.store is not None:
            self.store.schedule_save(self.cache, CACHE_NAME, self.max_entries, encode=CurrentWeather.to_dict)
        self.ledger.record(key)
        logger.info("Fetched weather for %s: %s, %s", key, weather.temp, weather.description)
        return weather
