"""Caller-facing entry point owning the caches, the ledger and the HTTP client."""

import logging
import time
from typing import Optional, Tuple

import httpx

from . import geocode, weather_client
from .cache import Clock, TTLCache
from .config import Settings, get_settings
from .geocode import GeocodeResolver
from .models import CurrentWeather, Location
from .storage import CacheStore, MemoryStorage, Storage, build_storage
from .throttle import ThrottleLedger
from .weather_client import WeatherFetcher

logger = logging.getLogger(__name__)


class WeatherService:
    """Resolve places and fetch current weather through the shared caches.

    Build one instance at startup, call :meth:`start` (or use it as an async
    context manager) and share it. The caches and the ledger are plain
    in-process state: use the service from a single event loop.

    Overlapping calls for the same key are not deduplicated. If a caller
    issues a second request before the first completes, both may reach the
    network; the later success overwrites the cache entry and re-records the
    ledger. Callers are expected to debounce their own triggers.
    """

    def __init__(self, settings: Optional[Settings] = None, storage: Optional[Storage] = None,
                 client: Optional[httpx.AsyncClient] = None, clock: Clock = time.time,
                 ledger_clock: Clock = time.monotonic):
        self.settings = settings or get_settings()
        self.clock = clock
        self.store = CacheStore(storage if storage is not None else build_storage(self.settings))
        self._owns_client = client is None
        # created by start() when not injected
        self.client = client
        self.ledger = ThrottleLedger(self.settings.min_interval, clock=ledger_clock)
        self.geocoder = GeocodeResolver(
            TTLCache(self.settings.geocode_ttl, clock=clock),
            self.store,
            url=self.settings.geocode_url,
            timeout=self.settings.http_timeout,
            client=self.client,
            max_entries=self.settings.cache_max_entries,
        )
        self.fetcher = WeatherFetcher(
            TTLCache(self.settings.weather_ttl, clock=clock),
            self.ledger,
            self.store,
            url=self.settings.forecast_url,
            timeout=self.settings.http_timeout,
            client=self.client,
            max_entries=self.settings.cache_max_entries,
        )

    @classmethod
    def in_memory(cls, settings: Optional[Settings] = None, **kwargs) -> "WeatherService":
        return cls(settings=settings, storage=MemoryStorage(), **kwargs)

    def _use_client(self, client: Optional[httpx.AsyncClient]) -> None:
        self.client = client
        self.geocoder.client = client
        self.fetcher.client = client

    async def start(self) -> None:
        if self.client is None:
            self._use_client(httpx.AsyncClient())
        self.geocoder.cache = await self.store.load(
            geocode.CACHE_NAME, self.settings.geocode_ttl, decode=Location.from_dict, clock=self.clock
        )
        self.fetcher.cache = await self.store.load(
            weather_client.CACHE_NAME, self.settings.weather_ttl, decode=CurrentWeather.from_dict, clock=self.clock
        )

    async def aclose(self) -> None:
        await self.store.drain()
        if self._owns_client and self.client is not None:
            await self.client.aclose()
            self._use_client(None)
        close = getattr(self.store.storage, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "WeatherService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def resolve_location(self, query: str) -> Location:
        return await self.geocoder.resolve(query)

    async def get_weather(self, lat: float, lon: float) -> CurrentWeather:
        return await self.fetcher.fetch(lat, lon)

    async def weather_for(self, query: str) -> Tuple[Location, CurrentWeather]:
        location = await self.resolve_location(query)
        weather = await self.get_weather(location.lat, location.lon)
        return location, weather

    def clear_caches(self) -> None:
        self.geocoder.cache.clear()
        self.fetcher.cache.clear()
        logger.info("In-memory caches cleared")
