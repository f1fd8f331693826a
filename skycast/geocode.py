"""Place-name lookup via the Open-Meteo geocoding API.

Free, no API key required.
API docs: https://open-meteo.com/en/docs/geocoding-api
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .cache import TTLCache
from .config import GEOCODE_URL
from .errors import InvalidInput, NotFound, UpstreamError
from .http_client import DEFAULT_TIMEOUT, get_json
from .models import Location
from .storage import DEFAULT_MAX_ENTRIES, CacheStore

logger = logging.getLogger(__name__)

CACHE_NAME = "geocode"


def cache_key(query: str) -> str:
    return query.strip().lower()


def format_label(result: Dict[str, Any]) -> str:
    parts = [result["name"]]
    if result.get("admin1"):
        parts.append(result["admin1"])
    parts.append(result.get("country_code", ""))
    return ", ".join(parts)


def normalize_geocode(result: Dict[str, Any]) -> Location:
    return Location(
        lat=float(result["latitude"]),
        lon=float(result["longitude"]),
        label=format_label(result),
    )


class GeocodeResolver:
    def __init__(self, cache: TTLCache, store: Optional[CacheStore] = None, *,
                 url: str = GEOCODE_URL, timeout: float = DEFAULT_TIMEOUT,
                 client: Optional[httpx.AsyncClient] = None,
                 max_entries: int = DEFAULT_MAX_ENTRIES):
        self.cache = cache
        self.store = store
        self.url = url
        self.timeout = timeout
        self.client = client
        self.max_entries = max_entries

    async def resolve(self, query: str) -> Location:
        """Resolve a free-text place name to a :class:`Location`.

        A fresh cache entry is returned without touching the network.

        Raises:
            InvalidInput: ``query`` is blank.
            NotFound: the service had no match.
            RequestTimeout, NetworkError, UpstreamError: the lookup failed.
        """
        key = cache_key(query or "")
        if not key:
            raise InvalidInput("Query must not be empty")

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Geocode cache hit for %r", key)
            return cached

        params = {"name": query.strip(), "count": 1, "language": "en", "format": "json"}
        data = await get_json(self.url, params, timeout=self.timeout, client=self.client)

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            raise NotFound(query.strip())
        try:
            location = normalize_geocode(results[0])
        except (TypeError, KeyError, ValueError) as e:
            raise UpstreamError(f"Malformed geocoding result for '{query.strip()}'") from e

        self.cache.set(key, location)
        if self.store is not None:
            self.store.schedule_save(self.cache, CACHE_NAME, self.max_entries, encode=Location.to_dict)
        logger.info("Resolved %r to %s (%s, %s)", key, location.label, location.lat, location.lon)
        return location
