"""Best-effort persistence of the in-memory caches.

A cache is stored as a single record under ``"<prefix>:v<version>:<name>"``
holding a JSON list of ``[key, {"data": ..., "timestamp": ...}]`` pairs, most
recently updated first. Loading never raises and saving never raises: a
missing, corrupt or unreachable store simply yields an empty cache.
"""

import asyncio
import json
import logging
import math
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Set

from .cache import CacheEntry, Clock, TTLCache
from .config import Settings

logger = logging.getLogger(__name__)

STORAGE_VERSION = 1
DEFAULT_MAX_ENTRIES = 12


class Storage(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileStorage:
    """One JSON file per record inside ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key.replace(':', '-')}.json"

    async def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    async def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        os.replace(tmp, path)


class RedisStorage:
    def __init__(self, url: str, client: Any = None):
        self.url = url
        self._client = client

    async def _get_redis(self):
        if self._client is None:
            import redis.asyncio as aioredis

            self._client = aioredis.from_url(self.url, encoding="utf-8", decode_responses=True)
        return self._client

    async def get(self, key: str) -> Optional[str]:
        r = await self._get_redis()
        return await r.get(key)

    async def set(self, key: str, value: str) -> None:
        r = await self._get_redis()
        await r.set(key, value)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def build_storage(settings: Settings) -> Storage:
    if settings.storage == "memory":
        return MemoryStorage()
    if settings.storage == "redis":
        if not settings.redis_url:
            raise ValueError("SKYCAST_STORAGE=redis requires REDIS_URL to be set")
        return RedisStorage(settings.redis_url)
    if settings.storage == "file":
        return FileStorage(settings.cache_dir)
    raise ValueError(f"Unknown storage backend: {settings.storage!r}")


def _identity(value: Any) -> Any:
    return value


class CacheStore:
    def __init__(self, storage: Storage, prefix: str = "skycast", version: int = STORAGE_VERSION):
        self.storage = storage
        self.prefix = prefix
        self.version = version
        self._pending: Set["asyncio.Task[None]"] = set()

    def record_key(self, name: str) -> str:
        return f"{self.prefix}:v{self.version}:{name}"

    async def load(
        self,
        name: str,
        ttl: float,
        decode: Callable[[Any], Any] = _identity,
        clock: Clock = time.time,
    ) -> TTLCache:
        """Read the ``name`` record into a fresh :class:`TTLCache`.

        Entries aged ``2 * ttl`` or more are dropped, as are entries stamped
        in the future or with a non-finite time, and entries that do not
        decode. Any storage or parse failure yields an empty cache.
        """
        cache: TTLCache = TTLCache(ttl, clock=clock)
        key = self.record_key(name)
        try:
            raw = await self.storage.get(key)
        except Exception as exc:
            logger.warning("Cache storage unavailable while loading %s: %r", key, exc)
            return cache
        if not raw:
            return cache

        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding corrupt cache record %s: %s", key, exc)
            return cache
        if not isinstance(records, list):
            logger.warning("Discarding cache record %s: unexpected shape", key)
            return cache

        now = clock()
        dropped = 0
        for item in records:
            try:
                entry_key, body = item
                timestamp = float(body["timestamp"])
                if not math.isfinite(timestamp) or timestamp > now or now - timestamp >= 2 * ttl:
                    dropped += 1
                    continue
                cache.put_entry(str(entry_key), CacheEntry(data=decode(body["data"]), timestamp=timestamp))
            except (TypeError, ValueError, KeyError) as exc:
                dropped += 1
                logger.debug("Skipping unreadable entry in %s: %r", key, exc)
        logger.info("Loaded %d cached entries from %s (dropped %d)", len(cache), key, dropped)
        return cache

    def dump(self, cache: TTLCache, max_entries: int = DEFAULT_MAX_ENTRIES,
             encode: Callable[[Any], Any] = _identity) -> str:
        payload = [
            [key, {"data": encode(entry.data), "timestamp": entry.timestamp}]
            for key, entry in cache.most_recent(max_entries)
        ]
        return json.dumps(payload)

    async def _write(self, key: str, value: str) -> None:
        try:
            await self.storage.set(key, value)
        except Exception as exc:
            logger.warning("Failed to persist cache record %s: %r", key, exc)

    async def save(self, cache: TTLCache, name: str, max_entries: int = DEFAULT_MAX_ENTRIES,
                   encode: Callable[[Any], Any] = _identity) -> None:
        key = self.record_key(name)
        try:
            value = self.dump(cache, max_entries, encode)
        except (TypeError, ValueError) as exc:
            logger.warning("Failed to serialize cache %s: %r", key, exc)
            return
        await self._write(key, value)

    def schedule_save(self, cache: TTLCache, name: str, max_entries: int = DEFAULT_MAX_ENTRIES,
                      encode: Callable[[Any], Any] = _identity) -> None:
        """Snapshot ``cache`` now and write it in a background task."""
        key = self.record_key(name)
        try:
            value = self.dump(cache, max_entries, encode)
        except (TypeError, ValueError) as exc:
            logger.warning("Failed to serialize cache %s: %r", key, exc)
            return
        task = asyncio.get_running_loop().create_task(self._write(key, value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending))
