import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float


class TTLCache(Generic[T]):
    """Key -> :class:`CacheEntry` map whose entries expire after ``ttl`` seconds.

    Entries are replaced wholesale on refresh. Expired entries stay in the map
    until they reach twice the TTL, the age at which a persisted copy would
    be dropped on load, and are pruned on the next :meth:`set`. :meth:`get`
    never returns them.
    """

    def __init__(self, ttl: float, clock: Clock = time.time):
        self.ttl = ttl
        self._clock = clock
        self._store: Dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._store)

    def is_fresh(self, entry: CacheEntry[T]) -> bool:
        return self._clock() - entry.timestamp < self.ttl

    def get(self, key: str) -> Optional[T]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if not self.is_fresh(entry):
            logger.debug("cache entry %r is stale", key)
            return None
        return entry.data

    def get_entry(self, key: str) -> Optional[CacheEntry[T]]:
        return self._store.get(key)

    def set(self, key: str, value: T) -> CacheEntry[T]:
        self.prune()
        entry = CacheEntry(data=value, timestamp=self._clock())
        self._store[key] = entry
        return entry

    def prune(self) -> int:
        """Drop entries aged ``2 * ttl`` or more; returns how many were dropped."""
        cutoff = self._clock() - 2 * self.ttl
        expired = [k for k, e in self._store.items() if e.timestamp <= cutoff]
        for k in expired:
            del self._store[k]
        return len(expired)

    def put_entry(self, key: str, entry: CacheEntry[T]) -> None:
        self._store[key] = entry

    def clear(self) -> None:
        self._store.clear()

    def most_recent(self, limit: int) -> List[Tuple[str, CacheEntry[T]]]:
        ordered = sorted(self._store.items(), key=lambda kv: kv[1].timestamp, reverse=True)
        return ordered[: max(0, limit)]
