import logging
import math
import time
from typing import Dict

from .cache import Clock
from .errors import RateLimited

logger = logging.getLogger(__name__)

MIN_INTERVAL = 15.0


class ThrottleLedger:
    """Per-key minimum interval between successful upstream fetches.

    Only successful network fetches are recorded; a rejected or failed
    attempt leaves the ledger untouched. The ledger lives in memory for the
    lifetime of the process and is never persisted, so it measures time with
    a monotonic clock rather than the wall clock used by the caches.

    Args:
        min_interval: Minimum seconds between fetches for the same key.
        clock: Source of the current time in seconds (default
            :func:`time.monotonic`).
    """

    __slots__ = ("_clock", "_last_fetch", "min_interval")

    def __init__(self, min_interval: float = MIN_INTERVAL, clock: Clock = time.monotonic) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._last_fetch: Dict[str, float] = {}

    def remaining(self, key: str) -> float:
        """Seconds until ``key`` may be fetched again, ``0.0`` if allowed now."""
        last = self._last_fetch.get(key)
        if last is None:
            return 0.0
        return max(0.0, self.min_interval - (self._clock() - last))

    def check(self, key: str) -> None:
        """Raise :class:`RateLimited` if ``key`` was fetched too recently."""
        wait = self.remaining(key)
        if wait > 0:
            retry_after = math.ceil(wait)
            logger.info("Throttled fetch for %s; %ss remaining", key, retry_after)
            raise RateLimited(key, retry_after)

    def record(self, key: str) -> None:
        now = self._clock()
        expired = [k for k, t in self._last_fetch.items() if now - t >= self.min_interval]
        for k in expired:
            del self._last_fetch[k]
        self._last_fetch[key] = now

    def __len__(self) -> int:
        return len(self._last_fetch)

    def reset(self) -> None:
        """Forget every recorded fetch (useful for testing)."""
        self._last_fetch.clear()
