"""In-memory TTL cache for read-side data loads."""
import time
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from typing import TypeVar

import structlog

logger = structlog.get_logger('cache')

T = TypeVar('T')

DEFAULT_TTL = 60 * 60  # 1 hour in seconds


@dataclass
class CacheEntry:
    value: Any
    written_at: float
    ttl: float

    def is_live(self, now: float) -> bool:
        return now - self.written_at < self.ttl


class TTLCache:
    """
    Keyed memoization of coroutine results with a per-entry TTL.

    Expired entries are treated as absent and replaced on the next miss;
    nothing is swept eagerly. Concurrent misses on the same key are not
    de-duplicated: every caller that misses awaits its own producer, and the
    last result to arrive is the one stored.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    async def get(
        self,
        key: str,
        producer: Callable[[], Awaitable[T]],
        ttl: float | None = None,
    ) -> T:
        entry = self._entries.get(key)
        if entry is not None and entry.is_live(self._clock()):
            logger.debug('Cache hit', key=key)
            return entry.value

        logger.debug('Cache miss', key=key)
        # Producer errors propagate and leave the slot untouched
        value = await producer()
        self._entries[key] = CacheEntry(
            value=value,
            written_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )
        return value

    def clear(self) -> None:
        self._entries.clear()
        logger.debug('Cache cleared')

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.is_live(self._clock())

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if entry.is_live(now))
