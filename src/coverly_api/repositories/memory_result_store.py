"""In-memory implementation of ResultStore with time-based expiry."""

import time
from collections.abc import Callable

from coverly_api.entities import CacheEntryEntity, SearchResultEntity

DEFAULT_TTL_SECONDS = 60.0


class MemoryResultStore:
    """Dict-backed result cache with lazy expiry.

    This class satisfies the ResultStore protocol through structural
    typing. Entries older than ``ttl`` read as absent but stay in the dict
    until the next ``put`` for the same key overwrites them. The store is
    unbounded: search phrases form a small keyspace over a process lifetime.

    No lock is taken. All access happens on the event loop thread and
    ``get``/``put`` never await.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the store.

        Args:
            ttl: Entry lifetime in seconds.
            clock: Monotonic time source in seconds, replaceable in tests.
        """
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntryEntity] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> SearchResultEntity | None:
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock(), self._ttl):
            return None
        return entry.value

    def put(self, key: str, value: SearchResultEntity) -> None:
        self._entries[key] = CacheEntryEntity(created_at=self._clock(), value=value)

    def clear(self) -> int:
        """Drop every entry.

        Returns:
            Number of entries removed
        """
        count = len(self._entries)
        self._entries.clear()
        return count

    def __len__(self) -> int:
        return len(self._entries)
