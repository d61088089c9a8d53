"""Cache entry domain entity."""

from dataclasses import dataclass

from .book_record import SearchResultEntity


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached search result.

    Attributes:
        created_at: Clock reading (seconds) when the entry was stored
        value: The cached search result
    """

    created_at: float
    value: SearchResultEntity

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Check whether the entry is younger than ``ttl`` seconds at ``now``."""
        return now - self.created_at < ttl
