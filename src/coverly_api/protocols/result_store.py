"""Search result cache protocol."""

from typing import Protocol, runtime_checkable

from coverly_api.entities import SearchResultEntity


@runtime_checkable
class ResultStore(Protocol):
    """Protocol for search result caches.

    Implementations must never raise from ``get`` or ``put``: a miss is a
    normal outcome.
    """

    def get(self, key: str) -> SearchResultEntity | None:
        """Return the cached result for ``key``, or None if absent or expired.

        Args:
            key: Cache key built from the normalized request

        Returns:
            The cached SearchResultEntity, or None
        """
        ...

    def put(self, key: str, value: SearchResultEntity) -> None:
        """Store ``value`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key built from the normalized request
            value: Search result to cache
        """
        ...
