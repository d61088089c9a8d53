"""Book search service.

This service orchestrates one search: it normalizes the request, consults
the result cache, calls Google Books with bounded retries, maps the payload
and stores the mapped result. Failures leave it only as GatewayError.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from coverly_api.config import Settings, settings as default_settings
from coverly_api.entities import SearchRequestEntity, SearchResultEntity
from coverly_api.entities.search_request import OrderBy
from coverly_api.errors import ErrorKind, to_gateway_error
from coverly_api.protocols import ResultStore, UpstreamFetcher
from coverly_api.repositories import MemoryResultStore, UpstreamClient
from coverly_api.tls import build_tls_trust
from coverly_api.utils import with_retry

from .volume_mapper import map_search_result

logger = logging.getLogger(__name__)

BOOK_SEARCH_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNAUTHORIZED: "Google Books API rejected the request credentials.",
    ErrorKind.BAD_REQUEST: "Google Books API rejected the search request ({status}).",
    ErrorKind.OVERLOADED: "Too many requests to Google Books API",
    ErrorKind.UPSTREAM_UNAVAILABLE: "Google Books API is temporarily unavailable.",
    ErrorKind.TIMEOUT: "Request timeout",
    ErrorKind.NETWORK_UNREACHABLE: "Google Books API is unreachable from this network.",
    ErrorKind.TLS_VALIDATION_FAILED: (
        "SSL certificate validation failed for Google Books API. "
        "Supply the proxy CA bundle with GOOGLE_BOOKS_CA_FILE or GOOGLE_BOOKS_CA_CERT, "
        "or set GOOGLE_BOOKS_REJECT_UNAUTHORIZED=false to disable verification."
    ),
    ErrorKind.UNKNOWN: "Failed to search books",
}


class BookSearchService:
    """Cached, retrying front for the Google Books volumes endpoint.

    This service depends on PROTOCOLS, not concrete implementations:
    - UpstreamFetcher: performs the HTTP GET
    - ResultStore: holds recent results keyed on the normalized request

    Example:
        ```python
        from coverly_api.services import BookSearchService

        # Create from settings (httpx client + in-memory cache)
        books = BookSearchService.create()
        result = await books.search_books("clean code", max_results=5)

        # Or with custom implementations
        books = BookSearchService(
            fetcher=FakeFetcher(),
            result_store=MemoryResultStore(ttl=60.0),
            api_url="https://www.googleapis.com/books/v1/volumes",
        )
        ```
    """

    def __init__(
        self,
        fetcher: UpstreamFetcher,
        result_store: ResultStore,
        api_url: str | None = None,
        max_attempts: int = 3,
        initial_delay: float = 0.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the book search service.

        Args:
            fetcher: HTTP client for Google Books (required).
            result_store: Result cache owned by this service (required).
            api_url: Volumes endpoint. Defaults to settings.
            max_attempts: Upstream attempts per search, first one included.
            initial_delay: Backoff before the second attempt, in seconds.
            sleep: Async sleep used between attempts.
        """
        self._fetcher = fetcher
        self._cache = result_store
        self._api_url = api_url or default_settings.google_books_api_url
        self._max_attempts = max_attempts
        self._initial_delay = initial_delay
        self._sleep = sleep

    @classmethod
    def create(cls, settings: Settings | None = None) -> "BookSearchService":
        """Factory method wiring the service from configuration.

        Builds the TLS policy once, one pooled UpstreamClient and a fresh
        MemoryResultStore.

        Args:
            settings: Settings to read. Defaults to the global settings.

        Returns:
            Configured BookSearchService
        """
        settings = settings or default_settings
        tls = build_tls_trust(
            reject_unauthorized=settings.google_books_reject_unauthorized,
            ca_file=settings.google_books_ca_file,
            ca_cert=settings.google_books_ca_cert,
            label="Google Books",
        )
        fetcher = UpstreamClient.create(
            tls=tls,
            timeout=settings.google_books_timeout,
            name="Google Books API",
        )
        return cls(
            fetcher=fetcher,
            result_store=MemoryResultStore(ttl=settings.books_cache_ttl),
            api_url=settings.google_books_api_url,
        )

    @property
    def fetcher(self) -> UpstreamFetcher:
        return self._fetcher

    @property
    def result_store(self) -> ResultStore:
        return self._cache

    async def search_books(
        self,
        query: str,
        order_by: OrderBy | None = None,
        start_index: int | None = None,
        max_results: int | None = None,
    ) -> SearchResultEntity:
        """Search Google Books.

        Business logic:
        1. Normalize the request (defaults, cap maxResults at 40)
        2. Return the cached result if one is fresh
        3. Otherwise fetch with retries, map, cache and return

        Query validation (non-empty) belongs to the caller.

        Args:
            query: Search phrase
            order_by: "relevance" (default) or "newest"
            start_index: Index of the first result (default 0)
            max_results: Page size (default 10, capped at 40)

        Returns:
            SearchResultEntity

        Raises:
            GatewayError: Classified upstream failure
        """
        request = SearchRequestEntity.create(query, order_by, start_index, max_results)
        key = request.cache_key

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        logger.info(
            "Searching books with query: %s, orderBy: %s, startIndex: %s, maxResults: %s",
            request.query,
            request.order_by,
            request.start_index,
            request.max_results,
        )

        try:
            payload = await with_retry(
                lambda: self._fetcher.get_json(self._api_url, params=request.to_query_params()),
                max_attempts=self._max_attempts,
                initial_delay=self._initial_delay,
                sleep=self._sleep,
            )
        except Exception as e:
            error = to_gateway_error(e, BOOK_SEARCH_MESSAGES)
            logger.error("Failed to search books (%s)", error.kind.value, exc_info=e)
            if error is e:
                raise
            raise error from e

        result = map_search_result(payload)
        self._cache.put(key, result)
        logger.info("Found %d books", len(result.items))
        return result

    async def close(self) -> None:
        """Release the upstream client's connections."""
        await self._fetcher.close()

