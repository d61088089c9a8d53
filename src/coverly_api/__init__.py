"""Coverly API - gateway for Google Books search and Toggl Track hours.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (ResultStore, UpstreamFetcher)
    - repositories: httpx upstream client, in-memory result cache
    - services: Business logic (search orchestration, Toggl, covers)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from coverly_api.services import BookSearchService

    books = BookSearchService.create()
    result = await books.search_books("clean code", max_results=5)
    ```

For HTTP API:
    ```python
    from coverly_api.api.app import app
    ```
"""

from coverly_api.config import settings
from coverly_api.dto import BookSearchResponse, SearchBooksRequest
from coverly_api.entities import BookRecordEntity, SearchRequestEntity, SearchResultEntity
from coverly_api.errors import ErrorKind, GatewayError, UpstreamError
from coverly_api.handlers import BooksHandler, TimeTrackingHandler
from coverly_api.protocols import ResultStore, UpstreamFetcher
from coverly_api.repositories import MemoryResultStore, UpstreamClient
from coverly_api.services import BookSearchService, CoverService, TimeTrackingService
from coverly_api.tls import TlsTrustConfig, build_tls_trust

__all__ = [
    # Configuration
    "settings",
    "TlsTrustConfig",
    "build_tls_trust",
    # Errors
    "ErrorKind",
    "GatewayError",
    "UpstreamError",
    # Protocols (interfaces)
    "ResultStore",
    "UpstreamFetcher",
    # Services (business logic)
    "BookSearchService",
    "CoverService",
    "TimeTrackingService",
    # Handlers (HTTP)
    "BooksHandler",
    "TimeTrackingHandler",
    # Repositories (data access)
    "MemoryResultStore",
    "UpstreamClient",
    # Entities (domain models)
    "BookRecordEntity",
    "SearchRequestEntity",
    "SearchResultEntity",
    # DTOs (API contracts)
    "BookSearchResponse",
    "SearchBooksRequest",
]
