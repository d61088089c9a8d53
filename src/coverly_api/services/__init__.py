"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Upstream APIs, cache)

Usage:
    ```python
    from coverly_api.services import BookSearchService

    books = BookSearchService.create()
    result = await books.search_books("clean code")
    ```
"""

from .book_search_service import BOOK_SEARCH_MESSAGES, BookSearchService
from .cover_service import CoverImage, CoverService
from .time_tracking_service import TimeTrackingService
from .volume_mapper import map_search_result, map_volume

__all__ = [
    "BOOK_SEARCH_MESSAGES",
    "BookSearchService",
    "CoverImage",
    "CoverService",
    "TimeTrackingService",
    "map_search_result",
    "map_volume",
]
