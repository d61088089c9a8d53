"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .book_record import BookRecordEntity, SearchResultEntity
from .cache_entry import CacheEntryEntity
from .search_request import MAX_RESULTS_LIMIT, SearchRequestEntity

__all__ = [
    "BookRecordEntity",
    "CacheEntryEntity",
    "MAX_RESULTS_LIMIT",
    "SearchRequestEntity",
    "SearchResultEntity",
]
