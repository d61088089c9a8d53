"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract. Field names are
snake_case in Python and camelCase on the wire.

Internal domain logic should use entities from the entities package.
"""

from .requests import BookHoursRequest, CoverRequest, SearchBooksRequest
from .responses import (
    BookHoursResponse,
    BookResponse,
    BookSearchResponse,
    CoverResponse,
    HealthCheckResponse,
)

__all__ = [
    "SearchBooksRequest",
    "BookHoursRequest",
    "CoverRequest",
    "BookResponse",
    "BookSearchResponse",
    "BookHoursResponse",
    "CoverResponse",
    "HealthCheckResponse",
]
