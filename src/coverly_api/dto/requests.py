"""Request DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SearchBooksRequest(BaseModel):
    """Query parameters of GET /books/search.

    Omitted optional values stay None so the service applies its own defaults.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    q: str = Field(..., description="Search phrase")
    order_by: Literal["relevance", "newest"] | None = Field(None, description="Sort order")
    start_index: int | None = Field(None, description="Index of the first result", ge=0)
    max_results: int | None = Field(None, description="Page size", ge=1, le=40)


class BookHoursRequest(BaseModel):
    """Query parameters of GET /toggl/books."""

    title: str = Field(..., description="Book title to match in time entry descriptions", min_length=1)


class CoverRequest(BaseModel):
    """Query parameters of GET /books/cover."""

    url: str = Field(..., description="Absolute URL of the cover image", min_length=1)
