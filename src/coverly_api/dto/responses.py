"""Response DTOs for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from coverly_api.entities import BookRecordEntity, SearchResultEntity


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookResponse(_CamelModel):
    """One book in a search response."""

    id: str = Field(..., description="Google Books volume id")
    title: str = Field(..., description="Volume title")
    authors: list[str] = Field(..., description="Author names")
    publisher: str = Field(..., description="Publisher name")
    published_date: str = Field(..., description="Publication date as given by Google Books")
    page_count: int = Field(..., description="Number of pages (0 if unknown)", ge=0)
    description: str | None = Field(None, description="Volume description")
    thumbnail: str | None = Field(None, description="Cover thumbnail URL")

    @classmethod
    def from_entity(cls, book: BookRecordEntity) -> "BookResponse":
        return cls(
            id=book.id,
            title=book.title,
            authors=list(book.authors),
            publisher=book.publisher,
            published_date=book.published_date,
            page_count=max(0, book.page_count),
            description=book.description,
            thumbnail=book.thumbnail,
        )


class BookSearchResponse(_CamelModel):
    """Response DTO for book search."""

    total_items: int = Field(..., description="Total matches reported by Google Books", ge=0)
    items: list[BookResponse] = Field(default_factory=list, description="Books in upstream order")

    @classmethod
    def from_entity(cls, result: SearchResultEntity) -> "BookSearchResponse":
        return cls(
            total_items=max(0, result.total_items),
            items=[BookResponse.from_entity(book) for book in result.items],
        )


class BookHoursResponse(BaseModel):
    """Response DTO for tracked reading hours."""

    hours: float = Field(..., description="Tracked hours, rounded to two decimals", ge=0.0)


class CoverResponse(_CamelModel):
    """Response DTO for the cover proxy."""

    data_url: str = Field(..., description="data: URL with the base64-encoded image")


class HealthCheckResponse(_CamelModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy'")
    cached_searches: int = Field(..., description="Entries currently held by the search cache", ge=0)
    toggl_configured: bool = Field(..., description="Whether Toggl Track credentials are set")
