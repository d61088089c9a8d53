"""Book record domain entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BookRecordEntity:
    """Normalized view of one Google Books volume.

    Attributes:
        id: Google Books volume id
        title: Volume title ("Unknown Title" when missing)
        authors: Author names in upstream order (["Unknown Author"] when missing)
        publisher: Publisher name ("Unknown Publisher" when missing)
        published_date: Publication date as sent upstream ("Unknown" when missing)
        page_count: Number of pages (0 when missing)
        description: Volume description, if any
        thumbnail: Cover thumbnail URL, if any
    """

    id: str
    title: str
    authors: tuple[str, ...]
    publisher: str
    published_date: str
    page_count: int
    description: str | None = None
    thumbnail: str | None = None


@dataclass(frozen=True)
class SearchResultEntity:
    """One page of book search results."""

    total_items: int
    items: tuple[BookRecordEntity, ...] = field(default_factory=tuple)
