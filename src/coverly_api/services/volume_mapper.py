"""Map Google Books volume payloads to search result entities."""

import math
from typing import Any

from coverly_api.entities import BookRecordEntity, SearchResultEntity

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_PUBLISHER = "Unknown Publisher"
UNKNOWN_DATE = "Unknown"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any, default: str | None) -> str | None:
    # Numbers are kept as their string form; other non-strings fall back
    if isinstance(value, str):
        return value or default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _thumbnail(volume_info: dict[str, Any]) -> str | None:
    # Prefer the larger "thumbnail" over "smallThumbnail"
    image_links = _as_dict(volume_info.get("imageLinks"))
    return _text(image_links.get("thumbnail"), None) or _text(image_links.get("smallThumbnail"), None)


def _authors(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return (UNKNOWN_AUTHOR,)
    names = tuple(name for name in (_text(item, None) for item in value) if name)
    return names or (UNKNOWN_AUTHOR,)


def _page_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)) and math.isfinite(value):
        return int(value)
    return 0


def map_volume(item: dict[str, Any]) -> BookRecordEntity:
    """Map one upstream volume to a BookRecordEntity, filling defaults."""
    volume_info = _as_dict(item.get("volumeInfo"))

    return BookRecordEntity(
        id=_text(item.get("id"), None) or "",
        title=_text(volume_info.get("title"), UNKNOWN_TITLE),
        authors=_authors(volume_info.get("authors")),
        publisher=_text(volume_info.get("publisher"), UNKNOWN_PUBLISHER),
        published_date=_text(volume_info.get("publishedDate"), UNKNOWN_DATE),
        page_count=_page_count(volume_info.get("pageCount")),
        description=_text(volume_info.get("description"), None),
        thumbnail=_thumbnail(volume_info),
    )


def map_search_result(payload: Any) -> SearchResultEntity:
    """Map a Google Books volumes response to a SearchResultEntity.

    Items keep the upstream order. ``totalItems`` falls back to the number
    of mapped items when the upstream leaves it out.

    Args:
        payload: Decoded JSON body of ``GET /volumes``

    Returns:
        SearchResultEntity
    """
    body = _as_dict(payload)
    raw_items = body.get("items")
    items = tuple(
        map_volume(item) for item in (raw_items if isinstance(raw_items, list) else []) if isinstance(item, dict)
    )

    total_items = body.get("totalItems")
    if not isinstance(total_items, int) or isinstance(total_items, bool):
        total_items = len(items)

    return SearchResultEntity(total_items=total_items, items=items)
