"""Search request domain entity."""

import json
from dataclasses import dataclass
from typing import Literal

OrderBy = Literal["relevance", "newest"]

# Google Books refuses maxResults above 40
MAX_RESULTS_LIMIT = 40

DEFAULT_ORDER_BY: OrderBy = "relevance"
DEFAULT_START_INDEX = 0
DEFAULT_MAX_RESULTS = 10


@dataclass(frozen=True)
class SearchRequestEntity:
    """Normalized book search parameters.

    Use ``create`` to build one: it fills defaults and caps ``max_results``
    so the cache key and the upstream call always see the capped value.

    Attributes:
        query: Free-text search phrase
        order_by: "relevance" or "newest"
        start_index: Zero-based index of the first result
        max_results: Page size, never above MAX_RESULTS_LIMIT
    """

    query: str
    order_by: OrderBy = DEFAULT_ORDER_BY
    start_index: int = DEFAULT_START_INDEX
    max_results: int = DEFAULT_MAX_RESULTS

    @classmethod
    def create(
        cls,
        query: str,
        order_by: OrderBy | None = None,
        start_index: int | None = None,
        max_results: int | None = None,
    ) -> "SearchRequestEntity":
        """Build a request, applying defaults for omitted values and the page-size cap.

        Args:
            query: Search phrase
            order_by: Sort order. Defaults to "relevance".
            start_index: First result index. Defaults to 0.
            max_results: Requested page size. Defaults to 10, capped at 40.

        Returns:
            Normalized SearchRequestEntity
        """
        requested = DEFAULT_MAX_RESULTS if max_results is None else max_results
        return cls(
            query=query,
            order_by=order_by or DEFAULT_ORDER_BY,
            start_index=DEFAULT_START_INDEX if start_index is None else start_index,
            max_results=min(requested, MAX_RESULTS_LIMIT),
        )

    @property
    def cache_key(self) -> str:
        """Deterministic serialization of the four request fields."""
        return json.dumps(
            {
                "maxResults": self.max_results,
                "orderBy": self.order_by,
                "q": self.query,
                "startIndex": self.start_index,
            },
            sort_keys=True,
            ensure_ascii=False,
        )

    def to_query_params(self) -> dict[str, str | int]:
        """Query string parameters for the Google Books volumes endpoint."""
        return {
            "q": self.query,
            "orderBy": self.order_by,
            "startIndex": self.start_index,
            "maxResults": self.max_results,
        }
