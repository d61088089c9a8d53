"""HTTP handlers for book search and cover images.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from fastapi import HTTPException, status

from coverly_api.dto import BookSearchResponse, CoverRequest, CoverResponse, SearchBooksRequest
from coverly_api.errors import GatewayError
from coverly_api.services import BookSearchService, CoverService

from .error_mapping import to_http_exception


class BooksHandler:
    """HTTP handlers for the /books endpoints.

    Example:
        ```python
        handler = BooksHandler(
            book_service=BookSearchService.create(),
            cover_service=CoverService(fetcher),
        )

        @app.get("/books/search", response_model=BookSearchResponse)
        async def search_books(q: str):
            return await handler.search_books(SearchBooksRequest(q=q))
        ```
    """

    def __init__(self, book_service: BookSearchService, cover_service: CoverService) -> None:
        """Initialize the books handler.

        Args:
            book_service: The book search service (required).
            cover_service: The cover proxy service (required).
        """
        self._books = book_service
        self._covers = cover_service

    @property
    def book_service(self) -> BookSearchService:
        return self._books

    async def search_books(self, request: SearchBooksRequest) -> BookSearchResponse:
        """Handle GET /books/search requests.

        Args:
            request: The search request DTO

        Returns:
            BookSearchResponse with camelCase fields

        Raises:
            HTTPException: 400 for a blank query, otherwise the status of the
                classified upstream error
        """
        if not request.q or not request.q.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Search query cannot be empty",
            )

        try:
            result = await self._books.search_books(
                request.q,
                order_by=request.order_by,
                start_index=request.start_index,
                max_results=request.max_results,
            )
        except GatewayError as e:
            raise to_http_exception(e) from e

        return BookSearchResponse.from_entity(result)

    async def get_cover(self, request: CoverRequest) -> CoverResponse:
        """Handle GET /books/cover requests.

        Args:
            request: The cover request DTO

        Returns:
            CoverResponse holding a data URL

        Raises:
            HTTPException: Status of the classified error
        """
        try:
            cover = await self._covers.fetch_cover(request.url)
        except GatewayError as e:
            raise to_http_exception(e) from e

        return CoverResponse(data_url=cover.data_url)
