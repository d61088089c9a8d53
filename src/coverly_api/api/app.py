from collections.abc import Sized
from typing import Annotated, Any, Literal

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from coverly_api.api.dependencies import BooksHandlerDep, TimeTrackingHandlerDep, lifespan
from coverly_api.config import settings
from coverly_api.dto import (
    BookHoursRequest,
    BookHoursResponse,
    BookSearchResponse,
    CoverRequest,
    CoverResponse,
    HealthCheckResponse,
    SearchBooksRequest,
)

app = FastAPI(
    title="Coverly API",
    description="Gateway for Google Books search and Toggl Track reading hours",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Coverly API",
        "version": "0.1.0",
        "description": "Gateway for Google Books search and Toggl Track reading hours",
        "endpoints": {
            "search": "/books/search",
            "cover": "/books/cover",
            "hours": "/toggl/books",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: BooksHandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    store = handler.book_service.result_store
    return HealthCheckResponse(
        status="healthy",
        cached_searches=len(store) if isinstance(store, Sized) else 0,
        toggl_configured=settings.toggl_configured,
    )


@app.get("/books/search", response_model=BookSearchResponse, response_model_exclude_none=True)
async def search_books(
    handler: BooksHandlerDep,
    q: Annotated[str, Query(description="Search phrase")],
    order_by: Annotated[Literal["relevance", "newest"] | None, Query(alias="orderBy")] = None,
    start_index: Annotated[int | None, Query(alias="startIndex", ge=0)] = None,
    max_results: Annotated[int | None, Query(alias="maxResults", ge=1, le=40)] = None,
) -> BookSearchResponse:
    """
    Search Google Books.

    Args:
        q: Search phrase, must not be blank.
        order_by: "relevance" or "newest".
        start_index: Index of the first result.
        max_results: Page size, 1 to 40.

    Returns:
        Normalized search results.
    """
    request = SearchBooksRequest(
        q=q,
        order_by=order_by,
        start_index=start_index,
        max_results=max_results,
    )
    return await handler.search_books(request)


@app.get("/books/cover", response_model=CoverResponse)
async def get_cover(
    handler: BooksHandlerDep,
    url: Annotated[str, Query(min_length=1, description="Absolute URL of the cover image")],
) -> CoverResponse:
    """Fetch a cover image and return it as a data URL."""
    return await handler.get_cover(CoverRequest(url=url))


@app.get("/toggl/books", response_model=BookHoursResponse)
async def get_book_hours(
    handler: TimeTrackingHandlerDep,
    title: Annotated[str, Query(min_length=1, description="Book title")],
) -> BookHoursResponse:
    """Hours tracked in Toggl Track for a book title."""
    return await handler.get_book_hours(BookHoursRequest(title=title))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "coverly_api.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
