"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from coverly_api.config import settings
from coverly_api.handlers import BooksHandler, TimeTrackingHandler
from coverly_api.logging_config import setup_logging
from coverly_api.services import BookSearchService, CoverService, TimeTrackingService

logger = logging.getLogger(__name__)


def get_books_handler(request: Request) -> BooksHandler:
    """Dependency injection for BooksHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The BooksHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "books_handler", None)
    if handler is None:
        raise RuntimeError("BooksHandler not initialized. Check lifespan setup.")
    return handler


def get_time_tracking_handler(request: Request) -> TimeTrackingHandler:
    """Dependency injection for TimeTrackingHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "time_tracking_handler", None)
    if handler is None:
        raise RuntimeError("TimeTrackingHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Services (business logic) - built from settings, each with its own
       upstream client and TLS policy
    2. Handlers (HTTP endpoints) - app.state.books_handler and
       app.state.time_tracking_handler

    Cleanup:
        Closes upstream HTTP clients and removes handlers from app.state
    """
    setup_logging(settings.log_level, settings.log_file)

    book_service = BookSearchService.create(settings)
    cover_service = CoverService(
        fetcher=book_service.fetcher,
        allowed_hosts=settings.cover_allowed_hosts,
        max_bytes=settings.cover_max_bytes,
    )
    time_tracking_service = TimeTrackingService.create(settings)

    app.state.books_handler = BooksHandler(book_service=book_service, cover_service=cover_service)
    app.state.time_tracking_handler = TimeTrackingHandler(time_tracking_service=time_tracking_service)

    logger.info("Book search service initialized (%s)", settings.google_books_api_url)
    if not settings.toggl_configured:
        logger.warning("Toggl Track credentials missing; /toggl endpoints will fail")

    yield

    await book_service.close()
    await time_tracking_service.close()
    del app.state.books_handler
    del app.state.time_tracking_handler
    logger.info("Coverly API shut down")


# Type aliases for cleaner dependency injection
BooksHandlerDep = Annotated[BooksHandler, Depends(get_books_handler)]
TimeTrackingHandlerDep = Annotated[TimeTrackingHandler, Depends(get_time_tracking_handler)]
