"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Upstream APIs, cache)
"""

from .books_handler import BooksHandler
from .error_mapping import HTTP_STATUS_BY_KIND, to_http_exception
from .time_tracking_handler import TimeTrackingHandler

__all__ = [
    "BooksHandler",
    "TimeTrackingHandler",
    "HTTP_STATUS_BY_KIND",
    "to_http_exception",
]
