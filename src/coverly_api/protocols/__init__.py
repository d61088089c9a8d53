"""Protocol interfaces for swappable implementations.

Services type against these protocols so tests can hand them
in-memory fakes instead of a real HTTP client or cache.
"""

from .result_store import ResultStore
from .upstream_fetcher import UpstreamFetcher

__all__ = [
    "ResultStore",
    "UpstreamFetcher",
]
