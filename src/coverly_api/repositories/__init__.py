"""Repository layer for data access.

This layer hides the outside world (third-party HTTP APIs, the in-memory
result cache) behind the protocols in ``coverly_api.protocols``.
"""

from coverly_api.protocols import ResultStore, UpstreamFetcher

from .memory_result_store import MemoryResultStore
from .upstream_client import UpstreamClient

__all__ = [
    "MemoryResultStore",
    "ResultStore",
    "UpstreamClient",
    "UpstreamFetcher",
]
