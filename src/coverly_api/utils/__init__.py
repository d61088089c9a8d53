"""Utility modules for the gateway."""

from .retry import with_retry

__all__ = [
    "with_retry",
]
