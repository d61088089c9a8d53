"""Shared fixtures: in-memory fakes for the upstream fetcher, clock and sleep."""

from pathlib import Path
from typing import Any

import pytest

from coverly_api.repositories import MemoryResultStore
from coverly_api.services import BookSearchService


class FakeFetcher:
    """UpstreamFetcher double returning scripted outcomes.

    Each call consumes the next outcome; the last one repeats. An outcome
    that is an exception instance is raised instead of returned.
    """

    def __init__(self, outcomes: list[Any] | None = None, contents: list[Any] | None = None) -> None:
        self.outcomes = list(outcomes or [{"totalItems": 0, "items": []}])
        self.contents = list(contents or [("image/jpeg", b"\xff\xd8\xff")])
        self.calls: list[dict[str, Any]] = []
        self.content_calls: list[str] = []
        self.content_options: list[dict[str, Any]] = []
        self.closed = False

    @staticmethod
    def _next(queue: list[Any]) -> Any:
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def get_json(self, url, params=None, headers=None):
        self.calls.append({"url": url, "params": params, "headers": headers})
        return self._next(self.outcomes)

    async def get_content(self, url, max_bytes=None, follow_redirects=True):
        self.content_calls.append(url)
        self.content_options.append({"max_bytes": max_bytes, "follow_redirects": follow_redirects})
        return self._next(self.contents)

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records delays and returns at once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def clock():
    """A fake clock starting at t=1000 s."""
    return FakeClock()


@pytest.fixture
def sleep():
    """A sleep that records delays instead of waiting."""
    return RecordingSleep()


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def make_book_service(clock, sleep):
    """Factory building a BookSearchService around a FakeFetcher."""

    def _make(fetcher: FakeFetcher, ttl: float = 60.0) -> BookSearchService:
        return BookSearchService(
            fetcher=fetcher,
            result_store=MemoryResultStore(ttl=ttl, clock=clock),
            api_url="http://example.com/volumes",
            sleep=sleep,
        )

    return _make


@pytest.fixture
def clean_code_payload():
    """Google Books response with one fully populated volume."""
    return {
        "totalItems": 1,
        "items": [
            {
                "id": "1",
                "volumeInfo": {
                    "title": "Clean Code",
                    "authors": ["Robert C. Martin"],
                    "publisher": "Prentice Hall",
                    "publishedDate": "2008",
                    "pageCount": 464,
                    "description": "A Handbook of Agile Software Craftsmanship",
                    "imageLinks": {"thumbnail": "thumb.jpg"},
                },
            }
        ],
    }


@pytest.fixture
def ca_pem() -> str:
    """A real self-signed CA certificate in PEM form (CN=coverly-test-ca)."""
    return (Path(__file__).parent / "data" / "self_signed_ca.pem").read_text()
