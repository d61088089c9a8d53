"""
Tests for the Coverly API endpoints.

Handlers are injected through dependency overrides around in-memory fakes,
so the lifespan (and any real upstream client) never runs.
"""

from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from coverly_api.api.app import app
from coverly_api.api.dependencies import get_books_handler, get_time_tracking_handler
from coverly_api.errors import UpstreamError
from coverly_api.handlers import BooksHandler, TimeTrackingHandler
from coverly_api.services import CoverService, TimeTrackingService


@pytest.fixture
def wire(make_fetcher, make_book_service):
    """Install handlers built on fake fetchers; returns the fetchers used."""

    def _wire(outcomes=None, contents=None, toggl_outcomes=None, toggl_token="tok"):
        books_fetcher = make_fetcher(outcomes, contents)
        toggl_fetcher = make_fetcher(toggl_outcomes if toggl_outcomes is not None else [[]])
        books_handler = BooksHandler(
            book_service=make_book_service(books_fetcher),
            cover_service=CoverService(books_fetcher),
        )
        toggl_handler = TimeTrackingHandler(
            TimeTrackingService(
                fetcher=toggl_fetcher,
                api_token=toggl_token,
                workspace_id="123",
                api_url="https://toggl.example/api/v9",
                clock=lambda: datetime(2024, 6, 1, tzinfo=timezone.utc),
            )
        )
        app.dependency_overrides[get_books_handler] = lambda: books_handler
        app.dependency_overrides[get_time_tracking_handler] = lambda: toggl_handler
        return books_fetcher, toggl_fetcher

    yield _wire
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Coverly API"
    assert data["endpoints"]["search"] == "/books/search"


def test_health(client, wire):
    """Test health check endpoint."""
    wire()
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cachedSearches"] == 0
    assert "togglConfigured" in data


def test_search_returns_camel_case_books(client, wire, clean_code_payload):
    wire([clean_code_payload])

    response = client.get("/books/search", params={"q": "clean code"})

    assert response.status_code == 200
    assert response.json() == {
        "totalItems": 1,
        "items": [
            {
                "id": "1",
                "title": "Clean Code",
                "authors": ["Robert C. Martin"],
                "publisher": "Prentice Hall",
                "publishedDate": "2008",
                "pageCount": 464,
                "description": "A Handbook of Agile Software Craftsmanship",
                "thumbnail": "thumb.jpg",
            }
        ],
    }


def test_search_omits_absent_optional_fields(client, wire):
    wire([{"totalItems": 1, "items": [{"id": "9", "volumeInfo": {"title": "Bare"}}]}])

    item = client.get("/books/search", params={"q": "bare"}).json()["items"][0]

    assert "description" not in item
    assert "thumbnail" not in item
    assert item["authors"] == ["Unknown Author"]
    assert item["pageCount"] == 0


def test_search_forwards_parameters(client, wire):
    fetcher, _ = wire()

    response = client.get(
        "/books/search",
        params={"q": "dune", "orderBy": "newest", "startIndex": 5, "maxResults": 20},
    )

    assert response.status_code == 200
    assert fetcher.calls[0]["params"] == {"q": "dune", "orderBy": "newest", "startIndex": 5, "maxResults": 20}


def test_health_counts_cached_searches(client, wire):
    wire()
    client.get("/books/search", params={"q": "dune"})
    client.get("/books/search", params={"q": "dune"})

    assert client.get("/health").json()["cachedSearches"] == 1


@pytest.mark.parametrize("q", ["", "   "])
def test_blank_query_is_rejected(client, wire, q):
    fetcher, _ = wire()

    response = client.get("/books/search", params={"q": q})

    assert response.status_code == 400
    assert response.json()["detail"] == "Search query cannot be empty"
    assert fetcher.calls == []


def test_missing_query_is_validation_error(client, wire):
    wire()
    assert client.get("/books/search").status_code == 422


@pytest.mark.parametrize(
    "params",
    [
        {"q": "dune", "maxResults": 41},
        {"q": "dune", "maxResults": 0},
        {"q": "dune", "startIndex": -1},
        {"q": "dune", "orderBy": "oldest"},
    ],
)
def test_invalid_parameters_are_validation_errors(client, wire, params):
    wire()
    assert client.get("/books/search", params=params).status_code == 422


@pytest.mark.parametrize(
    ("upstream_status", "expected_status"),
    [
        (401, 401),
        (404, 400),
        (429, 503),
        (503, 502),
    ],
)
def test_upstream_status_mapping(client, wire, upstream_status, expected_status):
    wire([UpstreamError("failed", status_code=upstream_status)])

    response = client.get("/books/search", params={"q": "dune"})

    assert response.status_code == expected_status


def test_tls_failure_maps_to_bad_gateway_with_guidance(client, wire):
    wire([UpstreamError.from_httpx(httpx.ConnectError("self-signed certificate in certificate chain"))])

    response = client.get("/books/search", params={"q": "dune"})

    assert response.status_code == 502
    assert response.json()["detail"].startswith("SSL certificate validation failed for Google Books API.")


def test_cover_returns_data_url(client, wire):
    fetcher, _ = wire(contents=[("image/jpeg", b"\xff\xd8\xff")])

    response = client.get("/books/cover", params={"url": "https://books.google.com/c.jpg"})

    assert response.status_code == 200
    assert response.json() == {"dataUrl": "data:image/jpeg;base64,/9j/"}
    assert fetcher.content_calls == ["https://books.google.com/c.jpg"]


def test_cover_rejects_relative_url(client, wire):
    wire()

    response = client.get("/books/cover", params={"url": "cover.jpg"})

    assert response.status_code == 400


def test_toggl_hours(client, wire):
    wire(toggl_outcomes=[[{"description": "Dune", "duration": 5400}]])

    response = client.get("/toggl/books", params={"title": "Dune"})

    assert response.status_code == 200
    assert response.json() == {"hours": 1.5}


def test_toggl_requires_title(client, wire):
    wire()
    assert client.get("/toggl/books").status_code == 422


def test_toggl_missing_credentials(client, wire):
    _, toggl_fetcher = wire(toggl_token=None)

    response = client.get("/toggl/books", params={"title": "Dune"})

    assert response.status_code == 500
    assert "TOGGL_API_TOKEN" in response.json()["detail"]
    assert toggl_fetcher.calls == []


def test_toggl_unauthorized(client, wire):
    wire(toggl_outcomes=[UpstreamError("unauthorized", status_code=401)])

    response = client.get("/toggl/books", params={"title": "Dune"})

    assert response.status_code == 401


def test_cover_rejects_hosts_outside_google_books(client, wire):
    fetcher, _ = wire()

    response = client.get("/books/cover", params={"url": "http://169.254.169.254/latest/meta-data/"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Cover URL host is not allowed."
    assert fetcher.content_calls == []
