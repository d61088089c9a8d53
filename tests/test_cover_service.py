"""
Tests for the cover image proxy.
"""

import httpx
import pytest

from coverly_api.errors import ErrorKind, GatewayError, ResponseTooLargeError, UpstreamError
from coverly_api.services import CoverImage, CoverService


def test_data_url_encodes_image():
    cover = CoverImage(content_type="image/png", data=b"abc")

    assert cover.data_url == "data:image/png;base64,YWJj"


@pytest.mark.asyncio
async def test_fetches_image(make_fetcher):
    fetcher = make_fetcher(contents=[("image/jpeg", b"\xff\xd8\xff")])

    cover = await CoverService(fetcher).fetch_cover("https://books.google.com/cover.jpg")

    assert cover == CoverImage(content_type="image/jpeg", data=b"\xff\xd8\xff")
    assert fetcher.content_calls == ["https://books.google.com/cover.jpg"]


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["", "cover.jpg", "ftp://example.com/c.jpg", "file:///etc/passwd", "http://"])
async def test_rejects_unusable_urls(make_fetcher, url):
    fetcher = make_fetcher()

    with pytest.raises(GatewayError) as exc_info:
        await CoverService(fetcher).fetch_cover(url)

    assert exc_info.value.kind is ErrorKind.BAD_REQUEST
    assert fetcher.content_calls == []


@pytest.mark.asyncio
async def test_rejects_non_image_content(make_fetcher):
    fetcher = make_fetcher(contents=[("text/html", b"<html></html>")])

    with pytest.raises(GatewayError) as exc_info:
        await CoverService(fetcher).fetch_cover("https://books.google.com/books/content?id=x")

    assert exc_info.value.kind is ErrorKind.BAD_REQUEST
    assert exc_info.value.message == "Cover URL did not return an image."


@pytest.mark.asyncio
async def test_upstream_status_is_classified(make_fetcher):
    fetcher = make_fetcher(contents=[UpstreamError("not found", status_code=404)])

    with pytest.raises(GatewayError) as exc_info:
        await CoverService(fetcher).fetch_cover("https://books.google.com/gone.jpg")

    assert exc_info.value.kind is ErrorKind.BAD_REQUEST
    assert exc_info.value.message == "Cover image could not be fetched (404)."


@pytest.mark.asyncio
async def test_tls_failure_is_classified(make_fetcher):
    error = UpstreamError.from_httpx(httpx.ConnectError("self-signed certificate in certificate chain"))
    fetcher = make_fetcher(contents=[error])

    with pytest.raises(GatewayError) as exc_info:
        await CoverService(fetcher).fetch_cover("https://books.googleusercontent.com/c.jpg")

    assert exc_info.value.kind is ErrorKind.TLS_VALIDATION_FAILED


@pytest.mark.asyncio
async def test_unexpected_failure_is_unknown(make_fetcher):
    fetcher = make_fetcher(contents=[RuntimeError("boom")])

    with pytest.raises(GatewayError) as exc_info:
        await CoverService(fetcher).fetch_cover("https://books.googleusercontent.com/c.jpg")

    assert exc_info.value.kind is ErrorKind.UNKNOWN
    assert exc_info.value.message == "Failed to fetch cover image"


@pytest.mark.asyncio
async def test_downloads_without_redirects_and_with_size_cap(make_fetcher):
    fetcher = make_fetcher()

    await CoverService(fetcher, max_bytes=1024).fetch_cover("http://books.google.com/books/content?id=abc")

    assert fetcher.content_options == [{"max_bytes": 1024, "follow_redirects": False}]


@pytest.mark.asyncio
async def test_subdomains_of_allowed_hosts_are_accepted(make_fetcher):
    fetcher = make_fetcher()

    await CoverService(fetcher).fetch_cover("https://lh3.books.googleusercontent.com/c.jpg")

    assert fetcher.content_calls == ["https://lh3.books.googleusercontent.com/c.jpg"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url",
    [
        "http://169.254.169.254/latest/meta-data/",
        "http://localhost:3001/health",
        "https://example.com/c.jpg",
        "https://books.google.com.evil.example/c.jpg",
        "https://notbooks.google.com/c.jpg",
        "https://books.google.com@evil.example/c.jpg",
        "http://[::1/c.jpg",
    ],
)
async def test_rejects_hosts_outside_the_allow_list(make_fetcher, url):
    fetcher = make_fetcher()

    with pytest.raises(GatewayError) as exc_info:
        await CoverService(fetcher).fetch_cover(url)

    assert exc_info.value.kind is ErrorKind.BAD_REQUEST
    assert fetcher.content_calls == []


@pytest.mark.asyncio
async def test_custom_allow_list(make_fetcher):
    fetcher = make_fetcher()
    service = CoverService(fetcher, allowed_hosts=["covers.example"])

    await service.fetch_cover("https://covers.example/1.jpg")
    with pytest.raises(GatewayError):
        await service.fetch_cover("https://books.google.com/1.jpg")

    assert fetcher.content_calls == ["https://covers.example/1.jpg"]


@pytest.mark.asyncio
async def test_oversized_image_is_bad_request(make_fetcher):
    fetcher = make_fetcher(contents=[ResponseTooLargeError("too big")])

    with pytest.raises(GatewayError) as exc_info:
        await CoverService(fetcher).fetch_cover("https://books.google.com/huge.jpg")

    assert exc_info.value.kind is ErrorKind.BAD_REQUEST
    assert exc_info.value.message == "Cover image is too large."
