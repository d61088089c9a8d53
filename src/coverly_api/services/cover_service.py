"""Cover image proxy.

Fetches a cover thumbnail server-side so the frontend can embed it as a
data URL without cross-origin or mixed-content issues. Only Google Books
image hosts are fetched, redirects are not followed and the body size is
capped, so the proxy cannot be pointed at internal addresses.
"""

import base64
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlsplit

from coverly_api.errors import ErrorKind, GatewayError, ResponseTooLargeError, to_gateway_error
from coverly_api.protocols import UpstreamFetcher

from .book_search_service import BOOK_SEARCH_MESSAGES

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_HOSTS = ("books.google.com", "books.googleusercontent.com")
DEFAULT_MAX_BYTES = 2 * 1024 * 1024

COVER_MESSAGES: dict[ErrorKind, str] = {
    **BOOK_SEARCH_MESSAGES,
    ErrorKind.BAD_REQUEST: "Cover image could not be fetched ({status}).",
    ErrorKind.UNKNOWN: "Failed to fetch cover image",
}


@dataclass(frozen=True)
class CoverImage:
    """A fetched cover image."""

    content_type: str
    data: bytes

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


def _host_allowed(host: str, allowed_hosts: tuple[str, ...]) -> bool:
    return any(host == allowed or host.endswith("." + allowed) for allowed in allowed_hosts)


class CoverService:
    """Proxy for book cover images.

    Shares the Google Books fetcher, so the same TLS policy and timeout
    apply to cover downloads.
    """

    def __init__(
        self,
        fetcher: UpstreamFetcher,
        allowed_hosts: Iterable[str] = DEFAULT_ALLOWED_HOSTS,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        """Initialize the cover service.

        Args:
            fetcher: HTTP client used for downloads (required).
            allowed_hosts: Hosts covers may come from; subdomains match too.
            max_bytes: Largest accepted image body.
        """
        self._fetcher = fetcher
        self._allowed_hosts = tuple(host.strip().lower() for host in allowed_hosts if host.strip())
        self._max_bytes = max_bytes

    async def fetch_cover(self, url: str) -> CoverImage:
        """Download the image at ``url``.

        Args:
            url: Absolute http(s) URL on an allowed host

        Returns:
            CoverImage with the upstream content type

        Raises:
            GatewayError: BAD_REQUEST for unusable URLs, disallowed hosts,
                oversized or non-image content, otherwise the classified
                upstream failure
        """
        try:
            parts = urlsplit(url or "")
        except ValueError:
            parts = urlsplit("")
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise GatewayError(ErrorKind.BAD_REQUEST, "Cover URL must be an absolute http(s) URL.")
        if not _host_allowed(parts.hostname, self._allowed_hosts):
            logger.warning("Rejected cover URL on host %s", parts.hostname)
            raise GatewayError(ErrorKind.BAD_REQUEST, "Cover URL host is not allowed.")

        try:
            content_type, body = await self._fetcher.get_content(
                url, max_bytes=self._max_bytes, follow_redirects=False
            )
        except ResponseTooLargeError as e:
            logger.warning("Cover image %s exceeds %d bytes", url, self._max_bytes)
            raise GatewayError(ErrorKind.BAD_REQUEST, "Cover image is too large.") from e
        except Exception as e:
            error = to_gateway_error(e, COVER_MESSAGES)
            logger.error("Failed to fetch cover image %s (%s)", url, error.kind.value, exc_info=e)
            raise error from e

        if not content_type.startswith("image/"):
            logger.warning("Cover URL %s returned non-image content type %s", url, content_type)
            raise GatewayError(ErrorKind.BAD_REQUEST, "Cover URL did not return an image.")

        return CoverImage(content_type=content_type, data=body)
