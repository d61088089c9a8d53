"""httpx-based client for third-party HTTP APIs.

One instance per upstream. The TLS policy and timeout are fixed at
construction and applied to every request through a single pooled
``httpx.AsyncClient``.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any, TypeVar

import httpx

from coverly_api.errors import ResponseTooLargeError, TransportCondition, UpstreamError
from coverly_api.tls import TlsTrustConfig, httpx_verify

T = TypeVar("T")


class UpstreamClient:
    """httpx implementation of the UpstreamFetcher protocol.

    Every failure (non-success HTTP status, timeout, connection or TLS error,
    undecodable JSON, oversized body) is raised as UpstreamError.

    Example:
        ```python
        client = UpstreamClient.create(
            base_url="https://www.googleapis.com/books/v1/volumes",
            timeout=5.0,
        )
        payload = await client.get_json("", params={"q": "clean code"})
        await client.close()
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        tls: TlsTrustConfig | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        name: str = "upstream",
    ) -> None:
        """Initialize the upstream client.

        Args:
            base_url: Prefix for relative request URLs.
            tls: Transport policy. None keeps the platform trust store.
            timeout: Deadline in seconds for a whole call, body included.
                httpx also applies it to each connection phase.
            transport: Custom httpx transport (tests use httpx.MockTransport).
            name: Upstream name used in error messages.
        """
        self._base_url = base_url or ""
        self._tls = tls
        self._timeout = timeout
        self._transport = transport
        self._name = name
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        base_url: str | None = None,
        tls: TlsTrustConfig | None = None,
        timeout: float = 5.0,
        name: str = "upstream",
    ) -> "UpstreamClient":
        """Factory method to create an UpstreamClient with the default transport."""
        return cls(base_url=base_url, tls=tls, timeout=timeout, name=name)

    @property
    def tls(self) -> TlsTrustConfig | None:
        return self._tls

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                verify=httpx_verify(self._tls),
                transport=self._transport,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def _bounded(self, call: Awaitable[T]) -> T:
        # httpx timeouts apply per phase; this bounds the whole exchange
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamError(
                f"{self._name} did not answer within {self._timeout:g} s",
                condition=TransportCondition.TIMEOUT,
            ) from e

    async def _get(self, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.get(url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise UpstreamError.from_httpx(e) from e
        return response

    async def _stream(
        self, url: str, max_bytes: int | None, follow_redirects: bool
    ) -> tuple[str, bytes]:
        try:
            async with self.client.stream("GET", url, follow_redirects=follow_redirects) as response:
                if not response.is_success:
                    await response.aread()
                    response.raise_for_status()

                chunks: list[bytes] = []
                size = 0
                async for chunk in response.aiter_bytes():
                    size += len(chunk)
                    if max_bytes is not None and size > max_bytes:
                        raise ResponseTooLargeError(f"{self._name} response exceeds {max_bytes} bytes")
                    chunks.append(chunk)
                content_type = response.headers.get("content-type", "application/octet-stream")
        except httpx.HTTPError as e:
            raise UpstreamError.from_httpx(e) from e
        return content_type.split(";")[0].strip(), b"".join(chunks)

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body.

        The whole exchange, body included, must finish within the timeout.

        Args:
            url: Absolute URL or path relative to the base URL
            params: Query string parameters
            headers: Extra request headers

        Returns:
            The decoded JSON body

        Raises:
            UpstreamError: If the request fails, times out or the body is not JSON
        """
        response = await self._bounded(self._get(url, params=params, headers=headers))
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                f"{self._name} returned a non-JSON body",
                status_code=None,
                body=response.text[:500],
            ) from e

    async def get_content(
        self,
        url: str,
        max_bytes: int | None = None,
        follow_redirects: bool = True,
    ) -> tuple[str, bytes]:
        """GET ``url`` and return its content type and raw body.

        Args:
            url: Absolute URL
            max_bytes: Abort once the body grows past this size
            follow_redirects: Whether 3xx responses are followed

        Raises:
            ResponseTooLargeError: If the body exceeds ``max_bytes``
            UpstreamError: If the request fails or times out
        """
        return await self._bounded(self._stream(url, max_bytes, follow_redirects))

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
