"""Upstream HTTP fetcher protocol."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UpstreamFetcher(Protocol):
    """Protocol for clients that GET JSON and binary content from third-party APIs.

    Failures are raised as ``coverly_api.errors.UpstreamError``.
    """

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body.

        Args:
            url: Absolute URL or path relative to the client's base URL
            params: Query string parameters
            headers: Extra request headers

        Returns:
            The decoded JSON body
        """
        ...

    async def get_content(
        self,
        url: str,
        max_bytes: int | None = None,
        follow_redirects: bool = True,
    ) -> tuple[str, bytes]:
        """GET ``url`` and return its content type and raw body.

        Args:
            url: Absolute URL
            max_bytes: Fail once the body grows past this size
            follow_redirects: Whether 3xx responses are followed

        Returns:
            Tuple (content_type, body)
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...
