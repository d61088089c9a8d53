"""Failure description and classification for upstream calls.

Two error types exist:

    - UpstreamError: raised by the upstream client. Carries the HTTP status
      of the failed response and/or a transport condition (timeout, network
      unreachable, TLS validation).
      ResponseTooLargeError is the subclass for a body past the caller's cap.
    - GatewayError: the only error shape a service lets escape. Carries one
      ErrorKind and a caller-facing message.

Both the retry decision and the final classification read the same
(status, condition) description produced by ``describe_failure``.
"""

import errno
import socket
import ssl
from collections.abc import Mapping
from enum import Enum

import httpx


class ErrorKind(str, Enum):
    """Service-level error kinds surfaced to the HTTP layer."""

    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    OVERLOADED = "overloaded"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    TLS_VALIDATION_FAILED = "tls_validation_failed"
    MISCONFIGURED = "misconfigured"
    UNKNOWN = "unknown"


class TransportCondition(str, Enum):
    """Transport-level failure detected before any HTTP response arrived."""

    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    TLS_VALIDATION = "tls_validation"


RETRYABLE_STATUSES = frozenset({429, 503})
RETRYABLE_CONDITIONS = frozenset({TransportCondition.TIMEOUT, TransportCondition.NETWORK_UNREACHABLE})

TLS_FAILURE_MARKERS = (
    "certificate_verify_failed",
    "depth_zero_self_signed_cert",
    "self_signed_cert_in_chain",
    "unable_to_verify_leaf_signature",
    "cert_has_expired",
    "self-signed certificate",
    "self signed certificate",
    "unable to verify the first certificate",
    "unable to get local issuer certificate",
    "certificate has expired",
)

TIMEOUT_ERRNOS = frozenset({errno.ECONNABORTED, errno.ETIMEDOUT})
UNREACHABLE_ERRNOS = frozenset({errno.ENETUNREACH, errno.EHOSTUNREACH})


class UpstreamError(Exception):
    """A failed call to a third-party API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        condition: TransportCondition | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.condition = condition
        self.body = body

    @classmethod
    def from_httpx(cls, exc: httpx.HTTPError) -> "UpstreamError":
        """Build an UpstreamError from an httpx exception.

        Args:
            exc: The exception raised by httpx

        Returns:
            UpstreamError with the response status (if any) and the
            transport condition found in the exception chain
        """
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            return cls(
                f"Upstream responded with {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return cls(str(exc) or type(exc).__name__, condition=describe_transport_failure(exc))


class ResponseTooLargeError(UpstreamError):
    """An upstream body grew past the size the caller accepts."""


class GatewayError(Exception):
    """Classified failure crossing a service boundary."""

    def __init__(self, kind: ErrorKind, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.upstream_status = upstream_status

    def __repr__(self) -> str:
        return f"GatewayError(kind={self.kind.value!r}, message={self.message!r})"


def _exception_chain(exc: BaseException) -> list[BaseException]:
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def describe_transport_failure(exc: BaseException) -> TransportCondition | None:
    """Find the transport condition behind an exception, if any.

    Walks the ``__cause__``/``__context__`` chain because httpx wraps the
    socket and ssl errors it receives from httpcore.

    Args:
        exc: Any exception raised while talking to an upstream

    Returns:
        The matching TransportCondition, or None if nothing matched
    """
    for link in _exception_chain(exc):
        if isinstance(link, ssl.SSLCertVerificationError):
            return TransportCondition.TLS_VALIDATION
        if isinstance(link, (httpx.TimeoutException, TimeoutError)):
            return TransportCondition.TIMEOUT
        if isinstance(link, socket.gaierror):
            return TransportCondition.NETWORK_UNREACHABLE
        if isinstance(link, OSError) and link.errno is not None:
            if link.errno in TIMEOUT_ERRNOS:
                return TransportCondition.TIMEOUT
            if link.errno in UNREACHABLE_ERRNOS:
                return TransportCondition.NETWORK_UNREACHABLE

        text = str(link).lower()
        if any(marker in text for marker in TLS_FAILURE_MARKERS):
            return TransportCondition.TLS_VALIDATION
        if "network is unreachable" in text or "no route to host" in text:
            return TransportCondition.NETWORK_UNREACHABLE
    return None


def describe_failure(exc: BaseException) -> tuple[int | None, TransportCondition | None]:
    """Reduce an exception to its (HTTP status, transport condition) pair."""
    if isinstance(exc, UpstreamError):
        return exc.status_code, exc.condition
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code, None
    return None, describe_transport_failure(exc)


def is_retryable(exc: BaseException) -> bool:
    """Decide whether a failed upstream call is worth another attempt.

    Retryable: HTTP 429 or 503, a timeout / aborted connection, or an
    unreachable network. Everything else fails fast.
    """
    status, condition = describe_failure(exc)
    if status is not None:
        return status in RETRYABLE_STATUSES
    return condition in RETRYABLE_CONDITIONS


def classify(exc: BaseException) -> ErrorKind:
    """Map a failure to its ErrorKind.

    Status codes are checked before transport conditions since a failure
    can carry both.
    """
    if isinstance(exc, GatewayError):
        return exc.kind

    status, condition = describe_failure(exc)
    if status is not None:
        if status == 401:
            return ErrorKind.UNAUTHORIZED
        if status == 429:
            return ErrorKind.OVERLOADED
        if 400 <= status < 500:
            return ErrorKind.BAD_REQUEST
        if status >= 500:
            return ErrorKind.UPSTREAM_UNAVAILABLE

    if condition is TransportCondition.TIMEOUT:
        return ErrorKind.TIMEOUT
    if condition is TransportCondition.NETWORK_UNREACHABLE:
        return ErrorKind.NETWORK_UNREACHABLE
    if condition is TransportCondition.TLS_VALIDATION:
        return ErrorKind.TLS_VALIDATION_FAILED
    return ErrorKind.UNKNOWN


def to_gateway_error(exc: BaseException, messages: Mapping[ErrorKind, str]) -> GatewayError:
    """Classify ``exc`` and wrap it into a GatewayError.

    Args:
        exc: The failure to classify
        messages: Caller-facing message per kind. Must contain ErrorKind.UNKNOWN.
            Messages may reference ``{status}`` for the upstream status code.

    Returns:
        GatewayError with the classified kind and message
    """
    if isinstance(exc, GatewayError):
        return exc

    kind = classify(exc)
    status, _ = describe_failure(exc)
    template = messages.get(kind, messages[ErrorKind.UNKNOWN])
    return GatewayError(kind, template.format(status=status), upstream_status=status)
