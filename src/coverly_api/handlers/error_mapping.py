"""Translation of classified service errors into HTTP responses."""

from fastapi import HTTPException, status

from coverly_api.errors import ErrorKind, GatewayError

HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.OVERLOADED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.UPSTREAM_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.NETWORK_UNREACHABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.TLS_VALIDATION_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.MISCONFIGURED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: GatewayError) -> HTTPException:
    """Build the HTTPException for a classified error.

    Args:
        error: The service error

    Returns:
        HTTPException with the kind's status code and the error message as detail
    """
    return HTTPException(
        status_code=HTTP_STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error.message,
    )
