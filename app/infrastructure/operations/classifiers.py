"""Error classifiers for transport operations.

Map `requests` exceptions and HTTP status codes onto OperationResult values
so callers can branch on status instead of catching exceptions.
"""

from typing import Any, Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def classify_request_exception(exc: Exception) -> OperationResult:
    """Classify an exception raised by `requests` into an OperationResult.

    Timeouts and connection errors are transient; anything else raised by
    the transport (invalid URL, too many redirects, ...) is permanent.

    Args:
        exc: Exception raised while sending the request

    Returns:
        OperationResult with an error status and a machine error code
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"Request timed out: {exc}", error_code="TIMEOUT"
        )
    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"Connection error: {exc}", error_code="CONNECTION_ERROR"
        )
    return OperationResult.permanent_error(
        f"Request failed: {type(exc).__name__}: {exc}",
        error_code="REQUEST_ERROR",
    )


def classify_status_code(
    status_code: int, data: Optional[Any] = None, retry_after: Optional[int] = None
) -> OperationResult:
    """Classify an HTTP status code into an OperationResult.

    Status Code Mapping:
    - 2xx: SUCCESS
    - 304: NOT_MODIFIED
    - 404: NOT_FOUND
    - 429, 5xx: TRANSIENT_ERROR
    - other 4xx: PERMANENT_ERROR

    Args:
        status_code: HTTP status code of the response
        data: Payload attached to the result (the parsed response)
        retry_after: Retry-After value in seconds, if the server sent one

    Returns:
        OperationResult carrying ``data`` for every status
    """
    if 200 <= status_code < 300:
        return OperationResult.success(data=data, message=f"HTTP {status_code}")
    if status_code == 304:
        return OperationResult.not_modified(data=data)
    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND, "HTTP 404", error_code="HTTP_404", data=data
        )
    if status_code == 429 or status_code >= 500:
        return OperationResult.transient_error(
            f"HTTP {status_code}",
            error_code=f"HTTP_{status_code}",
            retry_after=retry_after,
            data=data,
        )
    return OperationResult.permanent_error(
        f"HTTP {status_code}", error_code=f"HTTP_{status_code}", data=data
    )
