"""Operation status enumeration.

Status codes for operation results, used to classify outcomes of catalog
transport operations for appropriate handling.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        NOT_MODIFIED: Conditional request matched the known revision
        TRANSIENT_ERROR: Retryable error (network, timeout, 5xx, rate limit)
        PERMANENT_ERROR: Non-retryable error (4xx other than 404)
        NOT_FOUND: Resource not found
    """

    SUCCESS = "success"
    NOT_MODIFIED = "not_modified"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    NOT_FOUND = "not_found"
