"""Operation result types and status enums.

Standardized result types for transport operations, including the status
enum, the result dataclass, and classifiers for `requests` errors and HTTP
status codes.
"""

from infrastructure.operations.classifiers import (
    classify_request_exception,
    classify_status_code,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_request_exception",
    "classify_status_code",
]
