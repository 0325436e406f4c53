"""Operation result types and status enums.

Standardized result types shared by integrations and delivery channels,
including status enums, the result dataclass, and error classifiers for
transport exceptions.
"""

from infrastructure.operations.classifiers import (
    classify_aws_error,
    classify_http_error,
    classify_http_status,
    classify_smtp_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
    "classify_http_status",
    "classify_smtp_error",
    "classify_aws_error",
]
