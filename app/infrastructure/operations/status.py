"""Operation status enumeration.

Status codes shared by integration helpers and delivery channels so that a
transport failure, a missing record and a deliberately skipped delivery can be
told apart without inspecting exception types.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (network, timeout, rate limit)
        PERMANENT_ERROR: Non-retryable error (bad credentials, rejected payload)
        NOT_FOUND: Requested record does not exist
        SKIPPED: Nothing to do (e.g. no task warranted for a user)
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    NOT_FOUND = "not_found"
    SKIPPED = "skipped"
