"""Operation result dataclass.

Uniform result type returned by integration helpers (SMTP, Slack webhook,
Monday.com, DynamoDB) and by delivery channels on success.
"""

from typing import Optional, Any
from dataclasses import dataclass

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from operations.

    Attributes:
        status: OperationStatus -- high-level outcome
        message: str -- human-friendly message for logs/troubleshooting
        data: Optional[Any] -- optional payload (dict, list, or object)
        error_code: Optional[str] -- optional machine error code
        retry_after: Optional[int] -- seconds until retry when rate-limited
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        """True if status is SUCCESS."""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_skipped(self) -> bool:
        """True if the operation deliberately did nothing."""
        return self.status == OperationStatus.SKIPPED

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        """Create a SUCCESS OperationResult with optional data.

        Args:
            data: Optional payload to include with the result
            message: Human-friendly success message

        Returns:
            OperationResult with SUCCESS status
        """
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def skipped(
        cls, message: str, data: Optional[Any] = None
    ) -> "OperationResult":
        """Create a SKIPPED OperationResult.

        Args:
            message: Why nothing was done
            data: Optional payload (e.g. the classification that led to the skip)

        Returns:
            OperationResult with SKIPPED status
        """
        return cls(status=OperationStatus.SKIPPED, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Create an error OperationResult.

        Args:
            status: OperationStatus indicating error type
            message: Human-friendly error message
            error_code: Optional machine error code
            retry_after: Optional seconds until retry (for rate limiting)
            data: Optional payload to include with the error

        Returns:
            OperationResult with specified error status
        """
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Create a transient (retryable) error result.

        Use for timeouts, connection resets, 5xx responses and rate limiting.
        """
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Create a permanent (non-retryable) error result.

        Use for authentication failures, rejected payloads and GraphQL errors.
        """
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
