"""Error classifiers for transport exceptions.

Converts exceptions raised by the outbound transports (requests, smtplib,
slack_sdk webhook, boto3) into standardized OperationResult objects so that
channels and persistence helpers share one vocabulary for failures.

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = requests.post(url, json=payload, timeout=10)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

import smtplib
import socket
from typing import Optional

import requests
from botocore.exceptions import ClientError

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def classify_http_status(status_code: int, provider: str) -> OperationResult:
    """Map an HTTP status code returned by a provider to an OperationResult.

    Status Code Mapping:
    - 429: Rate limiting -> TRANSIENT_ERROR
    - 401/403: Credentials rejected -> PERMANENT_ERROR
    - 404: Endpoint or resource missing -> NOT_FOUND
    - 5xx: Server error -> TRANSIENT_ERROR
    - Other 4xx: Payload rejected -> PERMANENT_ERROR
    """
    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            f"{provider} rate limited",
            error_code="RATE_LIMITED",
            retry_after=60,
        )

    if status_code in (401, 403):
        return OperationResult.permanent_error(
            f"{provider} rejected credentials ({status_code})",
            error_code="UNAUTHORIZED",
        )

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"{provider} endpoint not found",
            error_code="NOT_FOUND",
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"{provider} server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"{provider} client error ({status_code})",
        error_code="HTTP_ERROR",
    )


def classify_http_error(exc: Exception, provider: str = "HTTP") -> OperationResult:
    """Classify a requests exception into an OperationResult.

    Args:
        exc: Exception raised by requests (or any exception raised around it)
        provider: Provider name used in the message (e.g. "Monday.com")

    Returns:
        OperationResult with an error status
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"{provider} request timed out",
            error_code="TIMEOUT",
        )

    if isinstance(exc, requests.HTTPError):
        status_code: Optional[int] = None
        if exc.response is not None:
            status_code = exc.response.status_code
        if status_code is not None:
            return classify_http_status(status_code, provider)

    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"{provider} connection error: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    return OperationResult.transient_error(
        f"{provider} error: {type(exc).__name__}: {str(exc)}",
        error_code="UNKNOWN_ERROR",
    )


def classify_smtp_error(exc: Exception) -> OperationResult:
    """Classify smtplib and socket errors into an OperationResult.

    Error Mapping:
    - SMTPAuthenticationError -> PERMANENT_ERROR (bad credentials)
    - SMTPRecipientsRefused / SMTPSenderRefused -> PERMANENT_ERROR
    - socket.timeout -> TRANSIENT_ERROR
    - SMTPServerDisconnected / SMTPConnectError / OSError -> TRANSIENT_ERROR
    - Other SMTPException -> PERMANENT_ERROR
    """
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return OperationResult.permanent_error(
            "SMTP authentication failed",
            error_code="SMTP_AUTH_FAILED",
        )

    if isinstance(exc, (smtplib.SMTPRecipientsRefused, smtplib.SMTPSenderRefused)):
        return OperationResult.permanent_error(
            f"SMTP address refused: {str(exc)}",
            error_code="SMTP_ADDRESS_REFUSED",
        )

    if isinstance(exc, socket.timeout):
        return OperationResult.transient_error(
            "SMTP connection timed out",
            error_code="TIMEOUT",
        )

    if isinstance(exc, (smtplib.SMTPServerDisconnected, smtplib.SMTPConnectError)):
        return OperationResult.transient_error(
            f"SMTP connection error: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    if isinstance(exc, smtplib.SMTPException):
        return OperationResult.permanent_error(
            f"SMTP error: {str(exc)}",
            error_code="SMTP_ERROR",
        )

    return OperationResult.transient_error(
        f"SMTP transport error: {type(exc).__name__}: {str(exc)}",
        error_code="CONNECTION_ERROR",
    )


def classify_aws_error(exc: Exception) -> OperationResult:
    """Classify AWS SDK errors into OperationResult.

    Error Code Mapping:
    - ThrottlingException / ProvisionedThroughputExceededException -> TRANSIENT_ERROR
    - AccessDeniedException -> PERMANENT_ERROR
    - ResourceNotFoundException -> NOT_FOUND
    - ValidationException -> PERMANENT_ERROR
    - Other: TRANSIENT_ERROR (AWS convention)
    """
    if not isinstance(exc, ClientError):
        return OperationResult.transient_error(
            f"AWS connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    error_code = "Unknown"
    if hasattr(exc, "response") and exc.response:
        error_info = exc.response.get("Error", {})
        error_code = error_info.get("Code", "Unknown")

    if error_code in ("ThrottlingException", "ProvisionedThroughputExceededException"):
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "AWS API throttled",
            error_code="RATE_LIMITED",
            retry_after=60,
        )

    if error_code == "AccessDeniedException":
        return OperationResult.permanent_error(
            "AWS API access denied",
            error_code="FORBIDDEN",
        )

    if error_code == "ResourceNotFoundException":
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            "AWS resource not found",
            error_code="NOT_FOUND",
        )

    if error_code == "ValidationException":
        return OperationResult.permanent_error(
            f"AWS validation error: {str(exc)}",
            error_code="INVALID_REQUEST",
        )

    return OperationResult.transient_error(
        f"AWS API error ({error_code}): {str(exc)}",
        error_code=error_code,
    )
