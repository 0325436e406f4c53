"""AWS client helpers.

Centralized error handling, retry on throttling, and pagination for boto3
calls. Every call returns an OperationResult instead of raising.

Usage:
    result = execute_aws_api_call(
        service_name="dynamodb",
        method="scan",
        keys=["Items"],
        force_paginate=True,
        TableName="cubicle_reservations",
    )
    if result.is_success:
        items = result.data
"""

import time
from typing import Any, Callable, List, Optional

import boto3  # type: ignore
import structlog
from botocore.client import BaseClient  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from infrastructure.operations import OperationResult, classify_aws_error

logger = structlog.get_logger()

RETRY_ERRORS = (
    "ThrottlingException",
    "RequestLimitExceeded",
    "ProvisionedThroughputExceededException",
)
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 0.5


def _error_code(error: Exception) -> Optional[str]:
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return None
    return response.get("Error", {}).get("Code")


def _should_retry(error: Exception, attempt: int, max_attempts: int) -> bool:
    return _error_code(error) in RETRY_ERRORS and attempt < max_attempts


def _calculate_retry_delay(attempt: int) -> float:
    return DEFAULT_BACKOFF_FACTOR * (2**attempt)


def get_aws_client(
    service_name: str,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> BaseClient:
    """Create a boto3 service client.

    Args:
        service_name: AWS service name (e.g. "dynamodb").
        region: Region name. Falls back to the boto3 default chain when None.
        endpoint_url: Custom endpoint, used for dynamodb-local or LocalStack.
    """
    session = boto3.Session(region_name=region)
    client_config: dict = {}
    if endpoint_url:
        client_config["endpoint_url"] = endpoint_url
    return session.client(service_name, **client_config)


def _paginate_all_results(
    client: BaseClient, method: str, keys: Optional[List[str]] = None, **kwargs
) -> List[dict]:
    paginator = client.get_paginator(method)
    results = []
    for page in paginator.paginate(**kwargs):
        if keys is None:
            for key, value in page.items():
                if key != "ResponseMetadata":
                    if isinstance(value, list):
                        results.extend(value)
                    else:
                        results.append(value)
        else:
            for key in keys:
                if key in page:
                    results.extend(page[key])
    return results


def execute_api_call(
    func_name: str,
    api_call: Callable[[], Any],
    max_retries: Optional[int] = None,
) -> OperationResult:
    """Run an AWS call with retry on throttling.

    Args:
        func_name: Name used in log entries (e.g. "dynamodb_scan").
        api_call: Zero-argument callable performing the request.
        max_retries: Override for the number of retries on throttling.

    Returns:
        OperationResult with the raw response (or aggregated pages) as data.
    """
    max_attempts = DEFAULT_MAX_RETRIES if max_retries is None else max_retries

    for attempt in range(max_attempts + 1):
        try:
            result = api_call()
            if attempt > 0:
                logger.info("aws_api_retry_success", function=func_name, attempt=attempt + 1)
            return OperationResult.success(data=result)

        except (BotoCoreError, ClientError) as e:
            if _should_retry(e, attempt, max_attempts):
                delay = _calculate_retry_delay(attempt)
                logger.warning(
                    "aws_api_retrying",
                    function=func_name,
                    attempt=attempt + 1,
                    error=str(e),
                    delay=delay,
                )
                time.sleep(delay)
                continue

            logger.error(
                "aws_api_error_final",
                function=func_name,
                error=str(e),
                error_code=_error_code(e),
            )
            return classify_aws_error(e)

    # Unreachable: the final attempt either returns or is not retried.
    return OperationResult.transient_error(
        f"{func_name} failed after retries", error_code="RETRIES_EXHAUSTED"
    )


def execute_aws_api_call(
    service_name: str,
    method: str,
    keys: Optional[List[str]] = None,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    max_retries: Optional[int] = None,
    force_paginate: bool = False,
    **kwargs,
) -> OperationResult:
    """Call an AWS API method with standard error handling.

    Args:
        service_name: The AWS service name.
        method: The client method to call.
        keys: Keys to extract from paginated results.
        region: Region for the client.
        endpoint_url: Custom endpoint for the client.
        max_retries: Override default max retries.
        force_paginate: Aggregate every page through the client's paginator.
        **kwargs: Arguments for the API call.
    """

    def api_call():
        client = get_aws_client(service_name, region=region, endpoint_url=endpoint_url)
        if force_paginate:
            return _paginate_all_results(client, method, keys, **kwargs)
        return getattr(client, method)(**kwargs)

    return execute_api_call(f"{service_name}_{method}", api_call, max_retries=max_retries)
