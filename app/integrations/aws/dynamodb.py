"""AWS DynamoDB helpers.

Thin wrappers over execute_aws_api_call using the low-level attribute value
format ({"S": ...}, {"N": ...}). Scans and queries aggregate every page.

Usage:
    result = scan(
        table_name="cubicle_reservations",
        region="ca-central-1",
        FilterExpression="user_id = :uid",
        ExpressionAttributeValues={":uid": {"S": "u-1"}},
    )
    if result.is_success:
        items = result.data
"""

from typing import Any, Dict, Optional

from integrations.aws.client import execute_aws_api_call
from infrastructure.operations import OperationResult


def put_item(
    table_name: str,
    Item: Dict[str, Any],
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    **kwargs,
) -> OperationResult:
    """Put an item into a DynamoDB table."""
    return execute_aws_api_call(
        service_name="dynamodb",
        method="put_item",
        region=region,
        endpoint_url=endpoint_url,
        TableName=table_name,
        Item=Item,
        **kwargs,
    )


def query(
    table_name: str,
    KeyConditionExpression: str,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    paginate: bool = True,
    **kwargs,
) -> OperationResult:
    """Query a DynamoDB table or index.

    Args:
        paginate: Aggregate every page into one list of items. When False a
            single request is made and data is the raw response, so `Limit`
            bounds the read.

    Returns:
        OperationResult: Items (or the raw response) or error details
    """
    return execute_aws_api_call(
        service_name="dynamodb",
        method="query",
        keys=["Items"],
        force_paginate=paginate,
        region=region,
        endpoint_url=endpoint_url,
        TableName=table_name,
        KeyConditionExpression=KeyConditionExpression,
        **kwargs,
    )


def scan(
    table_name: str,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    **kwargs,
) -> OperationResult:
    """Scan a DynamoDB table with automatic pagination.

    Returns:
        OperationResult: List of items or error details
    """
    return execute_aws_api_call(
        service_name="dynamodb",
        method="scan",
        keys=["Items"],
        force_paginate=True,
        region=region,
        endpoint_url=endpoint_url,
        TableName=table_name,
        **kwargs,
    )
