"""Monday.com GraphQL client.

Creates board items through the v2 GraphQL endpoint. Only the `create_item`
mutation is needed for task alerts.

Usage:
    client = MondayClient(api_key="...", timeout=10)
    item = client.create_item(
        board_id="123",
        item_name="Cubicle Sequence Alert: Jane",
        column_values={"status": {"label": "high"}},
    )
    print(item.url)
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
import structlog

from infrastructure.operations import OperationResult, classify_http_error

logger = structlog.get_logger()

DEFAULT_API_URL = "https://api.monday.com/v2"

CREATE_ITEM_MUTATION = """
mutation ($boardId: ID!, $itemName: String!, $columnValues: JSON!) {
  create_item (board_id: $boardId, item_name: $itemName, column_values: $columnValues) {
    id
    name
    url
  }
}
""".strip()


class MondayAPIError(Exception):
    """Raised when the Monday.com API rejects a request."""

    def __init__(self, message: str, result: Optional[OperationResult] = None):
        self.message = message
        self.result = result
        super().__init__(message)


@dataclass
class MondayItem:
    """A created board item."""

    id: str
    name: str
    url: Optional[str] = None


class MondayClient:
    """Minimal Monday.com API client."""

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 10,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    def _post(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = requests.post(
                self.api_url,
                json={"query": query, "variables": variables},
                headers={
                    "Authorization": self.api_key,
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            result = classify_http_error(e, provider="Monday.com")
            logger.error(
                "monday_request_failed",
                error=result.message,
                error_code=result.error_code,
            )
            raise MondayAPIError(result.message, result) from e
        except ValueError as e:
            raise MondayAPIError(f"Monday.com returned invalid JSON: {str(e)}") from e

        if payload.get("errors"):
            message = f"Monday.com API error: {json.dumps(payload['errors'])}"
            logger.error("monday_graphql_error", errors=payload["errors"])
            raise MondayAPIError(
                message,
                OperationResult.permanent_error(message, error_code="GRAPHQL_ERROR"),
            )
        return payload.get("data") or {}

    def create_item(
        self,
        board_id: str,
        item_name: str,
        column_values: Dict[str, Any],
    ) -> MondayItem:
        """Create an item on a board.

        Args:
            board_id: Target board id.
            item_name: Item title.
            column_values: Column id to value mapping. Serialized to the JSON
                string the API expects.

        Returns:
            MondayItem: The created item.

        Raises:
            MondayAPIError: On transport failure, non-2xx status or GraphQL errors.
        """
        data = self._post(
            CREATE_ITEM_MUTATION,
            {
                "boardId": str(board_id),
                "itemName": item_name,
                "columnValues": json.dumps(column_values),
            },
        )
        created = data.get("create_item")
        if not created:
            raise MondayAPIError("Monday.com response did not include the created item")

        logger.info(
            "monday_item_created", item_id=created.get("id"), item_name=created.get("name")
        )
        return MondayItem(
            id=str(created.get("id")),
            name=created.get("name", item_name),
            url=created.get("url"),
        )
