"""DynamoDB persistence for notification history.

Table schema:
- Partition Key: id (uuid hex of the attempt)
- record_kind: constant "notification", partition key of the created_at GSI
- created_at: ISO-8601 UTC timestamp, sort key of the created_at GSI
- recipients: list of email strings
- data: JSON text of the structured payload
- TTL: ttl_timestamp (auto-delete records after 90 days)

Reads go through the GSI newest first, so `recent` reads at most `limit`
items and `between` reads only the requested window.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import structlog
from boto3.dynamodb.types import TypeDeserializer  # type: ignore
from pydantic import ValidationError

from integrations.aws import dynamodb
from modules.notifications.errors import AuditWriteError, NotificationError
from modules.notifications.models import NotificationAttempt
from modules.reservations.models import to_utc

logger = structlog.get_logger()

DEFAULT_RETENTION_DAYS = 90
DEFAULT_INDEX_NAME = "created_at-index"
RECORD_KIND = "notification"


def _iso(value: datetime) -> str:
    return to_utc(value).isoformat()


def _compute_ttl_timestamp(retention_days: int) -> int:
    """Unix epoch seconds when a record written now should expire."""
    expiry = datetime.now(timezone.utc) + timedelta(days=retention_days)
    return int(expiry.timestamp())


class DynamoDBNotificationHistoryStore:
    """NotificationHistoryStore backed by a DynamoDB table."""

    def __init__(
        self,
        table_name: str,
        index_name: str = DEFAULT_INDEX_NAME,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ):
        self.table_name = table_name
        self.index_name = index_name
        self.region = region
        self.endpoint_url = endpoint_url
        self.retention_days = retention_days
        self._deserializer = TypeDeserializer()

    def _to_item(self, attempt: NotificationAttempt) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "id": {"S": attempt.id},
            "record_kind": {"S": RECORD_KIND},
            "type": {"S": attempt.type.value},
            "status": {"S": attempt.status.value},
            "message": {"S": attempt.message},
            "recipients": {"L": [{"S": r} for r in attempt.recipients]},
            "data": {"S": json.dumps(attempt.data, default=str)},
            "created_at": {"S": _iso(attempt.created_at)},
            "ttl_timestamp": {"N": str(_compute_ttl_timestamp(self.retention_days))},
        }
        if attempt.sent_by:
            item["sent_by"] = {"S": attempt.sent_by}
        if attempt.error:
            item["error"] = {"S": attempt.error}
        return item

    def _from_item(self, item: Dict[str, Any]) -> Optional[NotificationAttempt]:
        plain = {key: self._deserializer.deserialize(value) for key, value in item.items()}
        try:
            plain["data"] = json.loads(plain.get("data") or "{}")
            plain.pop("ttl_timestamp", None)
            plain.pop("record_kind", None)
            return NotificationAttempt(**plain)
        except (ValueError, ValidationError) as e:
            logger.warning("notification_history_item_skipped", error=str(e))
            return None

    def insert(self, attempt: NotificationAttempt) -> NotificationAttempt:
        """Write one attempt.

        Raises:
            AuditWriteError: If DynamoDB rejected the write.
        """
        result = dynamodb.put_item(
            table_name=self.table_name,
            Item=self._to_item(attempt),
            region=self.region,
            endpoint_url=self.endpoint_url,
        )
        if not result.is_success:
            raise AuditWriteError(
                f"Failed to write notification history: {result.message}"
            )
        logger.debug(
            "notification_history_written",
            attempt_id=attempt.id,
            type=attempt.type.value,
            status=attempt.status.value,
        )
        return attempt

    def _query(self, key_condition: str, values: Dict[str, Any], **kwargs) -> List[Dict]:
        result = dynamodb.query(
            self.table_name,
            KeyConditionExpression=key_condition,
            region=self.region,
            endpoint_url=self.endpoint_url,
            IndexName=self.index_name,
            ExpressionAttributeValues={":kind": {"S": RECORD_KIND}, **values},
            ScanIndexForward=False,
            **kwargs,
        )
        if not result.is_success:
            raise NotificationError(
                f"Failed to read notification history: {result.message}"
            )
        data = result.data or []
        if isinstance(data, dict):
            return data.get("Items", [])
        return data

    def _to_attempts(self, items: List[Dict]) -> List[NotificationAttempt]:
        return [a for a in map(self._from_item, items) if a is not None]

    def recent(self, limit: int) -> List[NotificationAttempt]:
        """Most recent attempts, newest first, in one bounded index read.

        Raises:
            NotificationError: If the index could not be queried.
        """
        items = self._query("record_kind = :kind", {}, paginate=False, Limit=limit)
        return self._to_attempts(items)[:limit]

    def between(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[NotificationAttempt]:
        """Attempts created in [start, end], newest first.

        Raises:
            NotificationError: If the index could not be queried.
        """
        key_condition = "record_kind = :kind"
        values: Dict[str, Any] = {}
        if start is not None and end is not None:
            key_condition += " AND created_at BETWEEN :start AND :end"
            values = {":start": {"S": _iso(start)}, ":end": {"S": _iso(end)}}
        elif start is not None:
            key_condition += " AND created_at >= :start"
            values = {":start": {"S": _iso(start)}}
        elif end is not None:
            key_condition += " AND created_at <= :end"
            values = {":end": {"S": _iso(end)}}
        return self._to_attempts(self._query(key_condition, values))
