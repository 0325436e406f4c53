"""Unit tests for the DynamoDB notification history store."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from infrastructure.operations import OperationResult
from infrastructure.persistence.dynamodb_history import DynamoDBNotificationHistoryStore
from modules.notifications.errors import AuditWriteError, NotificationError
from modules.notifications.models import AttemptStatus, NotificationAttempt, NotificationType


@pytest.fixture
def store():
    return DynamoDBNotificationHistoryStore(
        "history",
        index_name="created_at-index",
        region="ca-central-1",
        endpoint_url="http://localhost:8000",
    )


@pytest.fixture
def attempt_factory():
    def _factory(**overrides):
        values = {
            "type": NotificationType.BULK_EMAIL,
            "status": AttemptStatus.SUCCESS,
            "message": "Bulk email notifications completed - 2/3 sent",
            "recipients": ["jane@example.com", "bob@example.com"],
            "sent_by": "admin-1",
            "data": {"total_users": 3, "success_count": 2},
        }
        values.update(overrides)
        return NotificationAttempt(**values)

    return _factory


@pytest.mark.unit
class TestInsert:
    @patch("infrastructure.persistence.dynamodb_history.dynamodb.put_item")
    def test_writes_item(self, mock_put, store, attempt_factory):
        mock_put.return_value = OperationResult.success()
        attempt = attempt_factory()

        assert store.insert(attempt) is attempt

        kwargs = mock_put.call_args.kwargs
        assert kwargs["table_name"] == "history"
        assert kwargs["region"] == "ca-central-1"
        assert kwargs["endpoint_url"] == "http://localhost:8000"
        item = kwargs["Item"]
        assert item["id"] == {"S": attempt.id}
        assert item["record_kind"] == {"S": "notification"}
        assert item["created_at"] == {"S": attempt.created_at.isoformat()}
        assert item["type"] == {"S": "bulk_email"}
        assert item["recipients"] == {"L": [{"S": "jane@example.com"}, {"S": "bob@example.com"}]}
        assert json.loads(item["data"]["S"]) == {"total_users": 3, "success_count": 2}
        assert item["sent_by"] == {"S": "admin-1"}
        assert "error" not in item

    @patch("infrastructure.persistence.dynamodb_history.dynamodb.put_item")
    def test_ttl_follows_retention(self, mock_put, attempt_factory):
        mock_put.return_value = OperationResult.success()
        store = DynamoDBNotificationHistoryStore("history", retention_days=30)

        store.insert(attempt_factory())

        ttl = int(mock_put.call_args.kwargs["Item"]["ttl_timestamp"]["N"])
        expected = (datetime.now(timezone.utc) + timedelta(days=30)).timestamp()
        assert abs(ttl - expected) < 60

    @patch("infrastructure.persistence.dynamodb_history.dynamodb.put_item")
    def test_failure_raises_audit_error(self, mock_put, store, attempt_factory):
        mock_put.return_value = OperationResult.transient_error("AWS API throttled", "RATE_LIMITED")

        with pytest.raises(AuditWriteError, match="AWS API throttled"):
            store.insert(attempt_factory())


@pytest.mark.unit
class TestRecent:
    @patch("infrastructure.persistence.dynamodb_history.dynamodb.query")
    def test_single_bounded_index_query(self, mock_query, store, attempt_factory):
        now = datetime.now(timezone.utc)
        newest = attempt_factory(
            message="newest", created_at=now, error="x", status=AttemptStatus.ERROR
        )
        middle = attempt_factory(message="middle", created_at=now - timedelta(hours=1))
        mock_query.return_value = OperationResult.success(
            data={"Items": [store._to_item(newest), store._to_item(middle)], "Count": 2}
        )

        result = store.recent(limit=2)

        kwargs = mock_query.call_args.kwargs
        assert mock_query.call_args.args == ("history",)
        assert kwargs["IndexName"] == "created_at-index"
        assert kwargs["KeyConditionExpression"] == "record_kind = :kind"
        assert kwargs["ExpressionAttributeValues"] == {":kind": {"S": "notification"}}
        assert kwargs["ScanIndexForward"] is False
        assert kwargs["Limit"] == 2
        assert kwargs["paginate"] is False
        assert [a.message for a in result] == ["newest", "middle"]
        assert result[0].status == AttemptStatus.ERROR
        assert result[0].error == "x"
        assert result[0].data == {"total_users": 3, "success_count": 2}
        assert result[1].recipients == ["jane@example.com", "bob@example.com"]

    @patch("infrastructure.persistence.dynamodb_history.dynamodb.query")
    def test_malformed_items_skipped(self, mock_query, store, attempt_factory):
        good = store._to_item(attempt_factory())
        mock_query.return_value = OperationResult.success(
            data={"Items": [{"id": {"S": "broken"}, "type": {"S": "fax"}}, good]}
        )

        assert len(store.recent(limit=10)) == 1

    @patch("infrastructure.persistence.dynamodb_history.dynamodb.query")
    def test_query_failure_raises(self, mock_query, store):
        mock_query.return_value = OperationResult.permanent_error("AWS API access denied", "FORBIDDEN")

        with pytest.raises(NotificationError):
            store.recent(limit=10)


@pytest.mark.unit
class TestBetween:
    @patch("infrastructure.persistence.dynamodb_history.dynamodb.query")
    def test_both_bounds(self, mock_query, store, attempt_factory):
        mock_query.return_value = OperationResult.success(
            data=[store._to_item(attempt_factory())]
        )

        result = store.between(
            start=datetime(2024, 3, 1, tzinfo=timezone.utc),
            end=datetime(2024, 3, 31, 23, 59, tzinfo=timezone.utc),
        )

        kwargs = mock_query.call_args.kwargs
        assert kwargs["KeyConditionExpression"] == (
            "record_kind = :kind AND created_at BETWEEN :start AND :end"
        )
        assert kwargs["ExpressionAttributeValues"] == {
            ":kind": {"S": "notification"},
            ":start": {"S": "2024-03-01T00:00:00+00:00"},
            ":end": {"S": "2024-03-31T23:59:00+00:00"},
        }
        assert "paginate" not in kwargs
        assert "Limit" not in kwargs
        assert len(result) == 1

    @patch("infrastructure.persistence.dynamodb_history.dynamodb.query")
    def test_start_only_and_unbounded(self, mock_query, store):
        mock_query.return_value = OperationResult.success(data=[])

        store.between(start=datetime(2024, 3, 1, tzinfo=timezone.utc))
        assert mock_query.call_args.kwargs["KeyConditionExpression"] == (
            "record_kind = :kind AND created_at >= :start"
        )

        store.between()
        assert mock_query.call_args.kwargs["KeyConditionExpression"] == "record_kind = :kind"

    @patch("infrastructure.persistence.dynamodb_history.dynamodb.query")
    def test_end_only(self, mock_query, store):
        mock_query.return_value = OperationResult.success(data=[])

        store.between(end=datetime(2024, 3, 1, tzinfo=timezone.utc))

        assert mock_query.call_args.kwargs["KeyConditionExpression"] == (
            "record_kind = :kind AND created_at <= :end"
        )
