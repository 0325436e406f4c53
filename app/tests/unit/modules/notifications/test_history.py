"""Unit tests for NotificationHistory."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from modules.notifications.errors import AuditWriteError, NotificationValidationError
from modules.notifications.history import NotificationHistory, clamp_limit
from modules.notifications.models import AttemptStatus, NotificationAttempt, NotificationType


@pytest.mark.unit
class TestRecord:
    def test_stores_attempt(self, history_store):
        history = NotificationHistory(history_store)

        attempt = history.record(
            type=NotificationType.EMAIL,
            status=AttemptStatus.SUCCESS,
            message="Cubicle sequence email sent to jane@example.com",
            recipients=["jane@example.com"],
            sent_by="admin-1",
        )

        assert history_store.attempts == [attempt]
        assert attempt.id
        assert attempt.created_at.tzinfo is not None
        assert attempt.data == {}

    def test_audit_write_error_is_swallowed(self):
        store = MagicMock()
        store.insert.side_effect = AuditWriteError("table missing")

        result = NotificationHistory(store).record(
            type=NotificationType.SLACK, status=AttemptStatus.ERROR, message="failed"
        )

        assert result is None

    def test_unexpected_store_error_is_swallowed(self):
        store = MagicMock()
        store.insert.side_effect = RuntimeError("boom")

        result = NotificationHistory(store).record(
            type=NotificationType.SLACK, status=AttemptStatus.SUCCESS, message="sent"
        )

        assert result is None


@pytest.mark.unit
class TestRecent:
    @pytest.mark.parametrize(
        "limit,expected", [(0, 1), (-5, 1), (1, 1), (50, 50), (100, 100), (500, 100)]
    )
    def test_clamp_limit(self, limit, expected):
        assert clamp_limit(limit) == expected

    def test_limit_passed_clamped(self):
        store = MagicMock()
        store.recent.return_value = []
        NotificationHistory(store).recent(limit=1000)
        store.recent.assert_called_once_with(100)

    def test_default_limit(self):
        store = MagicMock()
        store.recent.return_value = []
        NotificationHistory(store).recent()
        store.recent.assert_called_once_with(50)

    def test_read_failure_returns_empty(self):
        store = MagicMock()
        store.recent.side_effect = RuntimeError("unavailable")
        assert NotificationHistory(store).recent() == []

    def test_newest_first(self, history_store):
        history = NotificationHistory(history_store)
        first = history.record(NotificationType.EMAIL, AttemptStatus.SUCCESS, "one")
        second = history.record(NotificationType.EMAIL, AttemptStatus.SUCCESS, "two")
        second.created_at = first.created_at.replace(year=first.created_at.year + 1)

        assert [a.message for a in history.recent(limit=2)] == ["two", "one"]


@pytest.fixture
def seeded_history(history_store):
    """Five attempts an hour apart, newest last; two of them failed."""
    base = datetime(2024, 3, 1, 8, tzinfo=timezone.utc)
    rows = [
        (NotificationType.EMAIL, AttemptStatus.SUCCESS),
        (NotificationType.EMAIL, AttemptStatus.ERROR),
        (NotificationType.SLACK, AttemptStatus.SUCCESS),
        (NotificationType.EMAIL, AttemptStatus.SUCCESS),
        (NotificationType.BULK_EMAIL, AttemptStatus.ERROR),
    ]
    for hour, (type_, status) in enumerate(rows):
        history_store.insert(
            NotificationAttempt(
                type=type_,
                status=status,
                message=f"attempt {hour}",
                created_at=base + timedelta(hours=hour),
            )
        )
    return NotificationHistory(history_store), base


@pytest.mark.unit
class TestStatistics:
    def test_totals_and_breakdown(self, seeded_history):
        history, _ = seeded_history

        stats = history.statistics()

        assert stats.total == 5
        assert stats.successful == 3
        assert stats.failed == 2
        assert stats.success_rate == 60.0
        assert [(c.type, c.count) for c in stats.type_breakdown][0] == (
            NotificationType.EMAIL,
            3,
        )
        assert {c.type: c.count for c in stats.type_breakdown} == {
            NotificationType.EMAIL: 3,
            NotificationType.SLACK: 1,
            NotificationType.BULK_EMAIL: 1,
        }
        assert [a.message for a in stats.recent_activity][:2] == ["attempt 4", "attempt 3"]

    def test_window_is_inclusive(self, seeded_history):
        history, base = seeded_history

        stats = history.statistics(
            start=base + timedelta(hours=1), end=base + timedelta(hours=3)
        )

        assert stats.total == 3
        assert stats.successful == 2
        assert stats.success_rate == 66.67
        assert stats.start == base + timedelta(hours=1)

    def test_open_ended_window(self, seeded_history):
        history, base = seeded_history
        assert history.statistics(start=base + timedelta(hours=4)).total == 1
        assert history.statistics(end=base).total == 1

    def test_empty_history(self, history_store):
        stats = NotificationHistory(history_store).statistics()

        assert stats.total == 0
        assert stats.success_rate == 0
        assert stats.type_breakdown == []
        assert stats.recent_activity == []

    def test_recent_activity_capped_at_ten(self, history_store):
        history = NotificationHistory(history_store)
        for i in range(12):
            history.record(NotificationType.SLACK, AttemptStatus.SUCCESS, f"sent {i}")

        stats = history.statistics()

        assert stats.total == 12
        assert len(stats.recent_activity) == 10

    def test_start_after_end_rejected(self, history_store):
        now = datetime.now(timezone.utc)
        with pytest.raises(NotificationValidationError):
            NotificationHistory(history_store).statistics(start=now, end=now - timedelta(days=1))

    def test_store_errors_propagate(self):
        store = MagicMock()
        store.between.side_effect = RuntimeError("unavailable")
        with pytest.raises(RuntimeError):
            NotificationHistory(store).statistics()
