"""Notification history.

Append-only audit log of notification attempts. Writes are best-effort: a
failing store is logged and never affects the delivery being recorded.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

import structlog

from modules.notifications.errors import AuditWriteError, NotificationValidationError
from modules.notifications.models import (
    AttemptStatus,
    HistoryStatistics,
    NotificationAttempt,
    NotificationType,
    TypeCount,
)
from modules.reservations.models import to_utc

logger = structlog.get_logger()

MAX_HISTORY_LIMIT = 100
RECENT_ACTIVITY_SIZE = 10


class NotificationHistoryStore(Protocol):
    """Persistence for notification attempts."""

    def insert(self, attempt: NotificationAttempt) -> NotificationAttempt:
        """Persist one attempt.

        Raises:
            AuditWriteError: If the attempt could not be stored.
        """
        ...

    def recent(self, limit: int) -> List[NotificationAttempt]:
        """Most recent attempts, newest first."""
        ...

    def between(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[NotificationAttempt]:
        """Attempts created in [start, end] (either bound optional), newest first."""
        ...


class InMemoryNotificationHistoryStore:
    """History store kept in process memory."""

    def __init__(self):
        self.attempts: List[NotificationAttempt] = []

    def insert(self, attempt: NotificationAttempt) -> NotificationAttempt:
        self.attempts.append(attempt)
        return attempt

    def recent(self, limit: int) -> List[NotificationAttempt]:
        ordered = sorted(self.attempts, key=lambda a: a.created_at, reverse=True)
        return ordered[:limit]

    def between(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[NotificationAttempt]:
        matches = [
            a
            for a in self.attempts
            if (start is None or to_utc(a.created_at) >= to_utc(start))
            and (end is None or to_utc(a.created_at) <= to_utc(end))
        ]
        return sorted(matches, key=lambda a: a.created_at, reverse=True)


def clamp_limit(limit: int) -> int:
    return max(1, min(limit, MAX_HISTORY_LIMIT))


class NotificationHistory:
    """Best-effort writer in front of a NotificationHistoryStore."""

    def __init__(self, store: NotificationHistoryStore):
        self.store = store

    def record(
        self,
        type: NotificationType,
        status: AttemptStatus,
        message: str,
        recipients: Optional[List[str]] = None,
        sent_by: Optional[str] = None,
        error: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[NotificationAttempt]:
        """Record one attempt.

        Returns:
            The stored attempt, or None when the store failed.
        """
        attempt = NotificationAttempt(
            type=type,
            status=status,
            message=message,
            recipients=recipients or [],
            sent_by=sent_by,
            error=error,
            data=data or {},
        )
        try:
            return self.store.insert(attempt)
        except AuditWriteError as e:
            logger.error(
                "notification_history_write_failed",
                attempt_id=attempt.id,
                type=attempt.type.value,
                error=str(e),
            )
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "unexpected_notification_history_error",
                attempt_id=attempt.id,
                type=attempt.type.value,
                error=str(e),
                error_type=e.__class__.__name__,
            )
        return None

    def recent(self, limit: int = 50) -> List[NotificationAttempt]:
        """Most recent attempts, newest first. Limit is clamped to 1..100.

        Returns an empty list when the store cannot be read.
        """
        try:
            return self.store.recent(clamp_limit(limit))
        except Exception as e:  # pylint: disable=broad-except
            logger.error("notification_history_read_failed", error=str(e))
            return []

    def statistics(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> HistoryStatistics:
        """Totals, success rate and per-type counts for attempts in [start, end].

        Raises:
            NotificationValidationError: If start is after end.
            NotificationError: If the store cannot be read.
        """
        if start is not None and end is not None and to_utc(start) > to_utc(end):
            raise NotificationValidationError("start must not be after end")

        attempts = self.store.between(start, end)
        total = len(attempts)
        successful = sum(1 for a in attempts if a.status == AttemptStatus.SUCCESS)
        counts = Counter(a.type for a in attempts)
        return HistoryStatistics(
            start=start,
            end=end,
            total=total,
            successful=successful,
            failed=total - successful,
            success_rate=round(successful / total * 100, 2) if total else 0,
            type_breakdown=[
                TypeCount(type=type_, count=count) for type_, count in counts.most_common()
            ],
            recent_activity=attempts[:RECENT_ACTIVITY_SIZE],
        )
