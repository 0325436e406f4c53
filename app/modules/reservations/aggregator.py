"""Per-user reservation statistics.

UserAggregator reads reservation records from a ReservationSource and builds
one UserSummary per user. Bulk aggregation groups by email address; single
user lookups select by user id.
"""

from typing import Dict, List, Optional

import structlog

from modules.reservations.models import ReservationRecord, UserSummary, to_utc
from modules.reservations.sequence import compress
from modules.reservations.source import ReservationSource
from modules.reservations.validation import day_bounds

logger = structlog.get_logger()


def _favorite_section(records: List[ReservationRecord]) -> str:
    # Dicts keep insertion order, so the first section to reach the
    # highest count wins ties.
    sections: Dict[str, int] = {}
    for record in records:
        if record.cubicle_section:
            sections[record.cubicle_section] = sections.get(record.cubicle_section, 0) + 1

    favorite = ""
    max_count = 0
    for section, count in sections.items():
        if count > max_count:
            max_count = count
            favorite = section
    return favorite


def summarize(
    email: str, display_name: str, uid: str, records: List[ReservationRecord]
) -> UserSummary:
    """Compute statistics for one user's reservations."""
    total = len(records)
    days_active = len({record.day for record in records})
    avg = round(total / days_active, 2) if days_active > 0 else 0

    return UserSummary(
        email=email,
        display_name=display_name,
        uid=uid,
        total_reservations=total,
        days_active=days_active,
        favorite_section=_favorite_section(records),
        avg_daily_reservations=avg,
        cubicle_sequence=compress((r.date, r.cubicle_serial) for r in records),
        last_activity=max((to_utc(r.date) for r in records), default=None),
    )


class UserAggregator:
    """Builds UserSummary objects from a reservation source."""

    def __init__(self, source: ReservationSource):
        self.source = source

    def aggregate_all(self) -> List[UserSummary]:
        """One summary per distinct email, in order of first appearance.

        Records without an email are ignored. The display name and uid come
        from the first record seen for each email.
        """
        records = self.source.find()
        if not records:
            return []

        groups: Dict[str, List[ReservationRecord]] = {}
        for record in records:
            if not record.user_email:
                continue
            groups.setdefault(record.user_email, []).append(record)

        summaries = []
        for email, user_records in groups.items():
            first = user_records[0]
            summaries.append(
                summarize(email, first.user_display_name, first.user_id, user_records)
            )
        logger.debug(
            "users_aggregated", reservation_count=len(records), user_count=len(summaries)
        )
        return summaries

    def aggregate_one(
        self, user_id: str, date: Optional[str] = None
    ) -> Optional[UserSummary]:
        """Summary for a single user, or None when no reservation matches.

        Args:
            user_id: User identifier.
            date: Optional `YYYY-MM-DD` day; only reservations on that UTC day
                are counted.

        Raises:
            DateFilterError: If `date` is not a valid day.
        """
        start = end = None
        if date is not None:
            start, end = day_bounds(date)

        records = self.source.find(user_id=user_id, start=start, end=end)
        if not records:
            return None

        first = records[0]
        return summarize(
            first.user_email or "",
            first.user_display_name,
            first.user_id,
            records,
        )
