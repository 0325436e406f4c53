"""Reservation models.

ReservationRecord is the read-only input joined from the reservation store;
UserSummary is derived from it on every query and never persisted.
"""

from datetime import date as date_type, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict


def to_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ReservationRecord(BaseModel):
    """A single cubicle reservation joined with its cubicle and user.

    Attributes:
        user_id: Stable user identifier
        user_email: User's email; records without one are ignored by bulk aggregation
        user_display_name: Display name, may be empty
        cubicle_serial: Cubicle code such as "A1-SOC CUB3"
        cubicle_section: Section letter of the cubicle
        date: Reservation timestamp; only the calendar day matters for grouping
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    user_email: Optional[str] = None
    user_display_name: str = ""
    cubicle_serial: Optional[str] = None
    cubicle_section: Optional[str] = None
    date: datetime

    @property
    def day(self) -> date_type:
        """UTC calendar day of the reservation."""
        return to_utc(self.date).date()


class UserSummary(BaseModel):
    """Per-user reservation statistics.

    Example:
        UserSummary(
            email="jane@example.com",
            display_name="Jane",
            uid="u-1",
            total_reservations=3,
            days_active=2,
            favorite_section="A",
            avg_daily_reservations=1.5,
            cubicle_sequence="A1-SOC CUB1-A1-SOC CUB2, B1-SOC CUB4",
        )
    """

    email: str
    display_name: str = ""
    uid: str = ""
    total_reservations: int = 0
    days_active: int = 0
    favorite_section: str = ""
    avg_daily_reservations: float = 0
    cubicle_sequence: str = ""
    last_activity: Optional[datetime] = None

    @property
    def name(self) -> str:
        """Display name, falling back to the email address."""
        return self.display_name or self.email
