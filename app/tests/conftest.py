from datetime import datetime
from typing import Optional, Union

import pytest

from modules.reservations.models import ReservationRecord, UserSummary


@pytest.fixture
def reservation_factory():
    """Factory for creating ReservationRecord instances.

    Example:
        record = reservation_factory(serial="B2-SOC CUB4", section="B")
        other_day = reservation_factory(date="2024-01-02T10:00:00+00:00")
    """

    def _factory(
        user_id: str = "u-1",
        email: Optional[str] = "jane@example.com",
        display_name: str = "Jane Doe",
        serial: Optional[str] = "A1-SOC CUB1",
        section: Optional[str] = "A",
        date: Union[str, datetime] = "2024-01-01T09:00:00+00:00",
    ) -> ReservationRecord:
        if isinstance(date, str):
            date = datetime.fromisoformat(date)
        return ReservationRecord(
            user_id=user_id,
            user_email=email,
            user_display_name=display_name,
            cubicle_serial=serial,
            cubicle_section=section,
            date=date,
        )

    return _factory


@pytest.fixture
def user_summary_factory():
    """Factory for creating UserSummary instances."""

    def _factory(
        email: str = "jane@example.com",
        display_name: str = "Jane Doe",
        uid: str = "u-1",
        total_reservations: int = 3,
        days_active: int = 2,
        favorite_section: str = "A",
        avg_daily_reservations: float = 1.5,
        cubicle_sequence: str = "A1-SOC CUB1-A1-SOC CUB2, B1-SOC CUB4",
        last_activity: Optional[datetime] = None,
    ) -> UserSummary:
        return UserSummary(
            email=email,
            display_name=display_name,
            uid=uid,
            total_reservations=total_reservations,
            days_active=days_active,
            favorite_section=favorite_section,
            avg_daily_reservations=avg_daily_reservations,
            cubicle_sequence=cubicle_sequence,
            last_activity=last_activity,
        )

    return _factory
