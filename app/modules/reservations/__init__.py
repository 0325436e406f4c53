"""Cubicle reservation read model.

Turns raw reservation records into per-user summaries:

- models: ReservationRecord and UserSummary
- sequence: compact cubicle-sequence text for a set of reservations
- aggregator: per-user statistics
- source: reservation stores (DynamoDB, in-memory)
- validation: day-filter parsing
"""

from modules.reservations.aggregator import UserAggregator
from modules.reservations.models import ReservationRecord, UserSummary
from modules.reservations.sequence import compress, is_sequential_code
from modules.reservations.source import (
    DynamoDBReservationSource,
    InMemoryReservationSource,
    ReservationSource,
    ReservationSourceError,
)
from modules.reservations.validation import (
    DateFilterError,
    day_bounds,
    is_valid_date_format,
)

__all__ = [
    "UserAggregator",
    "ReservationRecord",
    "UserSummary",
    "compress",
    "is_sequential_code",
    "ReservationSource",
    "DynamoDBReservationSource",
    "InMemoryReservationSource",
    "ReservationSourceError",
    "DateFilterError",
    "day_bounds",
    "is_valid_date_format",
]
