"""Reservation sources.

A reservation source returns ReservationRecords, optionally restricted to one
user and to a half-open UTC time window.

Usage:
    source = DynamoDBReservationSource(table_name="cubicle_reservations")
    records = source.find(user_id="u-1", start=start, end=end)
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Protocol

import structlog
from boto3.dynamodb.types import TypeDeserializer  # type: ignore
from pydantic import ValidationError

from integrations.aws import dynamodb
from modules.reservations.models import ReservationRecord, to_utc

logger = structlog.get_logger()

FILTER_MARGIN = timedelta(days=1)


class ReservationSourceError(Exception):
    """Raised when the reservation store cannot be read."""


class ReservationSource(Protocol):
    """Read-only reservation store."""

    def find(
        self,
        user_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[ReservationRecord]:
        """Return reservations matching every given filter.

        Args:
            user_id: Restrict to one user.
            start: Inclusive lower bound on the reservation date.
            end: Exclusive upper bound on the reservation date.
        """
        ...


def _iso(value: datetime) -> str:
    return to_utc(value).isoformat()


def in_window(
    record: ReservationRecord,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> bool:
    """True when the record's UTC instant lies in [start, end)."""
    when = to_utc(record.date)
    if start is not None and when < to_utc(start):
        return False
    if end is not None and when >= to_utc(end):
        return False
    return True


class DynamoDBReservationSource:
    """Reads denormalized reservation items from a DynamoDB table.

    Each item carries `user_id`, `user_email`, `user_display_name`,
    `cubicle_serial`, `cubicle_section` and an ISO-8601 `date`.
    """

    def __init__(
        self,
        table_name: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        self.table_name = table_name
        self.region = region
        self.endpoint_url = endpoint_url
        self._deserializer = TypeDeserializer()

    def _build_filter(
        self,
        user_id: Optional[str],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> Dict[str, Any]:
        clauses: List[str] = []
        values: Dict[str, Any] = {}
        names: Dict[str, str] = {}

        if user_id is not None:
            clauses.append("user_id = :uid")
            values[":uid"] = {"S": user_id}
        # Stored dates may be date-only or carry a non-UTC offset, so the
        # string comparison only narrows candidates; find() re-checks in UTC.
        if start is not None:
            clauses.append("#d >= :start")
            values[":start"] = {"S": _iso(start - FILTER_MARGIN)}
            names["#d"] = "date"
        if end is not None:
            clauses.append("#d < :end")
            values[":end"] = {"S": _iso(end + FILTER_MARGIN)}
            names["#d"] = "date"

        if not clauses:
            return {}
        params: Dict[str, Any] = {
            "FilterExpression": " AND ".join(clauses),
            "ExpressionAttributeValues": values,
        }
        if names:
            params["ExpressionAttributeNames"] = names
        return params

    def _to_record(self, item: Dict[str, Any]) -> Optional[ReservationRecord]:
        plain = {key: self._deserializer.deserialize(value) for key, value in item.items()}
        raw_date = plain.get("date")
        if isinstance(raw_date, str) and raw_date.endswith("Z"):
            raw_date = raw_date[:-1] + "+00:00"
        try:
            return ReservationRecord(
                user_id=str(plain.get("user_id", "")),
                user_email=plain.get("user_email") or None,
                user_display_name=plain.get("user_display_name") or "",
                cubicle_serial=plain.get("cubicle_serial") or None,
                cubicle_section=plain.get("cubicle_section") or None,
                date=raw_date,
            )
        except ValidationError as e:
            logger.warning(
                "reservation_item_skipped",
                table=self.table_name,
                error=str(e),
            )
            return None

    def find(
        self,
        user_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[ReservationRecord]:
        result = dynamodb.scan(
            self.table_name,
            region=self.region,
            endpoint_url=self.endpoint_url,
            **self._build_filter(user_id, start, end),
        )
        if not result.is_success:
            logger.error(
                "reservation_scan_failed",
                table=self.table_name,
                error=result.message,
                error_code=result.error_code,
            )
            raise ReservationSourceError(result.message)

        records = []
        for item in result.data or []:
            record = self._to_record(item)
            if record is not None and in_window(record, start, end):
                records.append(record)
        logger.debug("reservations_loaded", table=self.table_name, count=len(records))
        return records


class InMemoryReservationSource:
    """Reservation source over a fixed list of records."""

    def __init__(self, records: Optional[Iterable[ReservationRecord]] = None):
        self.records: List[ReservationRecord] = list(records or [])

    def find(
        self,
        user_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[ReservationRecord]:
        return [
            record
            for record in self.records
            if (user_id is None or record.user_id == user_id)
            and in_window(record, start, end)
        ]
