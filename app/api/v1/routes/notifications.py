"""Notification endpoints.

Thin HTTP layer over NotificationOrchestrator. Validation errors map to 400
and unknown users to 404; partial delivery failures are reported in the
response body with a 200.
"""

import threading
from datetime import datetime
from typing import Annotated, List, Optional

import structlog
from fastapi import APIRouter, Header, HTTPException, Query, Request
from pydantic import BaseModel

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import NotificationOrchestratorDep
from modules.notifications.errors import (
    NotificationError,
    NotificationValidationError,
    UserNotFoundError,
)
from modules.notifications.models import (
    BroadcastReport,
    BulkNotificationReport,
    CustomNotificationResult,
    HistoryStatistics,
    NotificationAttempt,
    NotifyUserResult,
)
from modules.reservations.models import UserSummary
from modules.reservations.source import ReservationSourceError

logger = structlog.get_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])
limiter = get_limiter()

InitiatorHeader = Annotated[Optional[str], Header(alias="X-Initiator-Id")]


class CustomNotificationRequest(BaseModel):
    channel: str
    message: str


class BroadcastRequest(BaseModel):
    type: str
    message: Optional[str] = None


def _shutdown_event(request: Request) -> Optional[threading.Event]:
    return getattr(request.app.state, "shutdown_event", None)


def _translate(exc: Exception) -> HTTPException:
    if isinstance(exc, NotificationValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, UserNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, NotificationError):
        logger.error("notification_history_unavailable", error=str(exc))
        return HTTPException(status_code=503, detail="Notification history unavailable")
    logger.error("reservation_source_unavailable", error=str(exc))
    return HTTPException(status_code=503, detail="Reservation data unavailable")


@router.get("/status")
def get_status(orchestrator: NotificationOrchestratorDep):
    """Configuration state of every channel."""
    return orchestrator.get_service_status()


@router.get("/users", response_model=List[UserSummary])
def list_users(orchestrator: NotificationOrchestratorDep):
    """All users with reservations and their cubicle sequences."""
    try:
        return orchestrator.get_users_with_sequences()
    except ReservationSourceError as e:
        raise _translate(e) from e


@router.get("/history", response_model=List[NotificationAttempt])
def get_history(
    orchestrator: NotificationOrchestratorDep,
    limit: int = Query(default=50),
):
    return orchestrator.recent_history(limit)


@router.get("/statistics", response_model=HistoryStatistics)
def get_statistics(
    orchestrator: NotificationOrchestratorDep,
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
):
    """Notification history totals, success rate and per-type counts."""
    try:
        return orchestrator.history_statistics(start_date, end_date)
    except NotificationError as e:
        raise _translate(e) from e


@router.post("/users/{user_id}", response_model=NotifyUserResult)
@limiter.limit("30/minute")
def notify_user(
    request: Request,  # pylint: disable=unused-argument
    user_id: str,
    orchestrator: NotificationOrchestratorDep,
    initiator_id: InitiatorHeader = None,
    date: Optional[str] = Query(default=None),
):
    """Send one user's reservation summary, optionally for a single day."""
    try:
        return orchestrator.notify_user(user_id, initiator_id=initiator_id, date=date)
    except (NotificationValidationError, UserNotFoundError, ReservationSourceError) as e:
        raise _translate(e) from e


@router.post("/users/{user_id}/custom", response_model=CustomNotificationResult)
@limiter.limit("30/minute")
def notify_user_custom(
    request: Request,  # pylint: disable=unused-argument
    user_id: str,
    body: CustomNotificationRequest,
    orchestrator: NotificationOrchestratorDep,
    initiator_id: InitiatorHeader = None,
):
    try:
        return orchestrator.notify_user_custom(
            user_id, body.channel, body.message, initiator_id=initiator_id
        )
    except (NotificationValidationError, UserNotFoundError, ReservationSourceError) as e:
        raise _translate(e) from e


@router.post("/bulk", response_model=BulkNotificationReport)
@limiter.limit("10/minute")
def notify_all_users(
    request: Request,
    orchestrator: NotificationOrchestratorDep,
    initiator_id: InitiatorHeader = None,
):
    """Send every user's summary on every configured channel."""
    try:
        return orchestrator.notify_all_users(
            initiator_id=initiator_id, cancel_event=_shutdown_event(request)
        )
    except ReservationSourceError as e:
        raise _translate(e) from e


@router.post("/broadcast", response_model=BroadcastReport)
@limiter.limit("10/minute")
def broadcast(
    request: Request,
    body: BroadcastRequest,
    orchestrator: NotificationOrchestratorDep,
    initiator_id: InitiatorHeader = None,
):
    try:
        return orchestrator.broadcast(
            body.type,
            body.message,
            initiator_id=initiator_id,
            cancel_event=_shutdown_event(request),
        )
    except (NotificationValidationError, ReservationSourceError) as e:
        raise _translate(e) from e
