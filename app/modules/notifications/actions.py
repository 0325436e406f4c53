"""Task-worthiness classification.

Thresholds (percent utilization):
    avg >= 90                      -> urgent
    avg >= 85 or peak - avg > 40   -> high
    avg < 25 and total < 10        -> medium (promotional)
    otherwise                      -> no task
"""

from datetime import date
from typing import Optional

from modules.notifications.models import ActionNeeded, UtilizationSnapshot
from modules.reservations.models import UserSummary

RECOMMENDED_ACTIONS = {
    "urgent": [
        "Implement immediate booking restrictions",
        "Consider temporary capacity expansion",
        "Notify users of high demand periods",
        "Review and optimize space allocation",
    ],
    "high": [
        "Monitor capacity trends daily",
        "Plan for potential expansion",
        "Optimize peak hour management",
        "Review user booking patterns",
    ],
    "medium": [
        "Develop utilization improvement strategies",
        "Consider promotional campaigns",
        "Review space configuration",
        "Analyze user engagement metrics",
    ],
}


def determine_action_needed(snapshot: UtilizationSnapshot) -> ActionNeeded:
    avg = snapshot.avg_utilization
    peak = snapshot.peak_utilization

    if avg >= 90:
        return ActionNeeded(
            required=True,
            urgency="urgent",
            reason="Critical capacity reached - immediate action required",
        )

    if avg >= 85 or (peak - avg) > 40:
        return ActionNeeded(
            required=True,
            urgency="high",
            reason="High utilization or significant peak variance detected",
        )

    if avg < 25 and snapshot.total_reservations < 10:
        return ActionNeeded(
            required=True,
            urgency="medium",
            reason="Low utilization - consider promotional strategies",
        )

    return ActionNeeded(required=False)


def snapshot_for_user(user: UserSummary) -> UtilizationSnapshot:
    """Per-user proxy: average daily reservations x10 stands in for utilization."""
    return UtilizationSnapshot(
        avg_utilization=user.avg_daily_reservations * 10,
        peak_utilization=user.total_reservations,
        total_reservations=user.total_reservations,
        unique_users=1,
    )


def recommended_actions(urgency: Optional[str]) -> str:
    actions = RECOMMENDED_ACTIONS.get(urgency or "medium", RECOMMENDED_ACTIONS["medium"])
    return "\n".join(f"- {action}" for action in actions)


def task_description(user: UserSummary, action: ActionNeeded) -> str:
    """Text column for a user's task item."""
    return "\n".join(
        [
            f"Cubicle sequence follow-up for {user.name} ({user.email})",
            "",
            "Key Metrics:",
            f"- Total Reservations: {user.total_reservations}",
            f"- Days Active: {user.days_active}",
            f"- Avg Daily Reservations: {user.avg_daily_reservations}",
            f"- Favorite Section: {user.favorite_section or 'N/A'}",
            "",
            "Cubicle Sequence:",
            user.cubicle_sequence or "No reservations found",
            "",
            "Action Required:",
            action.reason or "",
            "",
            "Recommended Actions:",
            recommended_actions(action.urgency),
        ]
    )


def task_column_values(user: UserSummary, action: ActionNeeded, today: Optional[date] = None) -> dict:
    today = today or date.today()
    return {
        "status": {"label": action.urgency},
        "priority": {"label": action.urgency},
        "text": task_description(user, action),
        "date": today.isoformat(),
        "numbers": user.total_reservations,
    }
