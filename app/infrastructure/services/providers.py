"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for settings and the
notification service graph.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.persistence.dynamodb_history import DynamoDBNotificationHistoryStore
from modules.notifications import (
    EmailChannel,
    NotificationHistory,
    NotificationOrchestrator,
    SlackChannel,
    TaskChannel,
)
from modules.reservations import DynamoDBReservationSource, UserAggregator


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process.

    Infrastructure packages should use this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


def build_notification_orchestrator(settings: Settings) -> NotificationOrchestrator:
    """Wire channels, history and the reservation source from settings."""
    timeout = settings.notifications.REQUEST_TIMEOUT_SECONDS

    source = DynamoDBReservationSource(
        table_name=settings.aws.RESERVATIONS_TABLE,
        region=settings.aws.AWS_REGION,
        endpoint_url=settings.aws.DYNAMODB_ENDPOINT_URL,
    )
    history_store = DynamoDBNotificationHistoryStore(
        table_name=settings.aws.NOTIFICATION_HISTORY_TABLE,
        index_name=settings.aws.NOTIFICATION_HISTORY_INDEX,
        region=settings.aws.AWS_REGION,
        endpoint_url=settings.aws.DYNAMODB_ENDPOINT_URL,
    )
    slack_channel = SlackChannel(
        settings.slack,
        enabled=settings.notifications.NOTIFICATIONS_ENABLED,
        timeout=timeout,
    )
    return NotificationOrchestrator(
        aggregator=UserAggregator(source),
        history=NotificationHistory(history_store),
        email_channel=EmailChannel(
            settings.smtp,
            frontend_url=settings.notifications.FRONTEND_URL,
            timeout=timeout,
        ),
        slack_channel=slack_channel,
        task_channel=TaskChannel(settings.monday, timeout=timeout, announcer=slack_channel),
    )


@lru_cache
def get_notification_orchestrator() -> NotificationOrchestrator:
    """
    Get application-scoped notification orchestrator singleton.

    Returns:
        NotificationOrchestrator: Orchestrator wired from application settings.

    Usage:
        @router.post("/notifications/bulk")
        def bulk(orchestrator: NotificationOrchestratorDep):
            return orchestrator.notify_all_users()
    """
    return build_notification_orchestrator(get_settings())
