"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    NotificationOrchestratorDep,
)
from infrastructure.services.providers import (
    build_notification_orchestrator,
    get_settings,
    get_notification_orchestrator,
)

__all__ = [
    "SettingsDep",
    "NotificationOrchestratorDep",
    "build_notification_orchestrator",
    "get_settings",
    "get_notification_orchestrator",
]
