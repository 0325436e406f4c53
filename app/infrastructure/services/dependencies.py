"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.services.providers import (
    get_settings,
    get_notification_orchestrator,
)
from modules.notifications import NotificationOrchestrator

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Notification orchestrator dependency
NotificationOrchestratorDep = Annotated[
    NotificationOrchestrator, Depends(get_notification_orchestrator)
]

__all__ = [
    "SettingsDep",
    "NotificationOrchestratorDep",
]
