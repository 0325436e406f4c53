"""Infrastructure modules for the cubicle notification service.

Centralized infrastructure components:
- configuration: Settings management (Settings)
- logging: Structured logging setup and request context (configure_logging)
- operations: Operation results and error classification
- persistence: DynamoDB storage for notification history
- services: Dependency injection providers (SettingsDep, get_settings)
"""

# Observability
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    # Observability
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
]
