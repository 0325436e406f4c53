"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
one settings class per concern.

Exports:
    Settings: Main settings class (aggregator)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    webhook_url = settings.slack.SLACK_WEBHOOK_URL
    board_id = settings.monday.MONDAY_BOARD_ID
    ```
"""

from infrastructure.configuration.settings import Settings

__all__ = ["Settings"]
