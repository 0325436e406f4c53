"""Monday.com integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class MondaySettings(IntegrationSettings):
    """Monday.com API configuration.

    Environment Variables:
        MONDAY_API_KEY: API token sent in the Authorization header
        MONDAY_BOARD_ID: Board receiving created items
        MONDAY_API_URL: GraphQL endpoint (default: https://api.monday.com/v2)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        board_id = settings.monday.MONDAY_BOARD_ID
        ```
    """

    MONDAY_API_KEY: str | None = Field(default=None, alias="MONDAY_API_KEY")
    MONDAY_BOARD_ID: str | None = Field(default=None, alias="MONDAY_BOARD_ID")
    MONDAY_API_URL: str = Field(
        default="https://api.monday.com/v2", alias="MONDAY_API_URL"
    )
