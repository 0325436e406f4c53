"""AWS integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class AwsSettings(IntegrationSettings):
    """AWS configuration settings.

    Environment Variables:
        AWS_REGION: AWS region for services (default: ca-central-1)
        DYNAMODB_ENDPOINT_URL: Custom DynamoDB endpoint (LocalStack, dynamodb-local)
        RESERVATIONS_TABLE: Table holding denormalized reservation items
        NOTIFICATION_HISTORY_TABLE: Table receiving notification audit records
        NOTIFICATION_HISTORY_INDEX: GSI on (record_kind, created_at) of that table

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        region = settings.aws.AWS_REGION
        table = settings.aws.RESERVATIONS_TABLE
        ```
    """

    AWS_REGION: str = Field(default="ca-central-1", alias="AWS_REGION")
    DYNAMODB_ENDPOINT_URL: str | None = Field(
        default=None, alias="DYNAMODB_ENDPOINT_URL"
    )
    RESERVATIONS_TABLE: str = Field(
        default="cubicle_reservations", alias="RESERVATIONS_TABLE"
    )
    NOTIFICATION_HISTORY_TABLE: str = Field(
        default="cubicle_notification_history", alias="NOTIFICATION_HISTORY_TABLE"
    )
    NOTIFICATION_HISTORY_INDEX: str = Field(
        default="created_at-index", alias="NOTIFICATION_HISTORY_INDEX"
    )
