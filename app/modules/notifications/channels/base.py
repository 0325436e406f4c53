"""Delivery channel abstract base class.

All channel implementations (Email, Slack, Task) implement this interface.
"""

from abc import ABC, abstractmethod

from infrastructure.operations import OperationResult
from modules.notifications.errors import ChannelDeliveryError
from modules.notifications.models import DeliveryContext
from modules.reservations.models import UserSummary


class DeliveryChannel(ABC):
    """Abstract base class for delivery channels.

    Each channel owns its formatting and transport error handling. `send`
    raises ChannelDeliveryError on failure; the orchestrator decides what to
    do next.

    Example Implementation:
        class EmailChannel(DeliveryChannel):

            @property
            def channel_name(self) -> str:
                return "email"

            def is_configured(self) -> bool:
                return self.settings.has_credentials

            def send(self, user, context):
                result = self.transport.send_mail(...)
                return self.raise_for_result(result)
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Channel identifier (email, slack, task)."""
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """True when the channel has everything it needs to deliver."""
        pass

    @abstractmethod
    def send(self, user: UserSummary, context: DeliveryContext) -> OperationResult:
        """Deliver to one user.

        Returns:
            OperationResult with SUCCESS, or SKIPPED when the channel decided
            there was nothing to deliver.

        Raises:
            ChannelDeliveryError: When the channel is not configured or the
                transport failed.
        """
        pass

    def ensure_configured(self) -> None:
        if not self.is_configured():
            raise ChannelDeliveryError(
                self.channel_name,
                f"{self.channel_name} channel not configured",
                error_code="NOT_CONFIGURED",
            )

    def raise_for_result(self, result: OperationResult) -> OperationResult:
        """Pass successful results through; raise for failed ones."""
        if result.is_success or result.is_skipped:
            return result
        raise ChannelDeliveryError(
            self.channel_name, result.message, error_code=result.error_code
        )
