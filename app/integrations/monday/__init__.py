"""Monday.com GraphQL integration."""

from integrations.monday.client import MondayAPIError, MondayClient, MondayItem

__all__ = ["MondayAPIError", "MondayClient", "MondayItem"]
