"""DSH resource management API driver."""

from trifonius.drivers.dsh_api.client import DshApiClient, DshApiClientFactory

__all__ = ["DshApiClient", "DshApiClientFactory"]
