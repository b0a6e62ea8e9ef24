"""Port interfaces for the engine."""

from trifonius.kernel.ports.config_source import ConfigSource
from trifonius.kernel.ports.platform_client import PlatformClient, PlatformClientFactory

__all__ = [
    "ConfigSource",
    "PlatformClient",
    "PlatformClientFactory",
]
