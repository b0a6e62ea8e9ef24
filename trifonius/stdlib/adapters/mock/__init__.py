"""Mock implementations for testing purposes."""

from .mock_platform_client import (
    MockPlatformClient,
    MockPlatformClientFactory,
    MockPlatformState,
    RecordedCall,
)

__all__ = [
    "MockPlatformClient",
    "MockPlatformClientFactory",
    "MockPlatformState",
    "RecordedCall",
]
