"""DSH service processor technology."""

from trifonius.processor.dshservice.config import (
    DshServiceConfig,
    DshServiceSection,
    EnvironmentInjection,
    MetricsConfig,
    ProfileConfig,
)
from trifonius.processor.dshservice.instance import DshServiceInstance
from trifonius.processor.dshservice.realization import DshServiceRealization

__all__ = [
    "DshServiceConfig",
    "DshServiceInstance",
    "DshServiceRealization",
    "DshServiceSection",
    "EnvironmentInjection",
    "MetricsConfig",
    "ProfileConfig",
]
